"""
In-process BM25 ranking engine for memory documents.

Owns the corpus statistics (per-document token lists and lengths, document
frequencies, average length). Mutations only mark the index stale; statistics
are recomputed in full by build_index(), either explicitly or lazily on the
next search. Rebuild cost is O(total corpus tokens), which is fine for
per-agent memory corpora but not for web-scale collections.

Not thread-safe: wrap an engine in a lock (or give it a single owner) if it is
shared between threads.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config import RetrievalSettings
from .scorer import BM25Scorer
from .tokenizer import STOPWORDS, tokenize

logger = logging.getLogger(__name__)

DEFAULT_FIELD_WEIGHTS = {"text": 1}


@dataclass
class BM25Document:
    """Memory document to index"""
    id: str
    text: str
    fields: Optional[Dict[str, str]] = None  # Extra named fields (topics, files, ...)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BM25Document":
        if "id" not in data:
            raise ValueError("Document is missing required 'id'")
        return cls(id=data["id"], text=data.get("text", ""), fields=data.get("fields"))

    def to_dict(self) -> Dict[str, Any]:
        result = {"id": self.id, "text": self.text}
        if self.fields is not None:
            result["fields"] = dict(self.fields)
        return result


@dataclass
class BM25SearchResult:
    """Single ranked search hit"""
    id: str
    score: float                                            # Always > 0
    matched_terms: List[str] = field(default_factory=list)  # Query terms found in the document


DocumentLike = Union[BM25Document, Mapping[str, Any]]


class BM25Engine:
    """
    BM25 keyword index with add/update/remove and lazy rebuild.

    Usage:
        engine = BM25Engine()
        engine.add_document(BM25Document(id="1", text="the cat sat on the mat"))
        engine.add_document({"id": "2", "text": "the dog sat on the log"})
        engine.build_index()  # optional, search() rebuilds a stale index
        results = engine.search("cat")
    """

    def __init__(
        self,
        k1: float = 1.2,
        b: float = 0.75,
        field_weights: Optional[Mapping[str, int]] = None,
        stop_words: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            k1: Term frequency saturation (> 0)
            b: Length normalization (0.0 - 1.0)
            field_weights: Repetition count per extra field name (default: {"text": 1}).
                Fields without an entry are weighted 1.
            stop_words: Stopwords for documents and queries
                (default: merged English + Chinese list)

        Raises:
            ValueError: Invalid k1, b or field weights
        """
        self._scorer = BM25Scorer(k1=k1, b=b)
        self._field_weights = self._validate_field_weights(
            DEFAULT_FIELD_WEIGHTS if field_weights is None else field_weights
        )
        self._stop_words = STOPWORDS if stop_words is None else frozenset(stop_words)

        self._documents: Dict[str, BM25Document] = {}
        self._document_tokens: Dict[str, List[str]] = {}
        self._document_lengths: Dict[str, int] = {}
        self._term_doc_freq: Dict[str, int] = {}
        self._avg_doc_length = 0.0
        self._total_docs = 0
        self._is_index_built = False

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def k1(self) -> float:
        return self._scorer.k1

    @property
    def b(self) -> float:
        return self._scorer.b

    @property
    def field_weights(self) -> Dict[str, int]:
        return dict(self._field_weights)

    @property
    def stop_words(self) -> frozenset:
        return frozenset(self._stop_words)

    @staticmethod
    def _validate_field_weights(field_weights: Mapping[str, int]) -> Dict[str, int]:
        validated = {}
        for name, weight in field_weights.items():
            if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
                raise ValueError(
                    f"Field weight for '{name}' must be a non-negative integer, got {weight!r}"
                )
            validated[name] = weight
        return validated

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_document(self, doc: DocumentLike) -> None:
        """
        Add a document, replacing any existing document with the same id.

        Marks the index stale; statistics are not recomputed until the next
        build_index() or search().

        Raises:
            ValueError: Missing or empty id
            TypeError: Non-string id, text or field value
        """
        document = self._coerce_document(doc)

        if document.id in self._documents:
            self.remove_document(document.id)

        tokens = self._tokenize_document(document)
        self._documents[document.id] = document
        self._document_tokens[document.id] = tokens
        self._document_lengths[document.id] = len(tokens)
        self._is_index_built = False

    def add_documents(self, docs: Iterable[DocumentLike]) -> None:
        for doc in docs:
            self.add_document(doc)

    def remove_document(self, doc_id: str) -> bool:
        """Remove a document. Returns True if it existed."""
        if doc_id not in self._documents:
            return False

        del self._documents[doc_id]
        del self._document_tokens[doc_id]
        del self._document_lengths[doc_id]
        self._is_index_built = False
        return True

    def clear(self) -> None:
        """Drop all documents and statistics."""
        self._documents.clear()
        self._document_tokens.clear()
        self._document_lengths.clear()
        self._term_doc_freq = {}
        self._avg_doc_length = 0.0
        self._total_docs = 0
        # Empty statistics are already consistent with an empty corpus
        self._is_index_built = True

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def build_index(self) -> None:
        """Recompute N, avgdl and df(t) from scratch over all documents."""
        self._total_docs = len(self._documents)

        if self._total_docs == 0:
            self._term_doc_freq = {}
            self._avg_doc_length = 0.0
            self._is_index_built = True
            return

        self._avg_doc_length = sum(self._document_lengths.values()) / self._total_docs

        term_doc_freq: Counter = Counter()
        for tokens in self._document_tokens.values():
            term_doc_freq.update(set(tokens))
        self._term_doc_freq = dict(term_doc_freq)

        self._is_index_built = True
        logger.debug(
            f"Built BM25 index: {len(self._term_doc_freq)} unique terms from "
            f"{self._total_docs} documents (avgdl={self._avg_doc_length:.2f})"
        )

    def search(self, query: str, top_k: int = 10) -> List[BM25SearchResult]:
        """
        Rank documents against a free-text query.

        Args:
            query: Query text (tokenized with the engine's stopwords)
            top_k: Maximum number of results

        Returns:
            Results with score > 0, sorted by score (descending).
            Empty list for an empty corpus or a query without tokens.

        Raises:
            TypeError: Non-string query
            ValueError: Negative top_k
        """
        if not isinstance(query, str):
            raise TypeError(f"query must be str, got {type(query).__name__}")
        if top_k < 0:
            raise ValueError(f"top_k must be >= 0, got {top_k}")

        if not self._is_index_built:
            self.build_index()

        if self._total_docs == 0:
            return []

        query_terms = tokenize(query, self._stop_words)
        if not query_terms:
            return []

        results = []
        for doc_id, tokens in self._document_tokens.items():
            term_frequencies = Counter(tokens)
            score = self._scorer.score(
                query_terms=query_terms,
                doc_term_frequencies=term_frequencies,
                doc_length=self._document_lengths[doc_id],
                term_doc_freq=self._term_doc_freq,
                total_docs=self._total_docs,
                avgdl=self._avg_doc_length,
            )
            if score > 0:
                matched_terms = [term for term in query_terms if term in term_frequencies]
                results.append(BM25SearchResult(id=doc_id, score=score, matched_terms=matched_terms))

        # Stable sort: equal scores keep insertion order
        results.sort(key=lambda r: r.score, reverse=True)
        return results[:top_k]

    def _tokenize_document(
        self,
        doc: BM25Document,
        stop_words: Optional[frozenset] = None,
        field_weights: Optional[Dict[str, int]] = None,
    ) -> List[str]:
        if stop_words is None:
            stop_words = self._stop_words
        if field_weights is None:
            field_weights = self._field_weights

        tokens = tokenize(doc.text, stop_words) if doc.text else []

        # Field weighting by repeating the field's tokens
        for name, value in (doc.fields or {}).items():
            weight = field_weights.get(name, 1)
            tokens.extend(tokenize(value, stop_words) * weight)

        return tokens

    @staticmethod
    def _coerce_document(doc: DocumentLike) -> BM25Document:
        if not isinstance(doc, BM25Document):
            if not isinstance(doc, Mapping):
                raise TypeError(f"Document must be BM25Document or mapping, got {type(doc).__name__}")
            doc = BM25Document.from_dict(doc)

        if not isinstance(doc.id, str):
            raise TypeError(f"Document id must be str, got {type(doc.id).__name__}")
        if not doc.id:
            raise ValueError("Document id must not be empty")
        if not isinstance(doc.text, str):
            raise TypeError(f"Document '{doc.id}' text must be str, got {type(doc.text).__name__}")
        for name, value in (doc.fields or {}).items():
            if not isinstance(value, str):
                raise TypeError(
                    f"Document '{doc.id}' field '{name}' must be str, got {type(value).__name__}"
                )
        return doc

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def document_count(self) -> int:
        """Number of stored documents (always current)."""
        return len(self._documents)

    @property
    def vocabulary_size(self) -> int:
        """Number of distinct terms as of the last rebuild."""
        return len(self._term_doc_freq)

    @property
    def total_docs(self) -> int:
        return self._total_docs

    @property
    def avg_doc_length(self) -> float:
        return self._avg_doc_length

    @property
    def term_doc_freq(self) -> Dict[str, int]:
        return dict(self._term_doc_freq)

    @property
    def is_index_built(self) -> bool:
        return self._is_index_built

    def get_document(self, doc_id: str) -> Optional[BM25Document]:
        return self._documents.get(doc_id)

    def get_document_tokens(self, doc_id: str) -> Optional[List[str]]:
        tokens = self._document_tokens.get(doc_id)
        return list(tokens) if tokens is not None else None

    def get_stats(self) -> Dict[str, Any]:
        """Index statistics as of the last rebuild."""
        return {
            "documentCount": self._total_docs,
            "vocabularySize": len(self._term_doc_freq),
            "avgDocLength": self._avg_doc_length,
            "isIndexBuilt": self._is_index_built,
        }

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_index(self) -> Dict[str, Any]:
        """
        Export configuration and documents for persistence.

        Stopwords are not exported; see import_index().
        """
        return {
            "config": {
                "k1": self.k1,
                "b": self.b,
                "fieldWeights": dict(self._field_weights),
            },
            "documents": [doc.to_dict() for doc in self._documents.values()],
        }

    def import_index(
        self,
        data: Mapping[str, Any],
        stop_words: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Replace all state with an exported index and rebuild eagerly.

        Config and documents are validated and tokenized before anything is
        replaced, so a failed import leaves the engine untouched.

        Args:
            data: Output of export_index() ({"config": {...}, "documents": [...]})
            stop_words: Stopwords to restore. The export format does not carry
                them, so without this argument (or a "stopWords" entry in
                data["config"]) the default list is used.

        Raises:
            ValueError: Invalid config or documents
            TypeError: Non-string document id, text or field value
        """
        scorer = self._scorer
        field_weights = self._field_weights
        new_stop_words = self._stop_words

        config = data.get("config")
        if config is not None:
            scorer = BM25Scorer(k1=config.get("k1", self.k1), b=config.get("b", self.b))
            field_weights = self._validate_field_weights(
                config.get("fieldWeights", self._field_weights)
            )
            if stop_words is None:
                stop_words = config.get("stopWords")
            new_stop_words = STOPWORDS if stop_words is None else frozenset(stop_words)
        elif stop_words is not None:
            new_stop_words = frozenset(stop_words)

        prepared: Dict[str, tuple] = {}
        for raw in data.get("documents", []):
            document = self._coerce_document(raw)
            tokens = self._tokenize_document(document, new_stop_words, field_weights)
            # Duplicate ids: last one wins and moves to the end, as with add_document()
            prepared.pop(document.id, None)
            prepared[document.id] = (document, tokens)

        self._scorer = scorer
        self._field_weights = field_weights
        self._stop_words = new_stop_words

        self.clear()
        for doc_id, (document, tokens) in prepared.items():
            self._documents[doc_id] = document
            self._document_tokens[doc_id] = tokens
            self._document_lengths[doc_id] = len(tokens)
        self.build_index()

        logger.info(f"Imported BM25 index: {self.document_count} documents")


def create_bm25_engine(settings: Optional[RetrievalSettings] = None, **config) -> BM25Engine:
    """
    Create a BM25 engine (keyword arguments as for BM25Engine).

    k1 and b default to BM25_K1 / BM25_B from the settings
    (default: read from environment).
    """
    if settings is None:
        settings = RetrievalSettings.from_env()
    config.setdefault("k1", settings.bm25_k1)
    config.setdefault("b", settings.bm25_b)
    return BM25Engine(**config)
