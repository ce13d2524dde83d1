"""
Okapi BM25 scorer.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.
The scorer itself is stateless: corpus statistics (N, df, avgdl) are passed in
by the engine that owns them.

Formula:
    idf(t)       = ln((N - df(t) + 0.5) / (df(t) + 0.5) + 1)
    tf_norm(t,D) = (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))
    score(D, Q)  = Σ idf(t) × tf_norm(t, D)   for t in Q with tf > 0

Where:
    tf = term frequency in document
    N = total number of documents
    df(t) = number of documents containing t at least once
    k1 = term frequency saturation parameter (default: 1.2)
    b = length normalization parameter (default: 0.75)
    dl = document length (number of tokens)
    avgdl = average document length over the corpus

The "+ 1" inside the logarithm keeps IDF positive even for terms present in
more than half of the documents.
"""

import math
from typing import Dict, List


class BM25Scorer:
    """
    BM25 scoring over externally maintained corpus statistics.
    """

    def __init__(self, k1: float = 1.2, b: float = 0.75):
        """
        Initialize BM25 scorer.

        Args:
            k1: Term frequency saturation parameter
                Higher = more weight to term frequency
                Must be > 0
                Default: 1.2 (standard)

            b: Length normalization parameter
                Higher = more penalty for long documents
                Range: 0.0 - 1.0
                Default: 0.75 (standard)

        Raises:
            ValueError: k1 not positive or b outside [0, 1]
        """
        if isinstance(k1, bool) or not isinstance(k1, (int, float)) or not k1 > 0:
            raise ValueError(f"k1 must be a positive number, got {k1!r}")
        if isinstance(b, bool) or not isinstance(b, (int, float)) or not 0.0 <= b <= 1.0:
            raise ValueError(f"b must be a number in [0, 1], got {b!r}")

        self.k1 = float(k1)
        self.b = float(b)

    @staticmethod
    def idf(doc_freq: int, total_docs: int) -> float:
        """Robertson-Sparck Jones IDF with +1 smoothing (always > 0)."""
        return math.log((total_docs - doc_freq + 0.5) / (doc_freq + 0.5) + 1)

    def tf_norm(self, tf: int, doc_length: int, avgdl: float) -> float:
        """Saturated, length-normalized term frequency."""
        if avgdl > 0:
            length_ratio = doc_length / avgdl
        else:
            # Only zero-length documents: skip length normalization
            length_ratio = 1.0

        numerator = tf * (self.k1 + 1)
        denominator = tf + self.k1 * (1 - self.b + self.b * length_ratio)
        return numerator / denominator

    def score(
        self,
        query_terms: List[str],
        doc_term_frequencies: Dict[str, int],
        doc_length: int,
        term_doc_freq: Dict[str, int],
        total_docs: int,
        avgdl: float,
    ) -> float:
        """
        Compute BM25 score for a document given query terms.

        Args:
            query_terms: Tokenized query (duplicates contribute once per occurrence)
            doc_term_frequencies: Term frequency map {term: count}
            doc_length: Total number of tokens in document
            term_doc_freq: Corpus document frequency map {term: doc count}
            total_docs: Number of documents in the corpus
            avgdl: Average document length in the corpus

        Returns:
            BM25 score (0.0 when no query term occurs in the document)

        Example:
            >>> scorer = BM25Scorer()
            >>> scorer.score(
            ...     query_terms=["cat"],
            ...     doc_term_frequencies={"cat": 1, "sat": 1, "mat": 1},
            ...     doc_length=3,
            ...     term_doc_freq={"cat": 1, "sat": 2, "mat": 1},
            ...     total_docs=2,
            ...     avgdl=3.0,
            ... )
            0.6931...  # ln(1.5/1.5 + 1) × 1.0
        """
        if not query_terms or not doc_term_frequencies:
            return 0.0

        score = 0.0

        for term in query_terms:
            tf = doc_term_frequencies.get(term, 0)

            # No partial credit for absent terms
            if tf == 0:
                continue

            idf = self.idf(term_doc_freq.get(term, 0), total_docs)
            score += idf * self.tf_norm(tf, doc_length, avgdl)

        return score
