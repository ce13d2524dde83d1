"""
BM25 (Best Match 25) keyword ranking for memory retrieval.

Components:
- tokenizer: Latin/number/CJK tokenization with stopword removal
- scorer: Okapi BM25 formula over supplied corpus statistics
- engine: Document store, corpus statistics and ranked search
- snapshot: JSON persistence of exported indexes

Field weighting is approximated by repeating a field's tokens, so a heavily
weighted field also inflates the single shared term frequency; this is not
BM25F.
"""

from .tokenizer import tokenize, STOPWORDS
from .scorer import BM25Scorer
from .engine import BM25Document, BM25Engine, BM25SearchResult, create_bm25_engine
from .snapshot import save_index_snapshot, load_index_snapshot

__all__ = [
    "tokenize",
    "STOPWORDS",
    "BM25Scorer",
    "BM25Document",
    "BM25Engine",
    "BM25SearchResult",
    "create_bm25_engine",
    "save_index_snapshot",
    "load_index_snapshot",
]
