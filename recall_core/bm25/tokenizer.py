"""
Tokenizer for BM25 text processing.

Tokenization pipeline:
1. Extract runs of ASCII letters, lowercase, drop short words and stopwords
2. Extract runs of digits, drop single digits
3. Extract runs of CJK ideographs, emit unigrams and overlapping bigrams
4. Drop everything else (other scripts, punctuation, whitespace)

No stemming: memory documents mix English identifiers and Chinese prose,
and the index must behave identically for both.
"""

import re
from typing import AbstractSet, List, Optional

# English stopwords (common function words, pronouns, quantifiers)
STOPWORDS_EN = frozenset([
    'a', 'an', 'the', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'from', 'as', 'is', 'was', 'are', 'were', 'been',
    'be', 'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would',
    'could', 'should', 'may', 'might', 'must', 'shall', 'can', 'need',
    'it', 'its', 'this', 'that', 'these', 'those', 'i', 'you', 'he', 'she',
    'we', 'they', 'what', 'which', 'who', 'whom', 'how', 'when', 'where', 'why',
    'not', 'no', 'yes', 'all', 'each', 'every', 'both', 'few', 'more', 'most',
    'other', 'some', 'such', 'only', 'own', 'same', 'so', 'than', 'too', 'very',
])

# Chinese stopwords (particles, pronouns, high-frequency verbs)
STOPWORDS_ZH = frozenset([
    '的', '了', '是', '在', '我', '有', '和', '就', '不', '人', '都', '一',
    '一个', '上', '也', '很', '到', '说', '要', '去', '你', '会', '着',
    '没有', '看', '好', '自己', '这', '那', '里', '啊', '吧', '呢', '吗',
    '什么', '怎么', '为什么', '这个', '那个', '可以', '没', '把', '被',
    '让', '给', '对', '等', '从', '用', '下', '出', '来', '还', '又',
])

STOPWORDS = STOPWORDS_EN | STOPWORDS_ZH

_WORD_PATTERN = re.compile(r'[a-zA-Z]+')
_NUMBER_PATTERN = re.compile(r'[0-9]+')
CJK_PATTERN = re.compile(r'[\u4e00-\u9fa5]+')


def cjk_ngrams(segment: str) -> List[str]:
    """Unigrams of a CJK run followed by its overlapping bigrams."""
    unigrams = list(segment)
    bigrams = [segment[i:i + 2] for i in range(len(segment) - 1)]
    return unigrams + bigrams


def tokenize(text: str, stop_words: Optional[AbstractSet[str]] = None) -> List[str]:
    """
    Tokenize text for BM25 scoring with stopword removal.
    
    Process:
    1. Latin words: lowercase, keep if 2+ letters and not a stopword
    2. Numbers: keep if 2+ digits (stopwords not applied)
    3. CJK: every character plus every adjacent pair, minus stopwords
    
    Args:
        text: Input text to tokenize
        stop_words: Stopword set (default: merged English + Chinese list)
        
    Returns:
        Ordered token list: words, then numbers, then CJK grams
        
    Examples:
        >>> tokenize("BM25 algorithm version 2.0")
        ['bm', 'algorithm', 'version', '25']
        
        >>> tokenize("这是测试")
        ['测', '试', '这是', '是测', '测试']
        
        >>> tokenize("   ")
        []
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, got {type(text).__name__}")
    
    stops = STOPWORDS if stop_words is None else stop_words
    tokens = []
    
    for word in _WORD_PATTERN.findall(text):
        lower = word.lower()
        if len(lower) >= 2 and lower not in stops:
            tokens.append(lower)
    
    for number in _NUMBER_PATTERN.findall(text):
        if len(number) >= 2:
            tokens.append(number)
    
    for segment in CJK_PATTERN.findall(text):
        tokens.extend(gram for gram in cjk_ngrams(segment) if gram not in stops)
    
    return tokens
