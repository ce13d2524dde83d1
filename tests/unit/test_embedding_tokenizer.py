"""
Unit tests for the embedding tokenizer.
"""

import pytest
from recall_core.embeddings import tokenize_for_embedding


class TestEmbeddingTokenizer:
    """Test tokenization rules for TF-IDF embeddings"""
    
    def test_english_words(self):
        """Test lowercasing and single-letter removal"""
        assert tokenize_for_embedding("Hello, a World") == ["hello", "world"]
    
    def test_stopwords_kept(self):
        """Test that no stopword filtering happens"""
        assert tokenize_for_embedding("the cat") == ["the", "cat"]
    
    def test_numbers_dropped(self):
        """Test that digits never become tokens"""
        assert tokenize_for_embedding("abc 123 4567") == ["abc"]
    
    def test_chinese_unigrams_and_bigrams(self):
        """Test CJK n-grams without stopword removal"""
        assert tokenize_for_embedding("你好世界") == ["你", "好", "世", "界", "你好", "好世", "世界"]
        # 的 is a BM25 stopword but kept here
        assert tokenize_for_embedding("的") == ["的"]
    
    def test_mixed_order(self):
        """Test words first, then CJK segments"""
        assert tokenize_for_embedding("测试 Code 代码") == ["code", "测", "试", "测试", "代", "码", "代码"]
    
    def test_empty(self):
        """Test empty input"""
        assert tokenize_for_embedding("") == []
        assert tokenize_for_embedding("1 2 3 !?") == []
    
    def test_non_string_rejected(self):
        """Test malformed input fails fast"""
        with pytest.raises(TypeError):
            tokenize_for_embedding(b"bytes")
