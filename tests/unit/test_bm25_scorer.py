"""
Unit tests for BM25Scorer.
"""

import math

import pytest
from recall_core.bm25.scorer import BM25Scorer


class TestBM25Scorer:
    """Test BM25 scoring logic"""
    
    def test_basic_scoring(self):
        """Test single-term score against the formula"""
        scorer = BM25Scorer()
        
        score = scorer.score(
            query_terms=["cat"],
            doc_term_frequencies={"cat": 1, "sat": 1, "mat": 1},
            doc_length=3,
            term_doc_freq={"cat": 1, "sat": 2, "mat": 1},
            total_docs=2,
            avgdl=3.0,
        )
        
        # idf = ln((2 - 1 + 0.5) / (1 + 0.5) + 1) = ln 2, tf_norm = 1 at avgdl
        assert score == pytest.approx(math.log(2))
    
    def test_idf_formula(self):
        """Test IDF values including common terms"""
        assert BM25Scorer.idf(doc_freq=1, total_docs=10) == pytest.approx(
            math.log((10 - 1 + 0.5) / (1 + 0.5) + 1)
        )
        # Term in every document still has positive IDF
        assert BM25Scorer.idf(doc_freq=10, total_docs=10) > 0
    
    def test_rare_terms_weigh_more(self):
        """Test IDF decreases with document frequency"""
        assert BM25Scorer.idf(1, 100) > BM25Scorer.idf(50, 100)
    
    def test_zero_score_no_matches(self):
        """Test that score is zero when no query term matches"""
        scorer = BM25Scorer()
        
        score = scorer.score(
            query_terms=["nonexistent", "terms"],
            doc_term_frequencies={"kubernetes": 10, "deployment": 5},
            doc_length=15,
            term_doc_freq={"kubernetes": 1, "deployment": 1},
            total_docs=1,
            avgdl=15.0,
        )
        
        assert score == 0.0
    
    def test_duplicate_query_terms_count_twice(self):
        """Test that each query occurrence contributes"""
        scorer = BM25Scorer()
        kwargs = dict(
            doc_term_frequencies={"cat": 1},
            doc_length=1,
            term_doc_freq={"cat": 1},
            total_docs=3,
            avgdl=1.0,
        )
        
        single = scorer.score(query_terms=["cat"], **kwargs)
        double = scorer.score(query_terms=["cat", "cat"], **kwargs)
        
        assert double == pytest.approx(2 * single)
    
    def test_length_normalization(self):
        """Test that longer documents get penalized"""
        scorer = BM25Scorer(b=0.75)
        
        short = scorer.tf_norm(tf=3, doc_length=50, avgdl=100.0)
        long = scorer.tf_norm(tf=3, doc_length=200, avgdl=100.0)
        
        assert short > long
    
    def test_no_length_normalization_when_b_zero(self):
        """Test that b=0 ignores document length"""
        scorer = BM25Scorer(b=0.0)
        
        assert scorer.tf_norm(3, 10, 100.0) == scorer.tf_norm(3, 1000, 100.0)
    
    def test_term_frequency_saturation(self):
        """Test k1 parameter controls TF saturation"""
        scorer = BM25Scorer(k1=1.2)
        
        low = scorer.tf_norm(tf=1, doc_length=100, avgdl=100.0)
        high = scorer.tf_norm(tf=100, doc_length=100, avgdl=100.0)
        
        # High TF scores higher, but never beyond k1 + 1
        assert high > low
        assert high < low * 10
        assert high < scorer.k1 + 1
    
    def test_zero_average_length_guard(self):
        """Test avgdl=0 falls back to no normalization instead of dividing by zero"""
        scorer = BM25Scorer(k1=1.2, b=0.75)
        
        # tf_norm = 1 * 2.2 / (1 + 1.2 * 1)
        assert scorer.tf_norm(tf=1, doc_length=0, avgdl=0.0) == pytest.approx(1.0)
    
    def test_empty_query(self):
        """Test handling of empty query"""
        scorer = BM25Scorer()
        
        score = scorer.score(
            query_terms=[],
            doc_term_frequencies={"kubernetes": 10},
            doc_length=10,
            term_doc_freq={"kubernetes": 1},
            total_docs=1,
            avgdl=10.0,
        )
        
        assert score == 0.0
    
    @pytest.mark.parametrize("k1", [0, -1.0, "1.2", None, True])
    def test_invalid_k1(self, k1):
        """Test that k1 must be a positive number"""
        with pytest.raises(ValueError):
            BM25Scorer(k1=k1)
    
    @pytest.mark.parametrize("b", [-0.1, 1.5, "0.75", None])
    def test_invalid_b(self, b):
        """Test that b must be within [0, 1]"""
        with pytest.raises(ValueError):
            BM25Scorer(b=b)
    
    def test_boundary_b_values_accepted(self):
        """Test that b=0 and b=1 are valid"""
        assert BM25Scorer(b=0).b == 0.0
        assert BM25Scorer(b=1).b == 1.0
