from .classifier import classify, sentiment_score, keyword_hits

__all__ = ["classify", "sentiment_score", "keyword_hits"]
