"""
Session Module - Summaries across the answers of one practice session.
"""
from .summary import SessionSummary, CategorySummary, summarize_session

__all__ = [
    "SessionSummary",
    "CategorySummary",
    "summarize_session"
]
