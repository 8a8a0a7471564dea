"""
Database models
"""
from .document import Document, Counter

__all__ = [
    "Document",
    "Counter",
]
