"""
모델 패키지
"""

from .document import Document

__all__ = [
    "Document",
]
