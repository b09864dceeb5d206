"""
Middleware classes for bitcrud applications.
"""

from .correlation import CorrelationIdMiddleware, get_correlation_id

__all__ = [
    "CorrelationIdMiddleware",
    "get_correlation_id",
]
