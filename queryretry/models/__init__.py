"""Data models for the query retry pipeline.

This package contains Pydantic models for the requests and responses
that flow through pipeline handlers.
"""

from .query import QueryRequest, QueryResponse

__all__ = [
    "QueryRequest",
    "QueryResponse",
]
