from .base import AsyncRepository, QueryBuilder

__all__ = ["AsyncRepository", "QueryBuilder"]
