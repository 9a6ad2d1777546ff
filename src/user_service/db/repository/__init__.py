from .base import BaseRepository, QueryResult, parse_object_id

__all__ = ["BaseRepository", "QueryResult", "parse_object_id"]
