"""Service layer: owns the current index snapshot and its lifecycle."""

from blog_search.service_layer.search_service import NotBuiltError, SearchService, search


__all__ = ["NotBuiltError", "SearchService", "search"]
