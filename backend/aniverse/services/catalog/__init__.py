from .service import SEARCH_PARAMS, CatalogService

__all__ = ["SEARCH_PARAMS", "CatalogService"]
