"""Question catalog: the fixed list of (category, question) pairs under review."""

from reviewdesk.catalog.loader import CatalogLoader, load_catalog, parse_catalog

__all__ = ["CatalogLoader", "load_catalog", "parse_catalog"]
