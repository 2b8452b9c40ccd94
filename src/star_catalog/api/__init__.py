"""
Star Catalog API - Indexing and Search Layer

This package contains the catalog, the subcube grid and the geometric
searches, separated from CLI presentation concerns.

The API is organized into subpackages:
- catalogs: Stars, the catalog index, filters, loading and searches
- core: Constants, exceptions, configuration and helpers
"""

# Activate deal contracts for runtime validation
import deal


deal.activate()

__all__: list[str] = [
    # Package is organized into subpackages - import directly from them:
    # from star_catalog.api.catalogs import ...
    # from star_catalog.api.core import ...
]
