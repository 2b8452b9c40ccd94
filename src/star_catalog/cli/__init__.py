"""
Star Catalog CLI

Command-line interface for loading, filtering and searching star catalogs.
"""

__version__ = "0.1.0"
