"""
Custom exception classes for the star catalog.

This module defines specific exceptions for the recoverable errors that
can occur when looking stars up or loading catalog data. Programming
errors (querying a catalog before it is sorted or indexed) are reported
through ``deal`` contract failures instead.
"""

from __future__ import annotations


__all__ = [
    "CatalogFileNotFoundError",
    # Configuration exceptions
    "ConfigurationError",
    # Data import exceptions
    "DataImportError",
    "InvalidCatalogFormatError",
    # Handle exceptions
    "StaleHandleError",
    # Base exception
    "StarCatalogError",
    "StarIdNotFoundError",
    "StarNameNotFoundError",
    # Lookup exceptions
    "StarNotFoundError",
]


class StarCatalogError(Exception):
    """
    Base exception for all star catalog errors.

    All custom exceptions in this library inherit from this base class,
    making it easy to catch all catalog-related errors.
    """

    pass


# ============================================================================
# Handle Exceptions
# ============================================================================


class StaleHandleError(StarCatalogError):
    """
    Raised when a StarHandle is used after the catalog was changed, or
    with a catalog other than the one that issued it.

    Handles are only valid until the next call to add_star(), retain()
    or sort() on the catalog that issued them.
    """

    pass


# ============================================================================
# Lookup Exceptions
# ============================================================================


class StarNotFoundError(StarCatalogError):
    """Base exception for failed star lookups."""

    pass


class StarIdNotFoundError(StarNotFoundError):
    """Raised when no star in the catalog has the requested id."""

    def __init__(self, star_id: int) -> None:
        super().__init__(f"Failed to find star with id {star_id}")
        self.star_id = star_id


class StarNameNotFoundError(StarNotFoundError):
    """Raised when no star in the catalog has been given the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Failed to find star with name '{name}'")
        self.name = name


# ============================================================================
# Data Import Exceptions
# ============================================================================


class DataImportError(StarCatalogError):
    """Base exception for data import errors."""

    pass


class CatalogFileNotFoundError(DataImportError):
    """Raised when a catalog or names file does not exist."""

    pass


class InvalidCatalogFormatError(DataImportError):
    """Raised when catalog or names data cannot be understood."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(StarCatalogError):
    """Raised when configuration values are missing or invalid."""

    pass
