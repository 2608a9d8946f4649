"""Catalog search and canonical song records."""

from catalog.client import CatalogClient
from catalog.models import ImportResult, SongCandidate

__all__ = ["CatalogClient", "ImportResult", "SongCandidate"]
