from .base import BaseClient
from .listing_client import FetchedCollection, ListingClient, parse_collection

__all__ = [
    "BaseClient",
    "FetchedCollection",
    "ListingClient",
    "parse_collection",
]
