"""Service layer for wallsync.

Clients for the external relays (presign, delete), the object-store PUT
transport, and filename-based naming helpers.
"""

from .base import RelayClient
from .delete import DeleteClient
from .naming import NameSuggestion, extract_themes, extract_wallpaper_name, suggest_name
from .presign import PresignClient
from .storage import ObjectStoreClient

__all__ = [
    "RelayClient",
    "PresignClient",
    "DeleteClient",
    "ObjectStoreClient",
    "NameSuggestion",
    "extract_themes",
    "extract_wallpaper_name",
    "suggest_name",
]
