"""Favorites domain components split by responsibility.

Persistence, presentation and caching live in separate classes so the
orchestrating :class:`~inmo_api.services.favorites_service.FavoritesService`
can be tested with any of them swapped out.
"""

from .cache import FavoritesCache
from .persistence import FavoritesPersistence, public_code_for
from .presentation import FavoritesPresentation, favorite_location

__all__ = [
    "FavoritesCache",
    "FavoritesPersistence",
    "FavoritesPresentation",
    "favorite_location",
    "public_code_for",
]
