"""
Room grids cached per geometry.

The grid depends only on (vertices, height), so repeated generate/regenerate requests for
an unchanged room reuse it. Cached grids are shared and must be treated as read-only.
"""

from __future__ import annotations

from functools import lru_cache

from app.services.room_grid import RoomGrid, build_room_grid
from app.settings import load_settings


@lru_cache(maxsize=load_settings().grid_cache_size)
def _cached_grid(vertices: tuple[tuple[float, float], ...], height: float) -> RoomGrid:
    return build_room_grid(list(vertices), height)


def get_room_grid(vertices: list[tuple[float, float]], height: float) -> RoomGrid:
    """Grid for the room, built once per distinct geometry."""
    key = tuple((float(x), float(y)) for x, y in vertices)
    return _cached_grid(key, float(height))


def clear_grid_cache() -> None:
    _cached_grid.cache_clear()
