"""HTTP API routes. Importing ``router`` and including it mounts them."""

from pokemath.api.auth import router

__all__ = ["router"]
