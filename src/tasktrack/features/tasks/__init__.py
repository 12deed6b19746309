"""Task dashboard feature: list, filter, search, create, edit, complete and delete."""

from tasktrack.features.tasks.handlers import router

__all__ = ["router"]
