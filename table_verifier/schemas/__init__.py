"""Bundled table schemas, registered on import."""

from .workunits import WorkunitsSchema

__all__ = [
    "WorkunitsSchema",
]
