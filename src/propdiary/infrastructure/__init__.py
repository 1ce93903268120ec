"""Infrastructure layer implementations."""

from propdiary.infrastructure import storage

__all__ = ["storage"]
