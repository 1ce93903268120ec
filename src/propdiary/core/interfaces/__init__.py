"""Core interfaces (ports) for dependency injection."""

from propdiary.core.interfaces.storage import (
    IOverlayStore,
    IPropertyStore,
    ITenancyStore,
    IUnitStore,
)

__all__ = [
    # Record stores
    "IPropertyStore",
    "IUnitStore",
    "ITenancyStore",
    # Overlay store
    "IOverlayStore",
]
