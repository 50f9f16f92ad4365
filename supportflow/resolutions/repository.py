"""Storage for resolution records."""
from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from . import schemas


class ResolutionRepository(Protocol):
    """Abstraction for persisting resolutions."""

    def get(self, resolution_id: str) -> Optional[schemas.Resolution]: ...

    def save(self, resolution: schemas.Resolution) -> schemas.Resolution: ...

    def list(self) -> List[schemas.Resolution]: ...


class InMemoryResolutionRepository:
    """Process-local implementation of :class:`ResolutionRepository`."""

    def __init__(self) -> None:
        self._resolutions: Dict[str, schemas.Resolution] = {}

    def get(self, resolution_id: str) -> Optional[schemas.Resolution]:
        resolution = self._resolutions.get(resolution_id)
        return resolution.model_copy(deep=True) if resolution else None

    def save(self, resolution: schemas.Resolution) -> schemas.Resolution:
        self._resolutions[resolution.id] = resolution.model_copy(deep=True)
        return resolution

    def list(self) -> List[schemas.Resolution]:
        return [r.model_copy(deep=True) for r in self._resolutions.values()]
