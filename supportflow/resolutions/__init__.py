"""Long-running resolution records spawned from escalations."""

from . import schemas
from .service import ResolutionService

__all__ = ["ResolutionService", "schemas"]
