"""Customer identity records."""

from . import schemas
from .service import CustomerService

__all__ = ["CustomerService", "schemas"]
