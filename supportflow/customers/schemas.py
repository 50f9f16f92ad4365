"""Pydantic schemas for customers."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from ..schemas import ApiModel


class CustomerTier(str, Enum):
    FREE = "free"
    STANDARD = "standard"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class Customer(ApiModel):
    id: str
    name: str
    email: str | None = None
    company: str | None = None
    tier: CustomerTier = CustomerTier.STANDARD
    created_at: datetime


class CustomerCreate(ApiModel):
    name: str = Field(default="Unknown Customer", min_length=1)
    email: str | None = None
    company: str | None = None
    tier: CustomerTier = CustomerTier.STANDARD
