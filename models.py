"""
Pydantic data models for the company registry service.

These models describe the single business entity (Company) as it flows
between the HTTP layer, the relational store and the event stream.
"""

from pydantic import BaseModel
from typing import Optional
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class LegalType(str, Enum):
    CORPORATIONS = "Corporations"
    NON_PROFIT = "NonProfit"
    COOPERATIVE = "Cooperative"
    SOLE_PROPRIETORSHIP = "Sole Proprietorship"


class Role(str, Enum):
    READER = "reader"
    WRITER = "writer"


class EventKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


LEGAL_TYPES = frozenset(t.value for t in LegalType)

NAME_MAX_LENGTH = 15
DESCRIPTION_MAX_LENGTH = 3000


# ---------------------------------------------------------------------------
# Core Entities
# ---------------------------------------------------------------------------

class Company(BaseModel):
    """
    A stored company record.
    The id is generated by the store and never changes.
    """
    id: str
    name: str
    description: str = ""
    employee_count: int = 0
    is_registered: bool = False
    legal_type: LegalType


class CompanyDraft(BaseModel):
    """Field values for a company that has not been stored yet."""
    name: str
    description: str = ""
    employee_count: int = 0
    is_registered: bool = False
    legal_type: LegalType


class CompanyPatch(BaseModel):
    """
    Partial update of a company.
    None marks a field as absent: the stored value is kept.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    employee_count: Optional[int] = None
    is_registered: Optional[bool] = None
    legal_type: Optional[LegalType] = None


class CompanyEvent(BaseModel):
    """Change notification published after a successful mutation."""
    id: str
    event: EventKind
    timestamp: int = 0
