"""
Maps Business Crawler - Pydantic Data Schemas

Core data models for the search pipeline: the validated search input,
the mutable candidate produced by the list pass, and the flat record
that gets persisted.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


POSTAL_CODE_RE = re.compile(r"^\d{5}$")
MAX_CATEGORY_LENGTH = 100


class SearchQuery(BaseModel):
    """Category + postal code pair typed in by the user."""

    category: str = Field(
        ...,
        description="Business category, e.g. 'zahnarzt' or 'restaurants'"
    )

    postal_code: str = Field(
        ...,
        description="Five digit postal code"
    )

    @field_validator('category')
    @classmethod
    def validate_category(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError('category cannot be empty')
        if len(v) > MAX_CATEGORY_LENGTH:
            raise ValueError(f'category must be at most {MAX_CATEGORY_LENGTH} characters')
        return v

    @field_validator('postal_code')
    @classmethod
    def validate_postal_code(cls, v):
        v = (v or "").strip()
        if not POSTAL_CODE_RE.match(v):
            raise ValueError('postal_code must be exactly 5 digits')
        return v

    @property
    def text(self) -> str:
        return f"{self.category} {self.postal_code}"


class BusinessCandidate(BaseModel):
    """
    One business read from a rendered list item.

    Created once by the list pass. ``name`` never changes afterwards;
    ``address`` and ``phone`` may be replaced a single time by the
    detail pass through :meth:`apply_detail`.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(
        ...,
        frozen=True,
        description="Business name from the listing's accessible label"
    )

    address: Optional[str] = Field(
        default=None,
        description="Best known address text"
    )

    phone: Optional[str] = Field(
        default=None,
        description="Phone number from the detail pane, tel prefix stripped"
    )

    listing_reference: Optional[str] = Field(
        default=None,
        description="Listing URL captured during the list pass"
    )

    _enriched: bool = PrivateAttr(default=False)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError('name cannot be empty')
        return v.strip()

    @property
    def enriched(self) -> bool:
        return self._enriched

    def apply_detail(self, phone: Optional[str] = None, address: Optional[str] = None) -> bool:
        """Overwrite phone/address with non-empty detail-pane values.

        Returns True when at least one field changed.
        """
        if self._enriched:
            raise RuntimeError(f"detail values already applied to {self.name!r}")
        self._enriched = True
        changed = False
        if phone and phone.strip():
            self.phone = phone.strip()
            changed = True
        if address and address.strip():
            self.address = address.strip()
            changed = True
        return changed


class BusinessRecord(BaseModel):
    """Flat export shape: one row per unique business."""

    name: str
    address: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: BusinessCandidate) -> 'BusinessRecord':
        return cls(
            name=candidate.name,
            address=candidate.address,
            phone=candidate.phone,
        )
