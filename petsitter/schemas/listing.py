"""
PetSitter Connect Backend — Listing Request/Response Schemas
=============================================================

What:  Pydantic models for the listing API contract and the listing query filters.
Why:   Strict input validation, camelCase JSON on the wire, OpenAPI docs.
How:   Python attributes are snake_case; `alias_generator=to_camel` maps them to
       the camelCase keys clients send and receive (ownerId, listingType, ...).

Validation split:
    Shape and type rules (required strings, enums, non-negative numbers,
    duplicate-free listingType) live here and fail with 400 before the service
    runs. Date rules that depend on "today" (start not in the past, end after
    start) are business rules enforced by ListingService.create.
"""

import math
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from petsitter.models.enums import ListingType, Species
from petsitter.schemas.common import CamelModel

# Largest value a NUMERIC(10, 2) price column holds
MAX_PRICE = 99_999_999.99


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ListingCreate(CamelModel):
    """
    What:  Body of POST /listings.

    Example:
        {
            "ownerId": "owner1",
            "title": "Golden Retriever needs a sitter",
            "description": "Friendly three year old dog",
            "species": "dog",
            "listingType": ["house-sitting", "walks"],
            "startDate": "2026-07-15",
            "endDate": "2026-07-25",
            "sitterVerified": true,
            "price": 35.0,
            "breed": "Golden Retriever",
            "age": 3
        }
    """

    owner_id: str = Field(min_length=1, description="Opaque id of the posting owner")
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    species: Species
    listing_type: List[ListingType] = Field(
        min_length=1,
        description="Requested care types (non-empty, no duplicates)",
    )
    start_date: date = Field(description="First day of care (ISO 8601 date)")
    end_date: date = Field(description="Last day of care, strictly after startDate")
    sitter_verified: bool = Field(default=False, description="Require a verified sitter")
    price: float = Field(ge=0, le=MAX_PRICE, description="Offered price")

    breed: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    size: Optional[str] = None
    feeding: Optional[str] = None
    medication: Optional[str] = None

    @field_validator("owner_id", "title", "description")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f"{to_camel(info.field_name)} should not be empty")
        return v

    @field_validator("listing_type")
    @classmethod
    def unique_listing_types(cls, v: List[ListingType]) -> List[ListingType]:
        if len(set(v)) != len(v):
            raise ValueError("All listingType's elements must be unique")
        return v

    @field_validator("price")
    @classmethod
    def finite_price(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("price must be a finite number")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ListingResponse(CamelModel):
    """A persisted listing, echoed as stored."""

    id: int
    owner_id: str
    title: str
    description: str
    species: Species
    listing_type: List[ListingType]
    start_date: date
    end_date: date
    sitter_verified: bool
    price: float
    breed: Optional[str] = None
    age: Optional[int] = None
    size: Optional[str] = None
    feeding: Optional[str] = None
    medication: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Listing Filters (GET /listings query parameters)
# ══════════════════════════════════════════════════════════════════════════

_INT_FILTERS = {"id": 1, "age": 0}  # field → minimum accepted value
_TEXT_FILTERS = (
    "owner_id", "title", "description", "breed", "size", "feeding", "medication",
)


def _parse_int(value: Any, minimum: int) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float) and value.is_integer():
        parsed = int(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(number) or not number.is_integer():
            return None
        parsed = int(number)
    else:
        return None
    return parsed if parsed >= minimum else None


def _parse_price(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        parsed = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed) or parsed < 0:
        return None
    return parsed


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _parse_enum(enum_cls, value: Any):
    try:
        return enum_cls(value)
    except ValueError:
        return None


class ListingFilters(BaseModel):
    """
    Structured optional-field filter for listing queries.

    What:    One optional attribute per filterable column; None means "no filter".
    How:     `from_query()` accepts raw query-string values (camelCase or
             snake_case keys) and parses each one independently. Unknown keys
             and values that fail to parse are DROPPED, never reported:
                 price="not-a-number"   → no price filter
                 sitterVerified="yes"   → no sitterVerified filter
                 species="dragon"       → no species filter
    Matching:
        Scalar fields match by equality. listing_type matches by set
        membership: a listing qualifies when its listingType contains every
        requested value.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    owner_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    species: Optional[Species] = None
    listing_type: Optional[List[ListingType]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sitter_verified: Optional[bool] = None
    price: Optional[float] = None
    breed: Optional[str] = None
    age: Optional[int] = None
    size: Optional[str] = None
    feeding: Optional[str] = None
    medication: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def parse_and_drop_invalid(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return {}

        # Accept both wire (camelCase) and Python (snake_case) keys
        raw: Dict[str, Any] = {}
        for field_name in cls.model_fields:
            for key in (field_name, to_camel(field_name)):
                if key in data and data[key] is not None:
                    raw[field_name] = data[key]
                    break

        parsed: Dict[str, Any] = {}

        for field_name, minimum in _INT_FILTERS.items():
            if field_name in raw:
                value = _parse_int(raw[field_name], minimum)
                if value is not None:
                    parsed[field_name] = value

        if "price" in raw:
            price = _parse_price(raw["price"])
            if price is not None:
                parsed["price"] = price

        if "sitter_verified" in raw:
            verified = _parse_bool(raw["sitter_verified"])
            if verified is not None:
                parsed["sitter_verified"] = verified

        if "species" in raw:
            species = _parse_enum(Species, raw["species"])
            if species is not None:
                parsed["species"] = species

        if "listing_type" in raw:
            values = raw["listing_type"]
            if isinstance(values, (str, ListingType)):
                values = [values]
            if isinstance(values, (list, tuple, set)):
                types = []
                for value in values:
                    listing_type = _parse_enum(ListingType, value)
                    if listing_type is not None and listing_type not in types:
                        types.append(listing_type)
                if types:
                    parsed["listing_type"] = types

        for field_name in ("start_date", "end_date"):
            if field_name in raw:
                value = _parse_date(raw[field_name])
                if value is not None:
                    parsed[field_name] = value

        for field_name in _TEXT_FILTERS:
            value = raw.get(field_name)
            if isinstance(value, str) and value != "":
                parsed[field_name] = value

        return parsed

    @classmethod
    def from_query(cls, params: Mapping[str, Any]) -> "ListingFilters":
        """
        Build filters from request query parameters.

        Starlette's QueryParams is a multi-dict: `?listingType=walks&listingType=feeding`
        keeps both values via getlist(); every other key uses its last value.
        """
        data: Dict[str, Any] = dict(params)
        if hasattr(params, "getlist"):
            for key in ("listingType", "listing_type"):
                values = params.getlist(key)
                if len(values) > 1:
                    data[key] = values
        return cls.model_validate(data)

    def active(self) -> Dict[str, Any]:
        """The filters that are set, keyed by column name."""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.active()
