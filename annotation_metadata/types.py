"""
Typed models for annotated e-commerce screenshot metadata.

Raw documents (sample index, per-sample metadata) are parsed into these
models once; everything downstream works on the typed values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Scalar = Union[str, int, float, bool, None]


class BoundingBox(BaseModel):
    """Screen region in image pixel coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float = 0.0
    height: float = 0.0


class Element(BaseModel):
    """One detected annotation instance tied to a screen region."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: Optional[str] = None
    visible: bool = False
    bbox: BoundingBox

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> Optional[str]:
        """Scalar element values are kept as their string form."""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool):
            return "true" if v else "false"
        return str(v)


class AnnotationRecord(BaseModel):
    """
    All annotation metadata for one sample.

    A record is replaced wholesale when another sample is selected; it is
    never mutated in place.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    raw_values: dict[str, Scalar] = Field(
        default_factory=dict, alias="data_json"
    )
    declared_fields: list[str] = Field(
        default_factory=list, alias="required_fields"
    )
    pii_elements: list[Element] = Field(default_factory=list)
    product_elements: list[Element] = Field(default_factory=list)
    search_elements: list[Element] = Field(default_factory=list)


class SampleEntry(BaseModel):
    """One entry of the sample index."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str = Field(default="", alias="displayName")
    has_full: bool = Field(default=False, alias="hasFull")
    has_full_clean: bool = Field(default=False, alias="hasFullClean")
    has_partial: bool = Field(default=False, alias="hasPartial")
    has_partial_clean: bool = Field(default=False, alias="hasPartialClean")
    has_empty: bool = Field(default=False, alias="hasEmpty")
    has_empty_clean: bool = Field(default=False, alias="hasEmptyClean")
    company: str = ""
    page_type: str = Field(default="", alias="pageType")


class FillState(str, Enum):
    """How much of the page's form data is filled in."""

    FULL = "full"
    PARTIAL = "partial"
    EMPTY = "empty"


class ViewState(BaseModel):
    """UI toggles that a pipeline invocation depends on."""

    model_config = ConfigDict(frozen=True)

    fill_state: FillState = FillState.FULL
    show_annotations: bool = False


class FieldCategory(str, Enum):
    """Destination section of a canonical field."""

    PII = "pii"
    ORDER = "order"
    CART = "cart"
    PRODUCT = "product"
    SEARCH = "search"
    MISC = "misc"


class PIICategory(str, Enum):
    """Semantic grouping of PII fields, in display order."""

    PERSONAL = "Personal Info"
    CONTACT = "Contact"
    ADDRESS = "Address"
    PAYMENT = "Payment"
    ACCOUNT = "Account"
    OTHER = "Other"


class KeyKind(str, Enum):
    """Family an element key belongs to."""

    PII = "pii"
    ORDER = "order"
    CART = "cart"
    PRODUCT = "product"
    SEARCH = "search"
    MISC = "misc"


class KeyShape(str, Enum):
    """Structure of a key within its family."""

    FLAT = "flat"  # ORDER_TOTAL, SEARCH_QUERY, HEADER_SEARCH
    NUMBERED = "numbered"  # ORDER1_ID, PRODUCT2_NAME
    BARE = "bare"  # family prefix with neither shape, e.g. ORDERS


class KeyTag(NamedTuple):
    """Result of tagging a key once, up front."""

    kind: KeyKind
    shape: KeyShape
    ordinal: Optional[int] = None
    attribute: Optional[str] = None


class CanonicalField(BaseModel):
    """A reconciled, classified field."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str
    category: FieldCategory
    is_empty: bool = False


class GroupedEntity(BaseModel):
    """A numbered multi-attribute record assembled from flat keys."""

    model_config = ConfigDict(frozen=True)

    kind: KeyKind
    ordinal: int
    fields: dict[str, Optional[str]] = Field(default_factory=dict)
    elements: list[Element] = Field(default_factory=list)
