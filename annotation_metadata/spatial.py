"""
Visibility filtering and reading-order sorting.

Units (canonical fields and grouped entities) are only displayed while at
least one visible element backs them. Displayed units are ordered
top-to-bottom, then left-to-right within a row, using the box of their
first backing element.
"""

import logging
from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from annotation_metadata.classifier import tag_key
from annotation_metadata.config import ViewerConfig, get_config
from annotation_metadata.reconciler import search_source_elements
from annotation_metadata.types import (
    AnnotationRecord,
    BoundingBox,
    CanonicalField,
    Element,
    FieldCategory,
    GroupedEntity,
    KeyKind,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compare_boxes(
    a: BoundingBox, b: BoundingBox, row_tolerance: float = 10.0
) -> float:
    """
    Reading-order comparator.

    Boxes whose tops are within ``row_tolerance`` pixels are on the same row
    and compare by x; otherwise they compare by y.
    """
    if abs(a.y - b.y) > row_tolerance:
        return a.y - b.y
    return a.x - b.x


def sort_by_position(
    units: Sequence[T],
    box_of: Callable[[T], BoundingBox],
    row_tolerance: float = 10.0,
) -> List[T]:
    """Stable sort of units by the box ``box_of`` returns for each."""

    def _cmp(a: T, b: T) -> int:
        delta = compare_boxes(box_of(a), box_of(b), row_tolerance)
        return (delta > 0) - (delta < 0)

    return sorted(units, key=cmp_to_key(_cmp))


def _candidate_elements(
    category: FieldCategory, record: AnnotationRecord, config: ViewerConfig
) -> List[Element]:
    if category is FieldCategory.PII:
        return list(record.pii_elements)
    if category is FieldCategory.SEARCH:
        return search_source_elements(record, config)
    if category is FieldCategory.MISC:
        return list(record.product_elements)

    if category is FieldCategory.PRODUCT:
        kinds = (KeyKind.PRODUCT,)
    else:
        kinds = (KeyKind.ORDER, KeyKind.CART)
    return [
        element
        for element in record.product_elements
        if tag_key(element.key, config).kind in kinds
    ]


def _key_matches(
    element_key: str,
    field_key: str,
    category: FieldCategory,
    config: ViewerConfig,
) -> bool:
    if element_key == field_key:
        return True
    if config.fuzzy_field_matching and category in (
        FieldCategory.ORDER,
        FieldCategory.CART,
        FieldCategory.SEARCH,
    ):
        return element_key.startswith(field_key.replace("_", ""))
    return False


def matching_elements(
    key: str,
    category: FieldCategory,
    record: AnnotationRecord,
    config: Optional[ViewerConfig] = None,
) -> List[Element]:
    """
    Visible elements that back the field ``key`` in ``category``.

    Recomputed from the record on every call so the result always reflects
    the record's current visibility flags.
    """
    config = config or get_config()
    return [
        element
        for element in _candidate_elements(category, record, config)
        if element.visible
        and _key_matches(element.key, key, category, config)
    ]


def sort_visible_fields(
    fields: Sequence[CanonicalField],
    record: AnnotationRecord,
    config: Optional[ViewerConfig] = None,
) -> List[Tuple[CanonicalField, List[Element]]]:
    """
    Drop fields with no visible backing element and sort the rest.

    Returns:
        (field, visible elements) pairs in reading order
    """
    config = config or get_config()
    backed = []
    for canonical in fields:
        elements = matching_elements(
            canonical.key, canonical.category, record, config
        )
        if elements:
            backed.append((canonical, elements))
        else:
            logger.debug(
                "Suppressing %s field %s: no visible element",
                canonical.category.value,
                canonical.key,
            )

    return sort_by_position(
        backed, lambda pair: pair[1][0].bbox, config.row_tolerance
    )


def sort_entities(
    entities: Sequence[GroupedEntity],
    config: Optional[ViewerConfig] = None,
) -> List[GroupedEntity]:
    """Drop entities without elements and sort the rest by position."""
    config = config or get_config()
    present = [entity for entity in entities if entity.elements]
    return sort_by_position(
        present, lambda entity: entity.elements[0].bbox, config.row_tolerance
    )
