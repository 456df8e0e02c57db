"""
Source reconciliation for flat annotation fields.

A logical field can show up in the declared field list, in the raw
key/value map and in one or more element lists. This module merges those
sources into exactly one CanonicalField per key and section.

Sources are applied in a fixed order and later sources overwrite earlier
ones only where noted:

1. declared fields (PII keys without a value are dropped)
2. raw order/cart/search values that were not declared
3. flat order/cart elements with a value (overwrite)
4. flat search elements not yet present
5. product-list elements with a value and no order, cart, product or
   search prefix, as misc
6. visible PII elements not yet present
"""

import logging
from typing import Dict, Iterator, List, Optional

from annotation_metadata.classifier import route_tag, tag_key
from annotation_metadata.config import ViewerConfig, get_config
from annotation_metadata.types import (
    AnnotationRecord,
    CanonicalField,
    Element,
    FieldCategory,
    KeyKind,
    KeyShape,
    Scalar,
)

logger = logging.getLogger(__name__)


def has_value(value: Scalar) -> bool:
    """True for anything except None and the empty string."""
    return value is not None and value != ""


def as_text(value: Scalar) -> str:
    """Render a raw scalar the way it appears in the source document."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ReconciledFields:
    """Canonical fields keyed by section, then by key, in insertion order."""

    def __init__(self) -> None:
        self._sections: Dict[FieldCategory, Dict[str, CanonicalField]] = {
            category: {} for category in FieldCategory
        }

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        category, key = item
        return key in self._sections.get(category, {})

    def __iter__(self) -> Iterator[CanonicalField]:
        for section in self._sections.values():
            yield from section.values()

    def __len__(self) -> int:
        return sum(len(section) for section in self._sections.values())

    def get(
        self, category: FieldCategory, key: str
    ) -> Optional[CanonicalField]:
        """Return the canonical field for a key, if any."""
        return self._sections[category].get(key)

    def put(self, canonical: CanonicalField) -> None:
        """Insert or overwrite; an overwrite keeps the original position."""
        self._sections[canonical.category][canonical.key] = canonical

    def section(self, category: FieldCategory) -> List[CanonicalField]:
        """Fields of one section in insertion order."""
        return list(self._sections[category].values())


def _make_field(
    key: str,
    value: Scalar,
    category: FieldCategory,
    config: ViewerConfig,
) -> CanonicalField:
    if has_value(value):
        return CanonicalField(key=key, value=as_text(value), category=category)
    return CanonicalField(
        key=key, value=config.empty_marker, category=category, is_empty=True
    )


def reconcile(
    record: AnnotationRecord, config: Optional[ViewerConfig] = None
) -> ReconciledFields:
    """
    Merge every flat-field source of a record into canonical fields.

    Args:
        record: The sample's annotation record
        config: Configuration settings

    Returns:
        ReconciledFields holding at most one field per key and section
    """
    config = config or get_config()
    fields = ReconciledFields()
    raw = record.raw_values

    # 1. Declared fields
    declared = set(record.declared_fields)
    for key in record.declared_fields:
        if key == config.seed_key:
            continue
        tag = tag_key(key, config)
        value = raw.get(key)
        if tag.kind is KeyKind.PII and not has_value(value):
            # PII is never shown as empty
            continue
        fields.put(_make_field(key, value, route_tag(tag), config))

    # 2. Raw order/cart/search values that were not declared. The header
    # search key is left to its element in step 4.
    for key, value in raw.items():
        if key in declared or not has_value(value):
            continue
        if key == config.header_search_key:
            continue
        tag = tag_key(key, config)
        if tag.shape is not KeyShape.FLAT:
            continue
        if tag.kind in (KeyKind.ORDER, KeyKind.CART, KeyKind.SEARCH):
            fields.put(
                _make_field(key, value, FieldCategory(tag.kind.value), config)
            )

    # 3. Flat order/cart elements carry a live box, so they win
    for element in record.product_elements:
        if not has_value(element.value):
            continue
        tag = tag_key(element.key, config)
        if tag.shape is KeyShape.FLAT and tag.kind in (
            KeyKind.ORDER,
            KeyKind.CART,
        ):
            fields.put(
                _make_field(
                    element.key,
                    element.value,
                    FieldCategory(tag.kind.value),
                    config,
                )
            )

    # 4. Flat search elements from both lists
    for element in search_source_elements(record, config):
        tag = tag_key(element.key, config)
        if tag.kind is not KeyKind.SEARCH or tag.shape is not KeyShape.FLAT:
            continue
        if (FieldCategory.SEARCH, element.key) in fields:
            continue
        fields.put(
            _make_field(
                element.key, element.value, FieldCategory.SEARCH, config
            )
        )

    # 5. Product-list elements outside the order/cart/product/search
    # families, PII-prefixed ones included
    for element in record.product_elements:
        if not has_value(element.value):
            continue
        kind = tag_key(element.key, config).kind
        if kind not in (KeyKind.MISC, KeyKind.PII):
            continue
        if (FieldCategory.MISC, element.key) in fields:
            continue
        fields.put(
            _make_field(element.key, element.value, FieldCategory.MISC, config)
        )

    # 6. PII present only as a visual annotation
    for element in record.pii_elements:
        if not element.visible or not element.key:
            continue
        if (FieldCategory.PII, element.key) in fields:
            continue
        fields.put(
            _make_field(element.key, element.value, FieldCategory.PII, config)
        )

    logger.debug(
        "Reconciled %d fields (%s)",
        len(fields),
        ", ".join(
            f"{category.value}={len(fields.section(category))}"
            for category in FieldCategory
        ),
    )
    return fields


def search_source_elements(
    record: AnnotationRecord, config: Optional[ViewerConfig] = None
) -> List[Element]:
    """Search list entries followed by search-family product-list entries."""
    config = config or get_config()
    extra = [
        element
        for element in record.product_elements
        if tag_key(element.key, config).kind is KeyKind.SEARCH
    ]
    return [*record.search_elements, *extra]
