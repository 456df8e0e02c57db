"""
Display identifiers and their inverse lookup.

Every displayed unit gets a string handle:

- PII fields: ``pii-<key>``
- order, cart, search, product and misc flat fields: ``field-<key>``
- numbered entities: ``order-<ordinal>``, ``product-<ordinal>`` (also
  ``cart-`` and ``search-`` should those families ever be grouped)

Resolving a handle re-applies the same matching rules used to build the
view instead of reading a snapshot, so highlights follow the record's
current visibility flags. Unknown or stale handles resolve to nothing.
"""

import logging
from typing import List, Optional, Union

from annotation_metadata.classifier import route_tag, tag_key
from annotation_metadata.config import ViewerConfig, get_config
from annotation_metadata.grouper import group_entities
from annotation_metadata.spatial import matching_elements
from annotation_metadata.types import (
    AnnotationRecord,
    CanonicalField,
    Element,
    FieldCategory,
    GroupedEntity,
    KeyKind,
)

logger = logging.getLogger(__name__)

PII_ID_PREFIX = "pii-"
FIELD_ID_PREFIX = "field-"

ENTITY_ID_PREFIXES = {
    KeyKind.ORDER: "order-",
    KeyKind.PRODUCT: "product-",
    KeyKind.CART: "cart-",
    KeyKind.SEARCH: "search-",
}


def assign_identifier(unit: Union[CanonicalField, GroupedEntity]) -> str:
    """Build the display identifier of a field or grouped entity."""
    if isinstance(unit, GroupedEntity):
        prefix = ENTITY_ID_PREFIXES.get(unit.kind, f"{unit.kind.value}-")
        return f"{prefix}{unit.ordinal}"
    if unit.category is FieldCategory.PII:
        return f"{PII_ID_PREFIX}{unit.key}"
    return f"{FIELD_ID_PREFIX}{unit.key}"


class IdentifierResolver:
    """Maps display identifiers back to the visible elements they stand for."""

    def __init__(
        self,
        record: AnnotationRecord,
        config: Optional[ViewerConfig] = None,
    ):
        self._record = record
        self._config = config or get_config()

    @property
    def record(self) -> AnnotationRecord:
        return self._record

    def __call__(self, identifier: str) -> List[Element]:
        return self.resolve(identifier)

    def resolve(self, identifier: str) -> List[Element]:
        """
        Return the visible elements behind ``identifier``.

        Args:
            identifier: A handle produced by assign_identifier()

        Returns:
            The matching visible elements; empty for unknown or stale handles
        """
        if not identifier:
            return []

        if identifier.startswith(PII_ID_PREFIX):
            key = identifier[len(PII_ID_PREFIX):]
            return matching_elements(
                key, FieldCategory.PII, self._record, self._config
            )

        if identifier.startswith(FIELD_ID_PREFIX):
            key = identifier[len(FIELD_ID_PREFIX):]
            if not key:
                return []
            tag = tag_key(key, self._config)
            # PII keys only carry field- handles as product-list misc fields
            if tag.kind is KeyKind.PII:
                category = FieldCategory.MISC
            else:
                category = route_tag(tag)
            return matching_elements(
                key, category, self._record, self._config
            )

        for kind, prefix in ENTITY_ID_PREFIXES.items():
            if identifier.startswith(prefix):
                return self._resolve_entity(
                    kind, identifier[len(prefix):]
                )

        logger.debug("Unrecognized display identifier: %s", identifier)
        return []

    def _resolve_entity(self, kind: KeyKind, ordinal_text: str) -> List[Element]:
        if not (ordinal_text.isascii() and ordinal_text.isdigit()):
            logger.debug("Malformed %s ordinal: %r", kind.value, ordinal_text)
            return []

        ordinal = int(ordinal_text)
        for entity in group_entities(
            self._record.product_elements, kind, self._config
        ):
            if entity.ordinal == ordinal:
                return list(entity.elements)

        logger.debug("No visible %s with ordinal %d", kind.value, ordinal)
        return []
