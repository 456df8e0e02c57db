"""Fold numbered element keys (ORDER1_ID, PRODUCT2_NAME, ...) into entities."""

import logging
from typing import Dict, Iterable, List, Optional

from annotation_metadata.classifier import tag_key
from annotation_metadata.config import ViewerConfig, get_config
from annotation_metadata.types import (
    Element,
    GroupedEntity,
    KeyKind,
    KeyShape,
)

logger = logging.getLogger(__name__)


def group_entities(
    elements: Iterable[Element],
    kind: KeyKind,
    config: Optional[ViewerConfig] = None,
) -> List[GroupedEntity]:
    """
    Partition visible numbered elements of one family by ordinal.

    Elements that are hidden, belong to another family or are not numbered
    are ignored. Within an ordinal the last element carrying an attribute
    wins, and ``elements`` keeps encounter order. The returned list is in
    first-seen ordinal order; callers sort it by position.

    Args:
        elements: Candidate elements, usually the product-element list
        kind: Family to group, e.g. KeyKind.ORDER
        config: Configuration settings

    Returns:
        One GroupedEntity per ordinal that has at least one visible element
    """
    config = config or get_config()
    buckets: Dict[int, Dict] = {}

    for element in elements:
        if not element.visible:
            continue
        tag = tag_key(element.key, config)
        if tag.kind is not kind or tag.shape is not KeyShape.NUMBERED:
            continue

        bucket = buckets.setdefault(
            tag.ordinal, {"fields": {}, "elements": []}
        )
        bucket["elements"].append(element)
        bucket["fields"][tag.attribute] = element.value

    entities = [
        GroupedEntity(
            kind=kind,
            ordinal=ordinal,
            fields=bucket["fields"],
            elements=bucket["elements"],
        )
        for ordinal, bucket in buckets.items()
    ]
    logger.debug("Grouped %d %s entities", len(entities), kind.value)
    return entities
