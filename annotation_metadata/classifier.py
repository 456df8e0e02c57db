"""
Key-name classification for annotation fields.

Every key is tagged once with its family (PII, order, cart, product,
search, misc) and shape (flat, numbered, bare). Reconciliation, grouping
and identifier resolution all switch on the tag instead of re-testing
string prefixes.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from annotation_metadata.config import ViewerConfig, get_config
from annotation_metadata.types import (
    CanonicalField,
    FieldCategory,
    KeyKind,
    KeyShape,
    KeyTag,
    PIICategory,
)

logger = logging.getLogger(__name__)

PII_PREFIX = "PII_"

# Checked in order; the first family whose prefix matches wins.
FAMILY_PREFIXES = [
    ("ORDER", KeyKind.ORDER),
    ("CART", KeyKind.CART),
    ("PRODUCT", KeyKind.PRODUCT),
    ("SEARCH", KeyKind.SEARCH),
]

_FAMILY_KINDS = dict(FAMILY_PREFIXES)

NUMBERED_KEY_PATTERN = re.compile(r"^(ORDER|CART|PRODUCT|SEARCH)(\d+)_(.+)$")

# PII keyword sets, checked in priority order
PII_KEYWORDS = [
    (PIICategory.PERSONAL, ("name", "dob")),
    (PIICategory.CONTACT, ("email", "phone")),
    (
        PIICategory.ADDRESS,
        ("address", "street", "city", "state", "zip", "postcode", "country"),
    ),
    (PIICategory.PAYMENT, ("card", "payment")),
    (PIICategory.ACCOUNT, ("login", "username", "password")),
]

_KIND_TO_CATEGORY = {
    KeyKind.PII: FieldCategory.PII,
    KeyKind.ORDER: FieldCategory.ORDER,
    KeyKind.CART: FieldCategory.CART,
    KeyKind.PRODUCT: FieldCategory.PRODUCT,
    KeyKind.SEARCH: FieldCategory.SEARCH,
    KeyKind.MISC: FieldCategory.MISC,
}


def tag_key(key: str, config: Optional[ViewerConfig] = None) -> KeyTag:
    """
    Tag a key with its family and shape.

    Args:
        key: Raw element or field key (case-sensitive)
        config: Configuration settings

    Returns:
        KeyTag; numbered keys also carry their ordinal and attribute name
    """
    config = config or get_config()

    if key.startswith(PII_PREFIX):
        return KeyTag(KeyKind.PII, KeyShape.FLAT)
    if key == config.header_search_key:
        return KeyTag(KeyKind.SEARCH, KeyShape.FLAT)

    match = NUMBERED_KEY_PATTERN.match(key)
    if match:
        family, ordinal, attribute = match.groups()
        kind = _FAMILY_KINDS[family]
        return KeyTag(kind, KeyShape.NUMBERED, int(ordinal), attribute)

    for prefix, kind in FAMILY_PREFIXES:
        if not key.startswith(prefix):
            continue
        # PRODUCT keys need no separator, the others do
        if kind is KeyKind.PRODUCT or key.startswith(prefix + "_"):
            return KeyTag(kind, KeyShape.FLAT)
        return KeyTag(kind, KeyShape.BARE)

    return KeyTag(KeyKind.MISC, KeyShape.FLAT)


def route_tag(tag: KeyTag) -> FieldCategory:
    """
    Map a tag to the section a declared or raw field is shown in.

    Product keys of any shape stay with products. Order, cart and search
    keys are only sections of their own when flat; anything else is misc.
    """
    if tag.kind in (KeyKind.PII, KeyKind.PRODUCT):
        return _KIND_TO_CATEGORY[tag.kind]
    if tag.shape is KeyShape.FLAT:
        return _KIND_TO_CATEGORY[tag.kind]
    return FieldCategory.MISC


def classify_field(
    key: str, config: Optional[ViewerConfig] = None
) -> FieldCategory:
    """Coarse, prefix-based section for a field key. Always returns a category."""
    return route_tag(tag_key(key, config))


def classify_pii(key: str) -> PIICategory:
    """
    Assign a semantic PII category by case-insensitive keyword match.

    Keyword sets are tried in a fixed order, so a key such as
    ``PII_CARD_NAME`` deterministically lands in Personal Info.
    """
    key_lower = key.lower()
    for category, keywords in PII_KEYWORDS:
        if any(keyword in key_lower for keyword in keywords):
            return category
    return PIICategory.OTHER


def categorize_pii(
    fields: Iterable[CanonicalField],
) -> Dict[PIICategory, List[CanonicalField]]:
    """Bucket PII fields by category, keeping every category in display order."""
    categories: Dict[PIICategory, List[CanonicalField]] = {
        category: [] for category in PIICategory
    }
    for canonical in fields:
        categories[classify_pii(canonical.key)].append(canonical)
    return categories
