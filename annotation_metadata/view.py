"""
Metadata view assembly.

build_view() is the single entry point a UI calls on every render. It is a
pure function of the record, the view state and the configuration: it
reconciles, groups, filters and sorts from scratch and keeps nothing
between calls.
"""

import logging
from typing import Iterator, List, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr

from annotation_metadata.classifier import categorize_pii
from annotation_metadata.config import ViewerConfig, get_config
from annotation_metadata.grouper import group_entities
from annotation_metadata.reconciler import reconcile
from annotation_metadata.resolver import IdentifierResolver, assign_identifier
from annotation_metadata.spatial import sort_entities, sort_visible_fields
from annotation_metadata.types import (
    AnnotationRecord,
    CanonicalField,
    Element,
    FieldCategory,
    GroupedEntity,
    KeyKind,
    PIICategory,
    ViewState,
)

logger = logging.getLogger(__name__)


class FieldCard(BaseModel):
    """A displayed flat field and the visible elements behind it."""

    display_id: str
    field: CanonicalField
    elements: List[Element]


class EntityCard(BaseModel):
    """A displayed numbered entity (one order, one product)."""

    display_id: str
    entity: GroupedEntity

    @property
    def elements(self) -> List[Element]:
        return self.entity.elements


Card = Union[FieldCard, EntityCard]


class PIIGroup(BaseModel):
    """PII cards of one semantic category."""

    category: PIICategory
    cards: List[FieldCard]


class MetadataView(BaseModel):
    """Everything the metadata panel shows for one render."""

    state: ViewState = Field(default_factory=ViewState)
    pii_groups: List[PIIGroup] = Field(default_factory=list)
    order_cart_fields: List[FieldCard] = Field(default_factory=list)
    orders: List[EntityCard] = Field(default_factory=list)
    search_fields: List[FieldCard] = Field(default_factory=list)
    products: List[EntityCard] = Field(default_factory=list)
    misc_fields: List[FieldCard] = Field(default_factory=list)

    _resolver: Optional[IdentifierResolver] = PrivateAttr(default=None)

    @property
    def pii_count(self) -> int:
        return sum(len(group.cards) for group in self.pii_groups)

    @property
    def is_empty(self) -> bool:
        return not any(True for _ in self.cards())

    def cards(self) -> Iterator[Card]:
        """All clickable cards in panel order."""
        for group in self.pii_groups:
            yield from group.cards
        yield from self.order_cart_fields
        yield from self.orders
        yield from self.search_fields
        yield from self.products
        yield from self.misc_fields

    def identifiers(self) -> List[str]:
        return [card.display_id for card in self.cards()]

    def resolve(self, identifier: str) -> List[Element]:
        """Elements to highlight for a card; empty if there are none."""
        if self._resolver is None:
            return []
        return self._resolver.resolve(identifier)


def _field_cards(
    fields: List[CanonicalField],
    record: AnnotationRecord,
    config: ViewerConfig,
) -> List[FieldCard]:
    return [
        FieldCard(
            display_id=assign_identifier(canonical),
            field=canonical,
            elements=elements,
        )
        for canonical, elements in sort_visible_fields(fields, record, config)
    ]


def _entity_cards(
    record: AnnotationRecord, kind: KeyKind, config: ViewerConfig
) -> List[EntityCard]:
    entities = group_entities(record.product_elements, kind, config)
    return [
        EntityCard(display_id=assign_identifier(entity), entity=entity)
        for entity in sort_entities(entities, config)
    ]


def build_view(
    record: AnnotationRecord,
    state: Optional[ViewState] = None,
    config: Optional[ViewerConfig] = None,
) -> MetadataView:
    """
    Run the full pipeline for one render.

    Args:
        record: The current sample's annotation record
        state: UI toggles for this render
        config: Configuration settings

    Returns:
        MetadataView with every section filtered to visible units and
        sorted in reading order
    """
    config = config or get_config()
    state = state or ViewState()
    fields = reconcile(record, config)

    pii_groups = []
    for category, members in categorize_pii(
        fields.section(FieldCategory.PII)
    ).items():
        cards = _field_cards(members, record, config)
        if cards:
            pii_groups.append(PIIGroup(category=category, cards=cards))

    view = MetadataView(
        state=state,
        pii_groups=pii_groups,
        order_cart_fields=_field_cards(
            fields.section(FieldCategory.ORDER)
            + fields.section(FieldCategory.CART),
            record,
            config,
        ),
        orders=_entity_cards(record, KeyKind.ORDER, config),
        search_fields=_field_cards(
            fields.section(FieldCategory.SEARCH), record, config
        ),
        products=_entity_cards(record, KeyKind.PRODUCT, config),
        misc_fields=_field_cards(
            fields.section(FieldCategory.MISC), record, config
        ),
    )
    view._resolver = IdentifierResolver(record, config)

    logger.debug(
        "Built view: %d PII, %d order/cart, %d orders, %d search, "
        "%d products, %d misc",
        view.pii_count,
        len(view.order_cart_fields),
        len(view.orders),
        len(view.search_fields),
        len(view.products),
        len(view.misc_fields),
    )
    return view


class ViewSession:
    """
    Applies only the newest render.

    Call begin() before computing a view and commit() with the returned
    token afterwards. A commit whose token was superseded by a later
    begin() is discarded.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._current: Optional[MetadataView] = None

    @property
    def current(self) -> Optional[MetadataView]:
        return self._current

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def commit(self, token: int, view: MetadataView) -> bool:
        if token != self._generation:
            logger.debug(
                "Discarding superseded render %d (latest is %d)",
                token,
                self._generation,
            )
            return False
        self._current = view
        return True

    def reset(self) -> None:
        """Forget the applied view and invalidate pending renders."""
        self._generation += 1
        self._current = None


def step_highlight(
    identifiers: List[str], index: int, direction: int
) -> Optional[int]:
    """
    Move the highlight cursor, wrapping at both ends.

    Args:
        identifiers: Clickable identifiers in panel order
        index: Current position, -1 when nothing is highlighted
        direction: +1 for next, -1 for previous

    Returns:
        New index, or None if there is nothing to highlight
    """
    if not identifiers:
        return None
    index += direction
    if index < 0:
        return len(identifiers) - 1
    if index >= len(identifiers):
        return 0
    return index
