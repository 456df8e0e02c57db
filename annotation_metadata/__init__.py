"""
Annotation Metadata - classification and aggregation of screenshot annotations.

This package turns the loosely structured metadata that accompanies an
annotated e-commerce screenshot (declared fields, raw values and element
lists with bounding boxes) into deduplicated, classified and position
ordered cards, and maps each card back to the boxes it stands for.

Example:
    ```python
    from annotation_metadata import build_view, load_metadata

    record = load_metadata("samples/amazon-cart-01/metadata.json")
    view = build_view(record)

    for card in view.cards():
        print(card.display_id, [el.bbox for el in view.resolve(card.display_id)])
    ```
"""

from annotation_metadata.classifier import (
    categorize_pii,
    classify_field,
    classify_pii,
    tag_key,
)
from annotation_metadata.config import ViewerConfig, get_config
from annotation_metadata.grouper import group_entities
from annotation_metadata.parsers import (
    MetadataLoadError,
    ParseError,
    load_metadata,
    load_sample_index,
    parse_metadata,
    parse_sample_index,
)
from annotation_metadata.reconciler import ReconciledFields, reconcile
from annotation_metadata.resolver import IdentifierResolver, assign_identifier
from annotation_metadata.spatial import (
    compare_boxes,
    matching_elements,
    sort_by_position,
    sort_entities,
    sort_visible_fields,
)
from annotation_metadata.types import (
    AnnotationRecord,
    BoundingBox,
    CanonicalField,
    Element,
    FieldCategory,
    FillState,
    GroupedEntity,
    KeyKind,
    KeyShape,
    KeyTag,
    PIICategory,
    SampleEntry,
    ViewState,
)
from annotation_metadata.variants import (
    VariantChoice,
    available_fill_states,
    coerce_fill_state,
    select_variant,
    variant_warning,
)
from annotation_metadata.version import __version__
from annotation_metadata.view import (
    EntityCard,
    FieldCard,
    MetadataView,
    PIIGroup,
    ViewSession,
    build_view,
    step_highlight,
)

__all__ = [
    # Pipeline entry point & config
    "build_view",
    "ViewerConfig",
    "get_config",
    "ViewSession",
    "step_highlight",
    # Typed models
    "AnnotationRecord",
    "BoundingBox",
    "Element",
    "SampleEntry",
    "CanonicalField",
    "GroupedEntity",
    "ViewState",
    "FillState",
    "FieldCategory",
    "PIICategory",
    "KeyKind",
    "KeyShape",
    "KeyTag",
    "MetadataView",
    "PIIGroup",
    "FieldCard",
    "EntityCard",
    # Pipeline stages
    "tag_key",
    "classify_field",
    "classify_pii",
    "categorize_pii",
    "reconcile",
    "ReconciledFields",
    "group_entities",
    "compare_boxes",
    "sort_by_position",
    "matching_elements",
    "sort_visible_fields",
    "sort_entities",
    "assign_identifier",
    "IdentifierResolver",
    # Variants
    "VariantChoice",
    "available_fill_states",
    "coerce_fill_state",
    "select_variant",
    "variant_warning",
    # Parsers & errors
    "ParseError",
    "MetadataLoadError",
    "parse_metadata",
    "parse_sample_index",
    "load_metadata",
    "load_sample_index",
    "__version__",
]
