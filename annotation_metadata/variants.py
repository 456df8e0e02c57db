"""
Screenshot variant availability.

Each sample can ship up to six renders: full, partial and empty form
states, each with and without burned-in annotations. These helpers decide
which of them the current view state can show.
"""

import logging
from typing import List, NamedTuple, Optional

from annotation_metadata.types import FillState, SampleEntry, ViewState

logger = logging.getLogger(__name__)

# Fallback order when the requested fill state is unavailable
FILL_STATE_ORDER = [FillState.FULL, FillState.PARTIAL, FillState.EMPTY]


class VariantChoice(NamedTuple):
    """The render to display and whether it differs from the request."""

    fill_state: FillState
    annotated: bool
    fallback: bool = False


def has_variant(
    sample: SampleEntry, fill_state: FillState, annotated: bool
) -> bool:
    """Whether the sample ships the given render."""
    flags = {
        (FillState.FULL, True): sample.has_full,
        (FillState.FULL, False): sample.has_full_clean,
        (FillState.PARTIAL, True): sample.has_partial,
        (FillState.PARTIAL, False): sample.has_partial_clean,
        (FillState.EMPTY, True): sample.has_empty,
        (FillState.EMPTY, False): sample.has_empty_clean,
    }
    return flags[(fill_state, annotated)]


def available_fill_states(
    sample: SampleEntry, show_annotations: bool
) -> List[FillState]:
    """Fill states the sample can show with the current annotation toggle."""
    return [
        state
        for state in FILL_STATE_ORDER
        if has_variant(sample, state, show_annotations)
    ]


def coerce_fill_state(sample: SampleEntry, state: ViewState) -> ViewState:
    """
    Move the view to the first available fill state if the current one is
    not available. Left unchanged when nothing is available.
    """
    available = available_fill_states(sample, state.show_annotations)
    if not available or state.fill_state in available:
        return state

    logger.debug(
        "Sample %s has no %s variant, switching to %s",
        sample.id,
        state.fill_state.value,
        available[0].value,
    )
    return state.model_copy(update={"fill_state": available[0]})


def select_variant(
    sample: SampleEntry, state: ViewState
) -> Optional[VariantChoice]:
    """
    Pick the render to display.

    The exact requested render wins. Otherwise the full clean render is
    used, then the empty clean one.

    Returns:
        VariantChoice, or None if the sample has neither
    """
    if has_variant(sample, state.fill_state, state.show_annotations):
        return VariantChoice(state.fill_state, state.show_annotations)

    for fill_state in (FillState.FULL, FillState.EMPTY):
        if has_variant(sample, fill_state, annotated=False):
            return VariantChoice(fill_state, annotated=False, fallback=True)

    return None


def variant_warning(state: ViewState) -> str:
    """Message shown when a fallback render replaces the requested one."""
    flavor = "annotated" if state.show_annotations else "clean"
    return (
        f"This sample doesn't have a {state.fill_state.value} {flavor} "
        "variant. Showing available variant instead."
    )
