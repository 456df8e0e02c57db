"""
Parsers for the sample index and per-sample metadata documents.

Raw JSON payloads are validated into typed models here so the engine
itself never sees malformed input.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from pydantic import ValidationError

from annotation_metadata.types import AnnotationRecord, SampleEntry

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Base error for document parsing failures."""


class MetadataLoadError(ParseError):
    """Raised when a document cannot be read from disk."""


def parse_metadata(payload: dict[str, Any]) -> AnnotationRecord:
    """
    Parse a per-sample metadata document into an AnnotationRecord.

    Missing lists and maps default to empty; unknown keys such as
    ``detection_stats`` are ignored.

    Args:
        payload: Decoded metadata JSON

    Returns:
        AnnotationRecord

    Raises:
        ParseError: If the payload is not a well-formed metadata document
    """
    if not isinstance(payload, dict):
        raise ParseError(
            f"Metadata document must be an object, got {type(payload).__name__}"
        )

    # Explicit nulls mean "absent"
    cleaned = {key: value for key, value in payload.items() if value is not None}
    try:
        return AnnotationRecord.model_validate(cleaned)
    except ValidationError as e:
        raise ParseError(f"Failed to parse metadata document: {e}") from e


def parse_sample_index(payload: dict[str, Any]) -> List[SampleEntry]:
    """
    Parse the sample index document.

    Entries that fail validation are skipped with a warning rather than
    failing the whole index.

    Raises:
        ParseError: If the payload has no ``samples`` list
    """
    samples = payload.get("samples") if isinstance(payload, dict) else None
    if not isinstance(samples, list):
        raise ParseError("Sample index must contain a 'samples' list")

    entries = []
    for i, sample in enumerate(samples):
        try:
            entries.append(SampleEntry.model_validate(sample))
        except ValidationError as e:
            logger.warning("Sample #%s failed validation: %s, skipping", i, e)
            continue

    return entries


def _read_json(path: Union[str, Path]) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MetadataLoadError(f"Failed to read {path}: {e}") from e


def load_metadata(path: Union[str, Path]) -> AnnotationRecord:
    """Read and parse a metadata document; any failure is a MetadataLoadError."""
    try:
        record = parse_metadata(_read_json(path))
    except MetadataLoadError:
        raise
    except ParseError as e:
        raise MetadataLoadError(f"Invalid metadata in {path}: {e}") from e

    logger.info(
        "Loaded metadata from %s: %d PII, %d product, %d search elements",
        path,
        len(record.pii_elements),
        len(record.product_elements),
        len(record.search_elements),
    )
    return record


def load_sample_index(path: Union[str, Path]) -> List[SampleEntry]:
    """Read and parse the sample index; any failure is a MetadataLoadError."""
    try:
        entries = parse_sample_index(_read_json(path))
    except MetadataLoadError:
        raise
    except ParseError as e:
        raise MetadataLoadError(f"Invalid sample index in {path}: {e}") from e

    logger.info("Loaded %d samples from %s", len(entries), path)
    return entries
