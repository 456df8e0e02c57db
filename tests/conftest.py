"""
Pytest fixtures for annotation_metadata tests.

Records are built from plain dicts shaped like the metadata documents the
viewer loads, so tests read like the JSON they model.
"""

from typing import Any, Callable, Optional

import pytest

from annotation_metadata.config import ViewerConfig, get_config
from annotation_metadata.parsers import parse_metadata
from annotation_metadata.types import AnnotationRecord, BoundingBox, Element


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast, isolated unit tests")
    config.addinivalue_line(
        "markers", "integration: tests that touch the filesystem"
    )


def _make_element(
    key: str,
    value: Optional[str] = None,
    visible: bool = True,
    x: float = 0,
    y: float = 0,
    width: float = 100,
    height: float = 20,
) -> Element:
    return Element(
        key=key,
        value=value,
        visible=visible,
        bbox=BoundingBox(x=x, y=y, width=width, height=height),
    )


@pytest.fixture
def make_element() -> Callable[..., Element]:
    """Factory for elements with a simplified box signature."""
    return _make_element


@pytest.fixture
def make_record() -> Callable[..., AnnotationRecord]:
    """Factory for records from keyword lists."""

    def _make_record(
        raw_values: Optional[dict] = None,
        declared_fields: Optional[list] = None,
        pii_elements: Optional[list] = None,
        product_elements: Optional[list] = None,
        search_elements: Optional[list] = None,
    ) -> AnnotationRecord:
        return AnnotationRecord(
            raw_values=raw_values or {},
            declared_fields=declared_fields or [],
            pii_elements=pii_elements or [],
            product_elements=product_elements or [],
            search_elements=search_elements or [],
        )

    return _make_record


@pytest.fixture
def config() -> ViewerConfig:
    """Default configuration, independent of the environment."""
    return ViewerConfig(_env_file=None)


@pytest.fixture(autouse=True)
def clear_config_cache():
    """Keep get_config() from leaking state between tests."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


# Sample metadata document covering every source
SAMPLE_METADATA = {
    "data_json": {
        "SEED": 42,
        "PII_FIRST_NAME": "Ada",
        "PII_EMAIL": "ada@example.com",
        "PII_PHONE": "",
        "ORDER_TOTAL": "$40.00",
        "ORDER_STATUS": "Shipped",
        "CART_COUNT": 3,
        "SEARCH_QUERY": "lamp",
        "STORE_NAME": "Acme",
    },
    "required_fields": [
        "SEED",
        "PII_FIRST_NAME",
        "PII_EMAIL",
        "PII_PHONE",
        "ORDER_TOTAL",
        "CART_COUNT",
        "STORE_NAME",
    ],
    "detection_stats": {"total": 14},
    "pii_elements": [
        {
            "key": "PII_EMAIL",
            "value": "ada@example.com",
            "visible": True,
            "bbox": {"x": 300, "y": 40, "width": 200, "height": 20},
        },
        {
            "key": "PII_FIRST_NAME",
            "value": "Ada",
            "visible": True,
            "bbox": {"x": 20, "y": 42, "width": 80, "height": 20},
        },
        {
            "key": "PII_PHONE",
            "value": None,
            "visible": False,
            "bbox": {"x": 20, "y": 80, "width": 80, "height": 20},
        },
        {
            "key": "PII_CARD_NUMBER",
            "value": "**** 4242",
            "visible": True,
            "bbox": {"x": 20, "y": 500, "width": 150, "height": 20},
        },
    ],
    "product_elements": [
        {
            "key": "ORDER_TOTAL",
            "value": "$42.50",
            "visible": True,
            "bbox": {"x": 400, "y": 600, "width": 80, "height": 20},
        },
        {
            "key": "CART_COUNT",
            "value": "3",
            "visible": True,
            "bbox": {"x": 700, "y": 10, "width": 20, "height": 20},
        },
        {
            "key": "ORDER1_ID",
            "value": "A100",
            "visible": True,
            "bbox": {"x": 20, "y": 300, "width": 80, "height": 20},
        },
        {
            "key": "ORDER1_TOTAL",
            "value": "$50",
            "visible": True,
            "bbox": {"x": 200, "y": 300, "width": 80, "height": 20},
        },
        {
            "key": "ORDER2_ID",
            "value": "A200",
            "visible": True,
            "bbox": {"x": 20, "y": 200, "width": 80, "height": 20},
        },
        {
            "key": "PRODUCT1_NAME",
            "value": "Desk Lamp",
            "visible": True,
            "bbox": {"x": 20, "y": 400, "width": 200, "height": 20},
        },
        {
            "key": "PRODUCT1_PRICE",
            "value": "19.99",
            "visible": True,
            "bbox": {"x": 300, "y": 400, "width": 60, "height": 20},
        },
        {
            "key": "HEADER_SEARCH",
            "value": None,
            "visible": True,
            "bbox": {"x": 200, "y": 8, "width": 300, "height": 30},
        },
        {
            "key": "STORE_NAME",
            "value": "Acme",
            "visible": True,
            "bbox": {"x": 10, "y": 5, "width": 80, "height": 20},
        },
    ],
    "search_elements": [
        {
            "key": "SEARCH_QUERY",
            "value": "lamp",
            "visible": True,
            "bbox": {"x": 210, "y": 10, "width": 120, "height": 20},
        }
    ],
}


@pytest.fixture
def sample_metadata() -> dict:
    """Raw metadata document as decoded from JSON."""
    return SAMPLE_METADATA


@pytest.fixture
def sample_record() -> AnnotationRecord:
    """Parsed record of the sample metadata document."""
    return parse_metadata(SAMPLE_METADATA)
