"""Shared fixtures for generator tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from openapi_tsgen.schema_parser import SchemaDocument, parse_document

FIXTURES = Path(__file__).parent / "fixtures"
SAMPLE_PATH = FIXTURES / "sample.json"


@pytest.fixture(scope="session")
def sample_spec_raw() -> dict[str, Any]:
    """The decoded sample document. Do not mutate; use ``sample_spec``."""
    return json.loads(SAMPLE_PATH.read_text())


@pytest.fixture
def sample_spec(sample_spec_raw) -> dict[str, Any]:
    """A fresh copy of the sample document each test may edit."""
    return copy.deepcopy(sample_spec_raw)


@pytest.fixture
def sample_document(sample_spec) -> SchemaDocument:
    return parse_document(sample_spec)


@pytest.fixture
def sample_path() -> Path:
    return SAMPLE_PATH
