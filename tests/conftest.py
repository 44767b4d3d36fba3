"""Shared fixtures for the hurlgen test suite."""
import pytest

from utils.config import Formatting
from services.request_body import SpecBodySettings
from services.schema_resolver import SpecDocument


class TrackingSpec(SpecDocument):
    """SpecDocument that records every $ref it is asked to resolve."""

    def __init__(self, spec):
        super().__init__(spec)
        self.resolved_refs = []

    def resolve(self, schema_or_ref):
        if isinstance(schema_or_ref, dict) and "$ref" in schema_or_ref:
            self.resolved_refs.append(schema_or_ref["$ref"])
        return super().resolve(schema_or_ref)


def build_document(schemas=None, **extra):
    doc = {
        "openapi": "3.0.3",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": {},
        "components": {"schemas": schemas or {}},
    }
    doc.update(extra)
    return doc


@pytest.fixture
def settings():
    return SpecBodySettings(formatting=Formatting(mode="pretty", indent=2))


@pytest.fixture
def compact_settings():
    return SpecBodySettings(formatting=Formatting(mode="compact", indent=2))


@pytest.fixture
def make_spec():
    def _make(schemas=None, **extra):
        return SpecDocument(build_document(schemas, **extra))
    return _make


@pytest.fixture
def make_tracking_spec():
    def _make(schemas=None, **extra):
        return TrackingSpec(build_document(schemas, **extra))
    return _make
