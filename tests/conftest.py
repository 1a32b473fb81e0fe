"""Global pytest configuration and fixtures.

Provides the concept description cache, builder and walker used across the
core and loader tests, plus a factory for model references.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from aasdb.core.builder import RecordBuilder
from aasdb.core.cache import ConceptDescriptionCache
from aasdb.core.walker import EnvironmentWalker
from aasdb.document import Key, KeyTypes, Reference, ReferenceTypes


@pytest.fixture
def cache() -> ConceptDescriptionCache:
    return ConceptDescriptionCache()


@pytest.fixture
def builder() -> RecordBuilder:
    return RecordBuilder()


@pytest.fixture
def walker(cache: ConceptDescriptionCache, builder: RecordBuilder) -> EnvironmentWalker:
    return EnvironmentWalker(cache, builder=builder)


@pytest.fixture
def make_reference() -> Callable[..., Reference]:
    """Build a model reference from key values (Submodel keys by default)."""

    def _make(*values: str, key_type: KeyTypes = KeyTypes.SUBMODEL) -> Reference:
        return Reference(
            type=ReferenceTypes.MODEL_REFERENCE,
            keys=[Key(type=key_type, value=value) for value in values],
        )

    return _make
