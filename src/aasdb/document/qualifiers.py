"""Qualifiers, Extensions and value lists."""

from __future__ import annotations

from pydantic import Field

from aasdb.document import LenientModel
from aasdb.document.identifiers import (
    LenientDataTypeDefXsd,
    LenientQualifierKind,
    Reference,
)


class ValueReferencePair(LenientModel):
    """A value with an associated reference (for enumerations)."""

    value: str | None = None
    value_id: Reference | None = Field(default=None, alias="valueId")


class ValueList(LenientModel):
    value_reference_pairs: list[ValueReferencePair] = Field(
        default_factory=list, alias="valueReferencePairs"
    )


class Qualifier(LenientModel):
    """A qualifier constrains or extends the meaning of an element."""

    semantic_id: Reference | None = Field(default=None, alias="semanticId")
    supplemental_semantic_ids: list[Reference] | None = Field(
        default=None, alias="supplementalSemanticIds"
    )
    kind: LenientQualifierKind = None
    type: str | None = None
    value_type: LenientDataTypeDefXsd = Field(default=None, alias="valueType")
    value: str | None = None
    value_id: Reference | None = Field(default=None, alias="valueId")


class Extension(LenientModel):
    """Proprietary data attached to an element."""

    semantic_id: Reference | None = Field(default=None, alias="semanticId")
    supplemental_semantic_ids: list[Reference] | None = Field(
        default=None, alias="supplementalSemanticIds"
    )
    name: str | None = None
    value_type: LenientDataTypeDefXsd = Field(default=None, alias="valueType")
    value: str | None = None
    refers_to: list[Reference] | None = Field(default=None, alias="refersTo")
