"""Referable, HasSemantics and HasQualifiers attribute groups.

Besides the metamodel attributes, every referable node carries four optional
bookkeeping timestamps that servers attach to a document (creation, last
change, last change anywhere in the subtree, deletion). The flattener copies
them as they are; nothing here fills them in.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from aasdb.document import LenientModel
from aasdb.document.administrative import HasDataSpecificationMixin
from aasdb.document.descriptions import LangString
from aasdb.document.identifiers import Reference
from aasdb.document.qualifiers import Extension, Qualifier


class HasSemanticsMixin(LenientModel):
    semantic_id: Reference | None = Field(default=None, alias="semanticId")
    supplemental_semantic_ids: list[Reference] | None = Field(
        default=None, alias="supplementalSemanticIds"
    )


class HasQualifiersMixin(LenientModel):
    qualifiers: list[Qualifier] | None = None


class ReferableMixin(HasDataSpecificationMixin):
    """Attributes shared by every named node of the tree."""

    id_short: str | None = Field(default=None, alias="idShort")
    display_name: list[LangString] | None = Field(default=None, alias="displayName")
    description: list[LangString] | None = None
    category: str | None = None
    extensions: list[Extension] | None = None

    time_stamp_create: datetime | None = Field(default=None, alias="timeStampCreate")
    time_stamp: datetime | None = Field(default=None, alias="timeStamp")
    time_stamp_tree: datetime | None = Field(default=None, alias="timeStampTree")
    time_stamp_delete: datetime | None = Field(default=None, alias="timeStampDelete")
