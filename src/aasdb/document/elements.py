"""SubmodelElement kinds.

The fourteen concrete kinds form a closed set resolved through a
discriminated union on ``modelType``. Containers (collections, lists,
annotated relationships, entities and operations) hold their children in
document order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import Discriminator, Field, Tag

from aasdb.document import LenientModel
from aasdb.document.descriptions import LangString
from aasdb.document.identifiers import (
    LenientAasSubmodelElements,
    LenientDataTypeDefXsd,
    LenientDirection,
    LenientEntityType,
    LenientStateOfEvent,
    Reference,
)
from aasdb.document.referable import (
    HasQualifiersMixin,
    HasSemanticsMixin,
    ReferableMixin,
)

# -----------------------------------------------------------------------------
# Base class
# -----------------------------------------------------------------------------


class SubmodelElementBase(ReferableMixin, HasSemanticsMixin, HasQualifiersMixin):
    """Attributes common to every SubmodelElement kind.

    Subclasses define a Literal ``model_type`` used as union discriminator.
    """


# -----------------------------------------------------------------------------
# DataElement kinds
# -----------------------------------------------------------------------------


class Property(SubmodelElementBase):
    """A data element with a single typed value."""

    model_type: Literal["Property"] = Field(default="Property", alias="modelType")
    value_type: LenientDataTypeDefXsd = Field(default=None, alias="valueType")
    value: str | None = None
    value_id: Reference | None = Field(default=None, alias="valueId")


class MultiLanguageProperty(SubmodelElementBase):
    """A data element with one text per language."""

    model_type: Literal["MultiLanguageProperty"] = Field(
        default="MultiLanguageProperty", alias="modelType"
    )
    value: list[LangString] | None = None
    value_id: Reference | None = Field(default=None, alias="valueId")


class Range(SubmodelElementBase):
    """A data element holding a min/max interval of one value type."""

    model_type: Literal["Range"] = Field(default="Range", alias="modelType")
    value_type: LenientDataTypeDefXsd = Field(default=None, alias="valueType")
    min: str | None = None
    max: str | None = None


class Blob(SubmodelElementBase):
    """Embedded binary content, kept in its base64 text form."""

    model_type: Literal["Blob"] = Field(default="Blob", alias="modelType")
    content_type: str | None = Field(default=None, alias="contentType")
    value: str | None = None


class File(SubmodelElementBase):
    """A path or URL to a file, usually inside the AASX package."""

    model_type: Literal["File"] = Field(default="File", alias="modelType")
    content_type: str | None = Field(default=None, alias="contentType")
    value: str | None = None


class ReferenceElement(SubmodelElementBase):
    model_type: Literal["ReferenceElement"] = Field(
        default="ReferenceElement", alias="modelType"
    )
    value: Reference | None = None


# -----------------------------------------------------------------------------
# Relationships
# -----------------------------------------------------------------------------


class RelationshipElement(SubmodelElementBase):
    model_type: Literal["RelationshipElement"] = Field(
        default="RelationshipElement", alias="modelType"
    )
    first: Reference | None = None
    second: Reference | None = None


class AnnotatedRelationshipElement(SubmodelElementBase):
    """A relationship carrying data elements as annotations."""

    model_type: Literal["AnnotatedRelationshipElement"] = Field(
        default="AnnotatedRelationshipElement", alias="modelType"
    )
    first: Reference | None = None
    second: Reference | None = None
    annotations: list[SubmodelElementUnion] | None = None


# -----------------------------------------------------------------------------
# Containers
# -----------------------------------------------------------------------------


class SubmodelElementCollection(SubmodelElementBase):
    model_type: Literal["SubmodelElementCollection"] = Field(
        default="SubmodelElementCollection", alias="modelType"
    )
    value: list[SubmodelElementUnion] | None = None


class SubmodelElementList(SubmodelElementBase):
    """An ordered list of elements sharing one kind and semantics."""

    model_type: Literal["SubmodelElementList"] = Field(
        default="SubmodelElementList", alias="modelType"
    )
    order_relevant: bool | None = Field(default=None, alias="orderRelevant")
    semantic_id_list_element: Reference | None = Field(
        default=None, alias="semanticIdListElement"
    )
    type_value_list_element: LenientAasSubmodelElements = Field(
        default=None, alias="typeValueListElement"
    )
    value_type_list_element: LenientDataTypeDefXsd = Field(
        default=None, alias="valueTypeListElement"
    )
    value: list[SubmodelElementUnion] | None = None


class SpecificAssetId(HasSemanticsMixin):
    """A domain-specific asset identifier such as a serial number."""

    name: str | None = None
    value: str | None = None
    external_subject_id: Reference | None = Field(default=None, alias="externalSubjectId")


class Entity(SubmodelElementBase):
    """A self-contained entity with its own statements."""

    model_type: Literal["Entity"] = Field(default="Entity", alias="modelType")
    entity_type: LenientEntityType = Field(default=None, alias="entityType")
    global_asset_id: str | None = Field(default=None, alias="globalAssetId")
    specific_asset_ids: list[SpecificAssetId] | None = Field(
        default=None, alias="specificAssetIds"
    )
    statements: list[SubmodelElementUnion] | None = None


# -----------------------------------------------------------------------------
# Events, operations and capabilities
# -----------------------------------------------------------------------------


class BasicEventElement(SubmodelElementBase):
    """An event source or sink bound to a message broker topic.

    lastUpdate is an ISO 8601 UTC timestamp, minInterval/maxInterval are
    ISO 8601 durations. All three are kept as text.
    """

    model_type: Literal["BasicEventElement"] = Field(
        default="BasicEventElement", alias="modelType"
    )
    observed: Reference | None = None
    direction: LenientDirection = None
    state: LenientStateOfEvent = None
    message_topic: str | None = Field(default=None, alias="messageTopic")
    message_broker: Reference | None = Field(default=None, alias="messageBroker")
    last_update: str | None = Field(default=None, alias="lastUpdate")
    min_interval: str | None = Field(default=None, alias="minInterval")
    max_interval: str | None = Field(default=None, alias="maxInterval")


class OperationVariable(LenientModel):
    """Wrapper around the element describing one operation argument."""

    value: SubmodelElementUnion | None = None


class Operation(SubmodelElementBase):
    model_type: Literal["Operation"] = Field(default="Operation", alias="modelType")
    input_variables: list[OperationVariable | None] | None = Field(
        default=None, alias="inputVariables"
    )
    output_variables: list[OperationVariable | None] | None = Field(
        default=None, alias="outputVariables"
    )
    inoutput_variables: list[OperationVariable | None] | None = Field(
        default=None, alias="inoutputVariables"
    )


class Capability(SubmodelElementBase):
    model_type: Literal["Capability"] = Field(default="Capability", alias="modelType")


# -----------------------------------------------------------------------------
# Discriminated Union
# -----------------------------------------------------------------------------


def _submodel_element_discriminator(value: Any) -> str | None:
    """Resolve modelType for the union, accepting alias or field name in payloads."""
    if isinstance(value, Mapping):
        model_type = value.get("modelType") or value.get("model_type")
        return model_type if isinstance(model_type, str) else None
    return getattr(value, "model_type", None)


SubmodelElementUnion = Annotated[
    Annotated[Property, Tag("Property")]
    | Annotated[MultiLanguageProperty, Tag("MultiLanguageProperty")]
    | Annotated[Range, Tag("Range")]
    | Annotated[Blob, Tag("Blob")]
    | Annotated[File, Tag("File")]
    | Annotated[ReferenceElement, Tag("ReferenceElement")]
    | Annotated[RelationshipElement, Tag("RelationshipElement")]
    | Annotated[AnnotatedRelationshipElement, Tag("AnnotatedRelationshipElement")]
    | Annotated[SubmodelElementCollection, Tag("SubmodelElementCollection")]
    | Annotated[SubmodelElementList, Tag("SubmodelElementList")]
    | Annotated[Entity, Tag("Entity")]
    | Annotated[BasicEventElement, Tag("BasicEventElement")]
    | Annotated[Operation, Tag("Operation")]
    | Annotated[Capability, Tag("Capability")],
    Discriminator(_submodel_element_discriminator),
]

# Update forward references for recursive models
AnnotatedRelationshipElement.model_rebuild()
SubmodelElementCollection.model_rebuild()
SubmodelElementList.model_rebuild()
Entity.model_rebuild()
OperationVariable.model_rebuild()
Operation.model_rebuild()

SubmodelElement = SubmodelElementUnion
