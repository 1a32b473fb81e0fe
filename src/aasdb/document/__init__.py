"""Parsed AAS v3 document tree consumed by the flattener.

The models mirror the IDTA-01001 metamodel field set, but they are lenient:
unknown members are ignored and every attribute is optional. The flattener
stores whatever a document carries and never rejects it for a missing field
or an unknown enumeration value, so only the JSON shape and the
``modelType`` discriminator of submodel elements have to be right for an
identifiable to load.
"""

from pydantic import BaseModel


class LenientModel(BaseModel):
    """Base model for all parsed document nodes.

    Note: extra="ignore" drops vendor members we do not map, and
    populate_by_name lets tests and callers use snake_case field names
    next to the camelCase JSON aliases.
    """

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }


# Import order matters due to forward references - LenientModel must be defined first
# ruff: noqa: E402
from aasdb.document.administrative import (
    AdministrativeInformation,
    DataSpecificationIec61360,
    EmbeddedDataSpecification,
    HasDataSpecificationMixin,
    LevelTypeSpec,
)
from aasdb.document.descriptions import LangString
from aasdb.document.elements import (
    AnnotatedRelationshipElement,
    BasicEventElement,
    Blob,
    Capability,
    Entity,
    File,
    MultiLanguageProperty,
    Operation,
    OperationVariable,
    Property,
    Range,
    ReferenceElement,
    RelationshipElement,
    SpecificAssetId,
    SubmodelElement,
    SubmodelElementBase,
    SubmodelElementCollection,
    SubmodelElementList,
)
from aasdb.document.environment import Environment
from aasdb.document.identifiables import (
    AssetAdministrationShell,
    AssetInformation,
    ConceptDescription,
    Resource,
    Submodel,
)
from aasdb.document.identifiers import (
    AasSubmodelElements,
    AssetKind,
    DataTypeDefXsd,
    DataTypeIec61360,
    Direction,
    EntityType,
    Key,
    KeyTypes,
    ModellingKind,
    QualifierKind,
    Reference,
    ReferenceTypes,
    StateOfEvent,
)
from aasdb.document.qualifiers import Extension, Qualifier, ValueReferencePair
from aasdb.document.referable import HasSemanticsMixin, ReferableMixin

__all__ = [
    "LenientModel",
    # Enums
    "AasSubmodelElements",
    "AssetKind",
    "DataTypeDefXsd",
    "DataTypeIec61360",
    "Direction",
    "EntityType",
    "KeyTypes",
    "ModellingKind",
    "QualifierKind",
    "ReferenceTypes",
    "StateOfEvent",
    # References
    "Key",
    "Reference",
    "LangString",
    # Mixins
    "HasDataSpecificationMixin",
    "HasSemanticsMixin",
    "ReferableMixin",
    # Qualifiers/Extensions
    "Extension",
    "Qualifier",
    "ValueReferencePair",
    # Administrative
    "AdministrativeInformation",
    "DataSpecificationIec61360",
    "EmbeddedDataSpecification",
    "LevelTypeSpec",
    # SubmodelElements
    "AnnotatedRelationshipElement",
    "BasicEventElement",
    "Blob",
    "Capability",
    "Entity",
    "File",
    "MultiLanguageProperty",
    "Operation",
    "OperationVariable",
    "Property",
    "Range",
    "ReferenceElement",
    "RelationshipElement",
    "SpecificAssetId",
    "SubmodelElement",
    "SubmodelElementBase",
    "SubmodelElementCollection",
    "SubmodelElementList",
    # Identifiables
    "AssetAdministrationShell",
    "AssetInformation",
    "ConceptDescription",
    "Resource",
    "Submodel",
    # Root
    "Environment",
]

# Resolve the forward references of the root container once every type is loaded
Environment.model_rebuild()
