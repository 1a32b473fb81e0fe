"""AAS v3 enumerations, Keys and References."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Any, TypeVar

from pydantic import BeforeValidator, Field

from aasdb.document import LenientModel

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class KeyTypes(str, Enum):
    """Enumeration of key types for Reference keys."""

    # AAS Identifiables
    ASSET_ADMINISTRATION_SHELL = "AssetAdministrationShell"
    SUBMODEL = "Submodel"
    CONCEPT_DESCRIPTION = "ConceptDescription"

    # AAS Referables (non-identifiable)
    ANNOTATED_RELATIONSHIP_ELEMENT = "AnnotatedRelationshipElement"
    BASIC_EVENT_ELEMENT = "BasicEventElement"
    BLOB = "Blob"
    CAPABILITY = "Capability"
    DATA_ELEMENT = "DataElement"
    ENTITY = "Entity"
    EVENT_ELEMENT = "EventElement"
    FILE = "File"
    FRAGMENT_REFERENCE = "FragmentReference"
    GLOBAL_REFERENCE = "GlobalReference"
    IDENTIFIABLE = "Identifiable"
    MULTI_LANGUAGE_PROPERTY = "MultiLanguageProperty"
    OPERATION = "Operation"
    PROPERTY = "Property"
    RANGE = "Range"
    REFERABLE = "Referable"
    REFERENCE_ELEMENT = "ReferenceElement"
    RELATIONSHIP_ELEMENT = "RelationshipElement"
    SUBMODEL_ELEMENT = "SubmodelElement"
    SUBMODEL_ELEMENT_COLLECTION = "SubmodelElementCollection"
    SUBMODEL_ELEMENT_LIST = "SubmodelElementList"


class ReferenceTypes(str, Enum):
    """Type of a Reference."""

    EXTERNAL_REFERENCE = "ExternalReference"
    MODEL_REFERENCE = "ModelReference"


class AasSubmodelElements(str, Enum):
    """Element kinds allowed as typeValueListElement of a SubmodelElementList."""

    ANNOTATED_RELATIONSHIP_ELEMENT = "AnnotatedRelationshipElement"
    BASIC_EVENT_ELEMENT = "BasicEventElement"
    BLOB = "Blob"
    CAPABILITY = "Capability"
    DATA_ELEMENT = "DataElement"
    ENTITY = "Entity"
    EVENT_ELEMENT = "EventElement"
    FILE = "File"
    MULTI_LANGUAGE_PROPERTY = "MultiLanguageProperty"
    OPERATION = "Operation"
    PROPERTY = "Property"
    RANGE = "Range"
    REFERENCE_ELEMENT = "ReferenceElement"
    RELATIONSHIP_ELEMENT = "RelationshipElement"
    SUBMODEL_ELEMENT = "SubmodelElement"
    SUBMODEL_ELEMENT_COLLECTION = "SubmodelElementCollection"
    SUBMODEL_ELEMENT_LIST = "SubmodelElementList"


class EntityType(str, Enum):
    CO_MANAGED_ENTITY = "CoManagedEntity"
    SELF_MANAGED_ENTITY = "SelfManagedEntity"


class Direction(str, Enum):
    INPUT = "input"
    OUTPUT = "output"


class StateOfEvent(str, Enum):
    ON = "on"
    OFF = "off"


class DataTypeDefXsd(str, Enum):
    """XSD data types for Property, Range and Qualifier values."""

    XS_ANY_URI = "xs:anyURI"
    XS_BASE64_BINARY = "xs:base64Binary"
    XS_BOOLEAN = "xs:boolean"
    XS_BYTE = "xs:byte"
    XS_DATE = "xs:date"
    XS_DATE_TIME = "xs:dateTime"
    XS_DECIMAL = "xs:decimal"
    XS_DOUBLE = "xs:double"
    XS_DURATION = "xs:duration"
    XS_FLOAT = "xs:float"
    XS_G_DAY = "xs:gDay"
    XS_G_MONTH = "xs:gMonth"
    XS_G_MONTH_DAY = "xs:gMonthDay"
    XS_G_YEAR = "xs:gYear"
    XS_G_YEAR_MONTH = "xs:gYearMonth"
    XS_HEX_BINARY = "xs:hexBinary"
    XS_INT = "xs:int"
    XS_INTEGER = "xs:integer"
    XS_LONG = "xs:long"
    XS_NEGATIVE_INTEGER = "xs:negativeInteger"
    XS_NON_NEGATIVE_INTEGER = "xs:nonNegativeInteger"
    XS_NON_POSITIVE_INTEGER = "xs:nonPositiveInteger"
    XS_POSITIVE_INTEGER = "xs:positiveInteger"
    XS_SHORT = "xs:short"
    XS_STRING = "xs:string"
    XS_TIME = "xs:time"
    XS_UNSIGNED_BYTE = "xs:unsignedByte"
    XS_UNSIGNED_INT = "xs:unsignedInt"
    XS_UNSIGNED_LONG = "xs:unsignedLong"
    XS_UNSIGNED_SHORT = "xs:unsignedShort"


class DataTypeIec61360(str, Enum):
    """IEC 61360 data types for DataSpecificationIec61360."""

    BLOB = "BLOB"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    FILE = "FILE"
    HTML = "HTML"
    INTEGER_COUNT = "INTEGER_COUNT"
    INTEGER_CURRENCY = "INTEGER_CURRENCY"
    INTEGER_MEASURE = "INTEGER_MEASURE"
    IRDI = "IRDI"
    IRI = "IRI"
    RATIONAL = "RATIONAL"
    RATIONAL_MEASURE = "RATIONAL_MEASURE"
    REAL_COUNT = "REAL_COUNT"
    REAL_CURRENCY = "REAL_CURRENCY"
    REAL_MEASURE = "REAL_MEASURE"
    STRING = "STRING"
    STRING_TRANSLATABLE = "STRING_TRANSLATABLE"
    TIME = "TIME"
    TIMESTAMP = "TIMESTAMP"


class AssetKind(str, Enum):
    TYPE = "Type"
    INSTANCE = "Instance"
    NOT_APPLICABLE = "NotApplicable"


class ModellingKind(str, Enum):
    TEMPLATE = "Template"
    INSTANCE = "Instance"


class QualifierKind(str, Enum):
    CONCEPT_QUALIFIER = "ConceptQualifier"
    TEMPLATE_QUALIFIER = "TemplateQualifier"
    VALUE_QUALIFIER = "ValueQualifier"


# -----------------------------------------------------------------------------
# Tolerant enumeration fields
# -----------------------------------------------------------------------------


def lenient_enum(enum_type: type[E]) -> Any:
    """Optional field type that maps unrecognized values to None.

    Documents written against other metamodel versions carry enumeration
    values this model does not know (``"xs:Int"``, ``"Role"``). Such a value
    is logged and dropped instead of failing the enclosing identifiable.
    """

    def validate(value: Any) -> Any:
        if value is None or isinstance(value, enum_type):
            return value
        try:
            return enum_type(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring unknown {enum_type.__name__} value {value!r}")
            return None

    return Annotated[enum_type | None, BeforeValidator(validate)]


LenientKeyTypes = lenient_enum(KeyTypes)
LenientReferenceTypes = lenient_enum(ReferenceTypes)
LenientAasSubmodelElements = lenient_enum(AasSubmodelElements)
LenientEntityType = lenient_enum(EntityType)
LenientDirection = lenient_enum(Direction)
LenientStateOfEvent = lenient_enum(StateOfEvent)
LenientDataTypeDefXsd = lenient_enum(DataTypeDefXsd)
LenientDataTypeIec61360 = lenient_enum(DataTypeIec61360)
LenientAssetKind = lenient_enum(AssetKind)
LenientModellingKind = lenient_enum(ModellingKind)
LenientQualifierKind = lenient_enum(QualifierKind)


# -----------------------------------------------------------------------------
# Key and Reference
# -----------------------------------------------------------------------------


class Key(LenientModel):
    """A key in a Reference."""

    type: LenientKeyTypes = None
    value: str | None = None


class Reference(LenientModel):
    """A reference to an element, inside or outside the AAS ecosystem."""

    type: LenientReferenceTypes = None
    keys: list[Key] = Field(default_factory=list)
    referred_semantic_id: Reference | None = Field(default=None, alias="referredSemanticId")

    @property
    def first_key_value(self) -> str | None:
        """Value of the first key, or None when the reference is empty."""
        if not self.keys:
            return None
        return self.keys[0].value or None

    def get_as_identifier(self) -> str | None:
        """Resolve the reference to the identifier it points at.

        A single-key reference resolves to that key; a model reference with
        several keys resolves to its innermost (last) key.
        """
        if not self.keys:
            return None
        return self.keys[-1].value or None
