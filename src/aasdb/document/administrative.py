"""Administrative information and embedded data specifications."""

from __future__ import annotations

from pydantic import Field

from aasdb.document import LenientModel
from aasdb.document.descriptions import LangString
from aasdb.document.identifiers import LenientDataTypeIec61360, Reference
from aasdb.document.qualifiers import ValueList


class LevelTypeSpec(LenientModel):
    """Specification of which level types are applicable."""

    min: bool | None = None
    max: bool | None = None
    nom: bool | None = None
    typ: bool | None = None


class DataSpecificationIec61360(LenientModel):
    """Data specification content following IEC 61360 / ECLASS structure."""

    model_type: str | None = Field(default=None, alias="modelType")
    preferred_name: list[LangString] | None = Field(default=None, alias="preferredName")
    short_name: list[LangString] | None = Field(default=None, alias="shortName")
    unit: str | None = None
    unit_id: Reference | None = Field(default=None, alias="unitId")
    source_of_definition: str | None = Field(default=None, alias="sourceOfDefinition")
    symbol: str | None = None
    data_type: LenientDataTypeIec61360 = Field(default=None, alias="dataType")
    definition: list[LangString] | None = None
    value_format: str | None = Field(default=None, alias="valueFormat")
    value_list: ValueList | None = Field(default=None, alias="valueList")
    value: str | None = None
    level_type: LevelTypeSpec | None = Field(default=None, alias="levelType")


class EmbeddedDataSpecification(LenientModel):
    """A reference to a data specification template plus its content."""

    data_specification: Reference | None = Field(default=None, alias="dataSpecification")
    data_specification_content: DataSpecificationIec61360 | None = Field(
        default=None, alias="dataSpecificationContent"
    )


class HasDataSpecificationMixin(LenientModel):
    embedded_data_specifications: list[EmbeddedDataSpecification] | None = Field(
        default=None, alias="embeddedDataSpecifications"
    )


class AdministrativeInformation(HasDataSpecificationMixin):
    """Version, revision, creator and template of an identifiable element."""

    version: str | None = None
    revision: str | None = None
    creator: Reference | None = None
    template_id: str | None = Field(default=None, alias="templateId")
