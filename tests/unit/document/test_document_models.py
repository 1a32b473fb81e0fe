"""Tests for the lenient parsed document model."""

import logging
from datetime import datetime

import pytest
from pydantic import ValidationError

from aasdb.document import (
    DataTypeDefXsd,
    Entity,
    Environment,
    Key,
    KeyTypes,
    Operation,
    Property,
    Reference,
    Submodel,
    SubmodelElementCollection,
)


class TestReference:
    def test_single_key_identifier(self) -> None:
        ref = Reference(keys=[Key(type=KeyTypes.GLOBAL_REFERENCE, value="0173-1#02-AAO677#002")])
        assert ref.get_as_identifier() == "0173-1#02-AAO677#002"
        assert ref.first_key_value == "0173-1#02-AAO677#002"

    def test_multi_key_identifier_is_last_key(self) -> None:
        ref = Reference(
            keys=[
                Key(type=KeyTypes.SUBMODEL, value="urn:sm:1"),
                Key(type=KeyTypes.PROPERTY, value="Temperature"),
            ]
        )
        assert ref.get_as_identifier() == "Temperature"
        assert ref.first_key_value == "urn:sm:1"

    def test_empty_reference(self) -> None:
        ref = Reference()
        assert ref.get_as_identifier() is None
        assert ref.first_key_value is None

    def test_empty_key_value(self) -> None:
        ref = Reference(keys=[Key(type=KeyTypes.SUBMODEL, value="")])
        assert ref.first_key_value is None


class TestLenientParsing:
    def test_camel_case_payload(self) -> None:
        prop = Property.model_validate(
            {
                "modelType": "Property",
                "idShort": "Temperature",
                "valueType": "xs:double",
                "value": "25.5",
                "semanticId": {
                    "type": "ExternalReference",
                    "keys": [{"type": "GlobalReference", "value": "urn:sem:temp"}],
                },
            }
        )
        assert prop.id_short == "Temperature"
        assert prop.value_type is DataTypeDefXsd.XS_DOUBLE
        assert prop.semantic_id.get_as_identifier() == "urn:sem:temp"

    def test_unknown_members_are_ignored(self) -> None:
        prop = Property.model_validate({"modelType": "Property", "vendorExtra": 1})
        assert not hasattr(prop, "vendorExtra")

    def test_missing_fields_are_allowed(self) -> None:
        submodel = Submodel.model_validate({"modelType": "Submodel"})
        assert submodel.id is None
        assert submodel.submodel_elements is None

    def test_unknown_enum_values_become_none(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            prop = Property.model_validate(
                {
                    "modelType": "Property",
                    "valueType": "xs:Int",
                    "value": "42",
                    "semanticId": {
                        "type": "ModelReference",
                        "keys": [{"type": "Shell", "value": "x"}],
                    },
                }
            )
        assert prop.value_type is None
        assert prop.value == "42"
        assert prop.semantic_id.keys[0].type is None
        assert prop.semantic_id.keys[0].value == "x"
        assert "Ignoring unknown DataTypeDefXsd value 'xs:Int'" in caplog.text

    def test_known_enum_values_are_kept(self) -> None:
        key = Key.model_validate({"type": "Submodel", "value": "urn:sm:1"})
        assert key.type is KeyTypes.SUBMODEL
        assert Key(type=KeyTypes.CONCEPT_DESCRIPTION).type is KeyTypes.CONCEPT_DESCRIPTION

    def test_timestamps(self) -> None:
        prop = Property.model_validate(
            {"modelType": "Property", "timeStamp": "2024-05-01T12:00:00Z"}
        )
        assert isinstance(prop.time_stamp, datetime)
        assert prop.time_stamp_create is None


class TestElementUnion:
    def test_nested_elements_are_resolved_by_model_type(self) -> None:
        submodel = Submodel.model_validate(
            {
                "id": "urn:sm:1",
                "submodelElements": [
                    {
                        "modelType": "SubmodelElementCollection",
                        "idShort": "Outer",
                        "value": [
                            {"modelType": "Property", "idShort": "A"},
                            {"modelType": "Entity", "idShort": "E", "entityType": "SelfManagedEntity"},
                        ],
                    },
                    {
                        "modelType": "Operation",
                        "idShort": "Op",
                        "inputVariables": [{"value": {"modelType": "Property", "idShort": "X"}}],
                    },
                ],
            }
        )
        outer, operation = submodel.submodel_elements
        assert isinstance(outer, SubmodelElementCollection)
        assert isinstance(outer.value[0], Property)
        assert isinstance(outer.value[1], Entity)
        assert isinstance(operation, Operation)
        assert operation.input_variables[0].value.id_short == "X"

    def test_unknown_model_type_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Submodel.model_validate(
                {"id": "urn:sm:1", "submodelElements": [{"modelType": "Hologram"}]}
            )


class TestEnvironment:
    def test_environment_payload(self) -> None:
        env = Environment.model_validate(
            {
                "assetAdministrationShells": [{"id": "urn:aas:1", "idShort": "Motor"}],
                "submodels": [{"id": "urn:sm:1"}, None],
                "conceptDescriptions": [{"id": "urn:cd:1"}],
            }
        )
        assert env.asset_administration_shells[0].id_short == "Motor"
        assert env.submodels[1] is None
        assert env.concept_descriptions[0].id == "urn:cd:1"

    def test_empty_environment(self) -> None:
        env = Environment()
        assert env.asset_administration_shells is None
        assert env.submodels is None
