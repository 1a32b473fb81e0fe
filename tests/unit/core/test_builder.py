"""Tests for record building of identifiables and submodel elements."""

import logging
from datetime import UTC, datetime

import orjson
import pytest

from aasdb.core.builder import RecordBuilder, element_tag
from aasdb.core.context import OperationGroup, VisitContext
from aasdb.document import (
    AdministrativeInformation,
    AnnotatedRelationshipElement,
    AssetAdministrationShell,
    AssetInformation,
    AssetKind,
    BasicEventElement,
    Blob,
    Capability,
    ConceptDescription,
    DataTypeDefXsd,
    Direction,
    Entity,
    EntityType,
    File,
    KeyTypes,
    LangString,
    ModellingKind,
    MultiLanguageProperty,
    Operation,
    Property,
    Range,
    ReferenceElement,
    RelationshipElement,
    Resource,
    SpecificAssetId,
    StateOfEvent,
    Submodel,
    SubmodelElementCollection,
    SubmodelElementList,
    AasSubmodelElements,
)
from aasdb.persistence.tables import (
    DoubleValueTable,
    IntValueTable,
    ObjectValueTable,
    StringValueTable,
)


@pytest.fixture
def context() -> VisitContext:
    return VisitContext(submodel_id="sm-record")


def objects(rows: list) -> dict[str, str]:
    return {row.attribute: row.value for row in rows if isinstance(row, ObjectValueTable)}


def scalars(rows: list, table: type) -> list[tuple[str | None, object]]:
    return [(row.annotation, row.value) for row in rows if isinstance(row, table)]


class TestElementTag:
    @pytest.mark.parametrize(
        ("element", "tag"),
        [
            (RelationshipElement(), "Rel"),
            (AnnotatedRelationshipElement(), "RelA"),
            (Property(), "Prop"),
            (MultiLanguageProperty(), "MLP"),
            (Range(), "Range"),
            (Blob(), "Blob"),
            (File(), "File"),
            (ReferenceElement(), "Ref"),
            (Capability(), "Cap"),
            (SubmodelElementList(), "SML"),
            (SubmodelElementCollection(), "SMC"),
            (Entity(), "Ent"),
            (BasicEventElement(), "Evt"),
            (Operation(), "Opr"),
        ],
    )
    def test_variant_tags(self, element: object, tag: str) -> None:
        assert element_tag(element) == tag

    def test_unknown_kind_has_empty_tag(self) -> None:
        assert element_tag(object()) == ""


class TestCommonColumns:
    """Referable and semantic columns shared by all elements."""

    def test_referable_fields(self, builder: RecordBuilder, context: VisitContext) -> None:
        element = Property(
            id_short="Temperature",
            category="VARIABLE",
            display_name=[LangString(language="en", text="Temperature")],
            description=[
                LangString(language="en", text="Measured"),
                LangString(language="de", text="Gemessen"),
            ],
        )
        record, _ = builder.build_element(element, context)

        assert record.id_short == "Temperature"
        assert record.category == "VARIABLE"
        assert orjson.loads(record.display_name) == [{"language": "en", "text": "Temperature"}]
        assert [d["language"] for d in orjson.loads(record.description)] == ["en", "de"]
        assert record.extensions is None
        assert record.qualifiers is None

    def test_semantic_id_resolves_last_key(
        self, builder: RecordBuilder, context: VisitContext, make_reference
    ) -> None:
        element = Property(
            semantic_id=make_reference(
                "urn:sm:1", "Collection", key_type=KeyTypes.SUBMODEL_ELEMENT_COLLECTION
            )
        )
        record, _ = builder.build_element(element, context)
        assert record.semantic_id == "Collection"

    def test_semantic_id_without_keys(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, _ = builder.build_element(Property(semantic_id={"keys": []}), context)
        assert record.semantic_id is None

    def test_timestamps_copied_without_default(
        self, builder: RecordBuilder, context: VisitContext
    ) -> None:
        stamp = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        record, _ = builder.build_element(Property(time_stamp=stamp), context)
        assert record.time_stamp == stamp
        assert record.time_stamp_create is None
        assert record.time_stamp_tree is None
        assert record.time_stamp_delete is None

    def test_parent_position_and_prefix(self, builder: RecordBuilder) -> None:
        context = VisitContext(submodel_id="sm").child_of("op").in_group(OperationGroup.INPUT)
        first, _ = builder.build_element(Property(), context)
        second, _ = builder.build_element(Capability(), context)

        assert first.sm_id == "sm"
        assert first.parent_sme_id == "op"
        assert first.sme_type == "In-Prop"
        assert second.sme_type == "In-Cap"
        assert (first.seq, second.seq) == (0, 1)


class TestPropertyValues:
    def test_integer_value(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, rows = builder.build_element(
            Property(value_type=DataTypeDefXsd.XS_INT, value="42"), context
        )
        assert record.t_value == "I"
        assert scalars(rows, IntValueTable) == [("xs:int", 42)]

    def test_double_value(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, rows = builder.build_element(
            Property(value_type=DataTypeDefXsd.XS_DOUBLE, value="25.5"), context
        )
        assert record.t_value == "D"
        assert scalars(rows, DoubleValueTable) == [("xs:double", 25.5)]

    def test_value_id(
        self, builder: RecordBuilder, context: VisitContext, make_reference
    ) -> None:
        _, rows = builder.build_element(
            Property(value="x", value_id=make_reference("urn:value:1")), context
        )
        value_id = orjson.loads(objects(rows)["ValueId"])
        assert value_id["keys"][0]["value"] == "urn:value:1"

    def test_empty_value_has_natural_family_and_no_rows(
        self, builder: RecordBuilder, context: VisitContext
    ) -> None:
        record, rows = builder.build_element(
            Property(value_type=DataTypeDefXsd.XS_DOUBLE, value=""), context
        )
        assert record.t_value == "D"
        assert rows == []

    def test_fallback_is_stored_and_logged(
        self, builder: RecordBuilder, context: VisitContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        element = Property(id_short="Speed", value_type=DataTypeDefXsd.XS_INT, value="fast")
        with caplog.at_level(logging.WARNING, logger="aasdb.core.builder"):
            record, rows = builder.build_element(element, context)

        assert record.t_value == "S"
        assert scalars(rows, StringValueTable) == [("xs:int", "fast")]
        assert builder.fallback_count == 1
        assert "type fallback" in caplog.text
        assert "Speed" in caplog.text

    def test_fallback_warning_disabled(
        self, context: VisitContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        builder = RecordBuilder(warn_on_type_fallback=False)
        with caplog.at_level(logging.WARNING, logger="aasdb.core.builder"):
            builder.build_element(Property(value_type=DataTypeDefXsd.XS_INT, value="x"), context)
        assert builder.fallback_count == 1
        assert "type fallback" not in caplog.text


class TestMultiLanguagePropertyValues:
    def test_one_row_per_language(self, builder: RecordBuilder, context: VisitContext) -> None:
        element = MultiLanguageProperty(
            value=[
                LangString(language="en", text="Motor"),
                LangString(language="de", text="Motor DE"),
                LangString(language="fr", text=""),
            ]
        )
        record, rows = builder.build_element(element, context)
        assert record.t_value == "S"
        assert scalars(rows, StringValueTable) == [("en", "Motor"), ("de", "Motor DE")]

    def test_empty_list(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, rows = builder.build_element(MultiLanguageProperty(value=[]), context)
        assert record.t_value is None
        assert rows == []


class TestRangeValues:
    def test_mixed_numeric_endpoints_become_doubles(
        self, builder: RecordBuilder, context: VisitContext
    ) -> None:
        element = Range(value_type=DataTypeDefXsd.XS_INT, min="1", max="2.5")
        record, rows = builder.build_element(element, context)

        assert record.t_value == "D"
        assert scalars(rows, DoubleValueTable) == [("Min", 1.0), ("Max", 2.5)]
        assert objects(rows) == {"ValueType": "xs:int"}

    def test_only_min_as_string(self, builder: RecordBuilder, context: VisitContext) -> None:
        element = Range(value_type=DataTypeDefXsd.XS_INT, min="abc")
        record, rows = builder.build_element(element, context)

        assert record.t_value == "S"
        assert scalars(rows, StringValueTable) == [("Min", "abc")]
        assert scalars(rows, IntValueTable) == []
        assert scalars(rows, DoubleValueTable) == []

    def test_no_endpoints(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, rows = builder.build_element(Range(value_type=DataTypeDefXsd.XS_INT), context)
        assert record.t_value is None
        assert [row for row in rows if not isinstance(row, ObjectValueTable)] == []


class TestBlobAndFileValues:
    def test_blob_keeps_base64_text(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, rows = builder.build_element(
            Blob(content_type="text/plain", value="aGVsbG8="), context
        )
        assert record.t_value == "S"
        assert scalars(rows, StringValueTable) == [("text/plain", "aGVsbG8=")]

    def test_file_without_path(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, rows = builder.build_element(File(content_type="application/pdf"), context)
        assert record.t_value == "S"
        assert scalars(rows, StringValueTable) == [("application/pdf", "")]

    def test_empty_file(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, rows = builder.build_element(File(), context)
        assert record.t_value is None
        assert rows == []


class TestStructuredValues:
    def test_relationship_endpoints(
        self, builder: RecordBuilder, context: VisitContext, make_reference
    ) -> None:
        element = RelationshipElement(
            first=make_reference("urn:a"), second=make_reference("urn:b")
        )
        record, rows = builder.build_element(element, context)
        values = objects(rows)
        assert orjson.loads(values["First"])["keys"][0]["value"] == "urn:a"
        assert orjson.loads(values["Second"])["keys"][0]["value"] == "urn:b"
        assert record.t_value is None

    def test_reference_element(
        self, builder: RecordBuilder, context: VisitContext, make_reference
    ) -> None:
        _, rows = builder.build_element(ReferenceElement(value=make_reference("urn:x")), context)
        reference = orjson.loads(objects(rows)["Value"])
        assert reference["type"] == "ModelReference"
        assert reference["keys"] == [{"type": "Submodel", "value": "urn:x"}]

    def test_list_attributes(
        self, builder: RecordBuilder, context: VisitContext, make_reference
    ) -> None:
        element = SubmodelElementList(
            order_relevant=True,
            semantic_id_list_element=make_reference("urn:sem"),
            type_value_list_element=AasSubmodelElements.PROPERTY,
            value_type_list_element=DataTypeDefXsd.XS_STRING,
        )
        _, rows = builder.build_element(element, context)
        values = objects(rows)
        assert values["OrderRelevant"] == "true"
        assert values["TypeValueListElement"] == "Property"
        assert values["ValueTypeListElement"] == "xs:string"
        assert "SemanticIdListElement" in values

    def test_list_without_attributes(self, builder: RecordBuilder, context: VisitContext) -> None:
        _, rows = builder.build_element(SubmodelElementList(), context)
        assert rows == []

    def test_entity(self, builder: RecordBuilder, context: VisitContext) -> None:
        element = Entity(
            entity_type=EntityType.SELF_MANAGED_ENTITY,
            global_asset_id="urn:asset:1",
            specific_asset_ids=[SpecificAssetId(name="serial", value="123")],
        )
        record, rows = builder.build_element(element, context)
        assert record.t_value == "S"
        assert scalars(rows, StringValueTable) == [("SelfManagedEntity", "urn:asset:1")]
        assert orjson.loads(objects(rows)["SpecificAssetIds"]) == [
            {"name": "serial", "value": "123"}
        ]

    def test_entity_without_asset_id(self, builder: RecordBuilder, context: VisitContext) -> None:
        record, rows = builder.build_element(
            Entity(entity_type=EntityType.CO_MANAGED_ENTITY), context
        )
        assert record.t_value == "S"
        assert rows == []

    def test_basic_event_element(
        self, builder: RecordBuilder, context: VisitContext, make_reference
    ) -> None:
        element = BasicEventElement(
            observed=make_reference("urn:observed"),
            direction=Direction.OUTPUT,
            state=StateOfEvent.ON,
            message_topic="plant/line1",
            last_update="2024-01-01T00:00:00Z",
            min_interval="PT1S",
            max_interval="PT1M",
        )
        _, rows = builder.build_element(element, context)
        values = objects(rows)
        assert values["Direction"] == "output"
        assert values["State"] == "on"
        assert values["MessageTopic"] == "plant/line1"
        assert values["LastUpdate"] == "2024-01-01T00:00:00Z"
        assert values["MinInterval"] == "PT1S"
        assert values["MaxInterval"] == "PT1M"
        assert "Observed" in values
        assert "MessageBroker" not in values

    @pytest.mark.parametrize(
        "element", [Capability(), SubmodelElementCollection(), Operation()]
    )
    def test_kinds_without_values(
        self, builder: RecordBuilder, context: VisitContext, element: object
    ) -> None:
        record, rows = builder.build_element(element, context)
        assert rows == []
        assert record.t_value is None

    def test_value_rows_link_to_element(
        self, builder: RecordBuilder, context: VisitContext
    ) -> None:
        record, rows = builder.build_element(
            Range(value_type=DataTypeDefXsd.XS_INT, min="1", max="2"), context
        )
        assert rows
        assert all(row.sme_id == record.id for row in rows)
        assert len({row.id for row in rows}) == len(rows)


class TestIdentifiables:
    def test_environment(self, builder: RecordBuilder) -> None:
        env = builder.build_environment("/data/motor.aasx")
        assert env.path == "/data/motor.aasx"
        assert env.id

    def test_concept_description(self, builder: RecordBuilder, make_reference) -> None:
        cd = ConceptDescription(
            id="0173-1#02-AAO677#002",
            id_short="ManufacturerName",
            administration=AdministrativeInformation(version="1", revision="2"),
            is_case_of=[make_reference("urn:case", key_type=KeyTypes.GLOBAL_REFERENCE)],
        )
        record = builder.build_concept_description(cd)
        assert record.identifier == "0173-1#02-AAO677#002"
        assert record.id_short == "ManufacturerName"
        assert (record.version, record.revision) == ("1", "2")
        assert orjson.loads(record.is_case_of)[0]["keys"][0]["value"] == "urn:case"

    def test_concept_description_link(self, builder: RecordBuilder) -> None:
        env = builder.build_environment()
        link = builder.link_concept_description(env, "cd-record")
        assert (link.env_id, link.cd_id) == (env.id, "cd-record")

    def test_shell(self, builder: RecordBuilder, make_reference) -> None:
        env = builder.build_environment()
        shell = AssetAdministrationShell(
            id="urn:aas:1",
            id_short="Motor",
            derived_from=make_reference("urn:aas:type", key_type=KeyTypes.ASSET_ADMINISTRATION_SHELL),
            asset_information=AssetInformation(
                asset_kind=AssetKind.INSTANCE,
                global_asset_id="urn:asset:1",
                asset_type="Motor",
                default_thumbnail=Resource(path="/aasx/thumb.png", content_type="image/png"),
            ),
        )
        record = builder.build_shell(shell, env)
        assert record.env_id == env.id
        assert record.identifier == "urn:aas:1"
        assert record.asset_kind == "Instance"
        assert record.global_asset_id == "urn:asset:1"
        assert record.asset_type == "Motor"
        assert record.default_thumbnail_path == "/aasx/thumb.png"
        assert record.default_thumbnail_content_type == "image/png"
        assert orjson.loads(record.derived_from)["keys"][0]["value"] == "urn:aas:type"

    def test_shell_without_asset_information(self, builder: RecordBuilder) -> None:
        record = builder.build_shell(AssetAdministrationShell(id="urn:aas:1"), builder.build_environment())
        assert record.asset_kind is None
        assert record.default_thumbnail_path is None

    def test_submodel(self, builder: RecordBuilder, make_reference) -> None:
        env = builder.build_environment()
        owner = builder.build_shell(AssetAdministrationShell(id="urn:aas:1"), env)
        submodel = Submodel(
            id="urn:sm:1",
            kind=ModellingKind.INSTANCE,
            semantic_id=make_reference("urn:sem:nameplate", key_type=KeyTypes.GLOBAL_REFERENCE),
            administration=AdministrativeInformation(version="2", template_id="urn:tpl"),
        )
        record = builder.build_submodel(submodel, env, owner)
        assert record.aas_id == owner.id
        assert record.kind == "Instance"
        assert record.semantic_id == "urn:sem:nameplate"
        assert record.template_id == "urn:tpl"

    def test_unowned_submodel(self, builder: RecordBuilder) -> None:
        env = builder.build_environment()
        record = builder.build_submodel(Submodel(id="urn:sm:1"), env)
        assert record.aas_id is None
        assert record.env_id == env.id
