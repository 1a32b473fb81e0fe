"""Mapping of document nodes to flat records.

``RecordBuilder`` turns one node at a time into its record: the common
referable/semantic/administrative columns, the kind tag of a submodel
element, and the value rows of the element's variant-specific attributes.
It performs no traversal; ``aasdb.core.walker`` decides which nodes are built
and with which parent.

Value rows per element kind:

    Kind                          t_value   value rows
    ----------------------------  --------  ---------------------------------
    RelationshipElement (Rel)     -         O: First, Second
    AnnotatedRelationship (RelA)  -         O: First, Second
    Property (Prop)               coerced   O: ValueId; S/I/D: value
    MultiLanguageProperty (MLP)   S         O: ValueId; S: one per language
    Range                         coerced   O: ValueType; S/I/D: Min, Max
    Blob / File                   S         S: value, annotated content type
    ReferenceElement (Ref)        -         O: Value
    SubmodelElementList (SML)     -         O: OrderRelevant, SemanticIdListElement,
                                               TypeValueListElement, ValueTypeListElement
    Entity (Ent)                  S         S: globalAssetId; O: SpecificAssetIds
    BasicEventElement (Evt)       -         O: Observed, Direction, State, MessageTopic,
                                               MessageBroker, LastUpdate, MinInterval,
                                               MaxInterval
"""

from __future__ import annotations

import logging
from typing import Any

from aasdb.core.coercion import (
    CoercedValue,
    ScalarValue,
    ValueFamily,
    coerce,
    natural_family,
    reconcile_range,
)
from aasdb.core.context import VisitContext
from aasdb.core.serialize import serialize_element, serialize_list
from aasdb.document import (
    AdministrativeInformation,
    AnnotatedRelationshipElement,
    AssetAdministrationShell,
    BasicEventElement,
    Blob,
    Capability,
    ConceptDescription,
    DataTypeDefXsd,
    Entity,
    File,
    MultiLanguageProperty,
    Operation,
    Property,
    Range,
    Reference,
    ReferenceElement,
    RelationshipElement,
    Submodel,
    SubmodelElementBase,
    SubmodelElementCollection,
    SubmodelElementList,
)
from aasdb.persistence.tables import (
    AasTable,
    ConceptDescriptionTable,
    DoubleValueTable,
    EnvConceptDescriptionTable,
    EnvTable,
    IntValueTable,
    ObjectValueTable,
    StringValueTable,
    SubmodelElementTable,
    SubmodelTable,
    ValueTable,
    new_record_id,
)

logger = logging.getLogger(__name__)

# Annotations of Range endpoint rows
MIN_ANNOTATION = "Min"
MAX_ANNOTATION = "Max"


def element_tag(element: object) -> str:
    """Short kind tag stored in ``sme_type`` (without group prefix)."""
    match element:
        case RelationshipElement():
            return "Rel"
        case AnnotatedRelationshipElement():
            return "RelA"
        case Property():
            return "Prop"
        case MultiLanguageProperty():
            return "MLP"
        case Range():
            return "Range"
        case Blob():
            return "Blob"
        case File():
            return "File"
        case ReferenceElement():
            return "Ref"
        case Capability():
            return "Cap"
        case SubmodelElementList():
            return "SML"
        case SubmodelElementCollection():
            return "SMC"
        case Entity():
            return "Ent"
        case BasicEventElement():
            return "Evt"
        case Operation():
            return "Opr"
        case _:
            return ""


def _semantic_identifier(reference: Reference | None) -> str | None:
    return reference.get_as_identifier() if reference is not None else None


def _referable_columns(node: Any) -> dict[str, Any]:
    return {
        "id_short": node.id_short,
        "category": node.category,
        "display_name": serialize_list(node.display_name),
        "description": serialize_list(node.description),
        "extensions": serialize_list(node.extensions),
        "embedded_data_specifications": serialize_list(node.embedded_data_specifications),
        # Copied as-is: a node without timestamps yields a record without them
        "time_stamp_create": node.time_stamp_create,
        "time_stamp": node.time_stamp,
        "time_stamp_tree": node.time_stamp_tree,
        "time_stamp_delete": node.time_stamp_delete,
    }


def _semantic_columns(node: Any) -> dict[str, Any]:
    return {
        "semantic_id": _semantic_identifier(node.semantic_id),
        "supplemental_semantic_ids": serialize_list(node.supplemental_semantic_ids),
        "qualifiers": serialize_list(node.qualifiers),
    }


def _administration_columns(admin: AdministrativeInformation | None) -> dict[str, Any]:
    if admin is None:
        return {}
    return {
        "version": admin.version,
        "revision": admin.revision,
        "creator": serialize_element(admin.creator),
        "template_id": admin.template_id,
        "a_embedded_data_specifications": serialize_list(admin.embedded_data_specifications),
    }


class RecordBuilder:
    """Builds records for document nodes.

    Args:
        warn_on_type_fallback: Log a warning when a value is stored in a
            different family than its declared type implies
    """

    def __init__(self, warn_on_type_fallback: bool = True) -> None:
        self.warn_on_type_fallback = warn_on_type_fallback
        self.fallback_count = 0

    # -------------------------------------------------------------------------
    # Identifiables
    # -------------------------------------------------------------------------

    def build_environment(self, path: str | None = None) -> EnvTable:
        return EnvTable(id=new_record_id(), path=path)

    def build_concept_description(self, cd: ConceptDescription) -> ConceptDescriptionTable:
        return ConceptDescriptionTable(
            id=new_record_id(),
            identifier=cd.id,
            is_case_of=serialize_list(cd.is_case_of),
            **_referable_columns(cd),
            **_administration_columns(cd.administration),
        )

    def link_concept_description(self, env: EnvTable, cd_id: str) -> EnvConceptDescriptionTable:
        return EnvConceptDescriptionTable(id=new_record_id(), env_id=env.id, cd_id=cd_id)

    def build_shell(self, shell: AssetAdministrationShell, env: EnvTable) -> AasTable:
        info = shell.asset_information
        thumbnail = info.default_thumbnail if info is not None else None
        return AasTable(
            id=new_record_id(),
            env_id=env.id,
            identifier=shell.id,
            derived_from=serialize_element(shell.derived_from),
            asset_kind=serialize_element(info.asset_kind) if info else None,
            specific_asset_ids=serialize_list(info.specific_asset_ids) if info else None,
            global_asset_id=info.global_asset_id if info else None,
            asset_type=info.asset_type if info else None,
            default_thumbnail_path=thumbnail.path if thumbnail else None,
            default_thumbnail_content_type=thumbnail.content_type if thumbnail else None,
            **_referable_columns(shell),
            **_administration_columns(shell.administration),
        )

    def build_submodel(
        self,
        submodel: Submodel,
        env: EnvTable,
        owner: AasTable | None = None,
    ) -> SubmodelTable:
        return SubmodelTable(
            id=new_record_id(),
            env_id=env.id,
            aas_id=owner.id if owner is not None else None,
            identifier=submodel.id,
            kind=serialize_element(submodel.kind),
            **_referable_columns(submodel),
            **_semantic_columns(submodel),
            **_administration_columns(submodel.administration),
        )

    # -------------------------------------------------------------------------
    # Submodel elements
    # -------------------------------------------------------------------------

    def build_element(
        self,
        element: SubmodelElementBase,
        context: VisitContext,
    ) -> tuple[SubmodelElementTable, list[ValueTable]]:
        """Build the element record and its value rows.

        The record is placed under ``context.parent_id`` at the next
        pre-order position of the submodel.
        """
        record = SubmodelElementTable(
            id=new_record_id(),
            sm_id=context.submodel_id,
            parent_sme_id=context.parent_id,
            seq=context.next_position(),
            sme_type=context.prefix + element_tag(element),
            **_referable_columns(element),
            **_semantic_columns(element),
        )
        return record, self._element_values(element, record)

    def _element_values(
        self,
        element: SubmodelElementBase,
        record: SubmodelElementTable,
    ) -> list[ValueTable]:
        rows: list[ValueTable] = []

        def attribute(name: str, value: str | None) -> None:
            if value is not None:
                rows.append(_object_row(record, name, value))

        match element:
            case RelationshipElement() | AnnotatedRelationshipElement():
                attribute("First", serialize_element(element.first))
                attribute("Second", serialize_element(element.second))

            case Property():
                attribute("ValueId", serialize_element(element.value_id))
                coerced = self._coerce(element, element.value, element.value_type)
                if coerced is None:
                    record.t_value = natural_family(element.value_type).value
                else:
                    record.t_value = coerced.family.value
                    rows.append(
                        _scalar_row(
                            record,
                            coerced.family,
                            coerced.value,
                            serialize_element(element.value_type),
                        )
                    )

            case MultiLanguageProperty():
                attribute("ValueId", serialize_element(element.value_id))
                if element.value:
                    record.t_value = ValueFamily.STRING.value
                    for lang_string in element.value:
                        if lang_string.text:
                            rows.append(
                                _scalar_row(
                                    record,
                                    ValueFamily.STRING,
                                    lang_string.text,
                                    lang_string.language,
                                )
                            )

            case Range():
                attribute("ValueType", serialize_element(element.value_type))
                reconciled = reconcile_range(
                    self._coerce(element, element.min, element.value_type),
                    self._coerce(element, element.max, element.value_type),
                )
                if reconciled is not None:
                    record.t_value = reconciled.family.value
                    if reconciled.min is not None:
                        rows.append(
                            _scalar_row(record, reconciled.family, reconciled.min, MIN_ANNOTATION)
                        )
                    if reconciled.max is not None:
                        rows.append(
                            _scalar_row(record, reconciled.family, reconciled.max, MAX_ANNOTATION)
                        )

            case Blob() | File():
                # Blob content stays in its base64 text form; File value is the path
                if element.value or element.content_type:
                    record.t_value = ValueFamily.STRING.value
                    rows.append(
                        _scalar_row(
                            record,
                            ValueFamily.STRING,
                            element.value or "",
                            element.content_type,
                        )
                    )

            case ReferenceElement():
                attribute("Value", serialize_element(element.value))

            case SubmodelElementList():
                attribute("OrderRelevant", serialize_element(element.order_relevant))
                attribute(
                    "SemanticIdListElement", serialize_element(element.semantic_id_list_element)
                )
                attribute(
                    "TypeValueListElement", serialize_element(element.type_value_list_element)
                )
                attribute(
                    "ValueTypeListElement", serialize_element(element.value_type_list_element)
                )

            case Entity():
                record.t_value = ValueFamily.STRING.value
                if element.global_asset_id:
                    rows.append(
                        _scalar_row(
                            record,
                            ValueFamily.STRING,
                            element.global_asset_id,
                            serialize_element(element.entity_type),
                        )
                    )
                attribute("SpecificAssetIds", serialize_list(element.specific_asset_ids))

            case BasicEventElement():
                attribute("Observed", serialize_element(element.observed))
                attribute("Direction", serialize_element(element.direction))
                attribute("State", serialize_element(element.state))
                attribute("MessageTopic", element.message_topic)
                attribute("MessageBroker", serialize_element(element.message_broker))
                attribute("LastUpdate", element.last_update)
                attribute("MinInterval", element.min_interval)
                attribute("MaxInterval", element.max_interval)

            case _:
                # Capability, collections and operations carry no values
                pass

        return rows

    def _coerce(
        self,
        element: SubmodelElementBase,
        raw: str | None,
        declared: DataTypeDefXsd | None,
    ) -> CoercedValue | None:
        coerced = coerce(raw, declared)
        if coerced is not None and coerced.fallback:
            self.fallback_count += 1
            if self.warn_on_type_fallback:
                declared_name = declared.value if declared is not None else "undeclared"
                logger.warning(
                    f"type fallback: {element_tag(element)} '{element.id_short}' "
                    f"value {raw!r} declared {declared_name} stored as {coerced.family.value}"
                )
        return coerced


def _object_row(record: SubmodelElementTable, attribute: str, value: str) -> ObjectValueTable:
    return ObjectValueTable(id=new_record_id(), sme_id=record.id, attribute=attribute, value=value)


def _scalar_row(
    record: SubmodelElementTable,
    family: ValueFamily,
    value: ScalarValue,
    annotation: str | None,
) -> ValueTable:
    match family:
        case ValueFamily.INTEGER:
            return IntValueTable(
                id=new_record_id(), sme_id=record.id, value=value, annotation=annotation
            )
        case ValueFamily.DOUBLE:
            return DoubleValueTable(
                id=new_record_id(), sme_id=record.id, value=value, annotation=annotation
            )
        case _:
            return StringValueTable(
                id=new_record_id(), sme_id=record.id, value=value, annotation=annotation
            )
