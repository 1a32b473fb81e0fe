"""Depth-first flattening of a parsed environment into a record batch.

The walk runs in two passes over the identifiables: shells are visited
first and register the submodels they claim, then submodels are visited and
resolved against that registry. Submodel elements are visited pre-order;
containers pass a derived ``VisitContext`` to their children.

Shells whose idShort contains the security marker ("globalsecurity") are not
stored. The submodels they reference are registered without an owner and
dropped when visited, unless a regular shell claims them as well.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from aasdb.core.batch import RecordBatch
from aasdb.core.builder import RecordBuilder
from aasdb.core.cache import ConceptDescriptionCache
from aasdb.core.context import OperationGroup, VisitContext
from aasdb.document import (
    AnnotatedRelationshipElement,
    AssetAdministrationShell,
    BasicEventElement,
    Blob,
    Capability,
    ConceptDescription,
    Entity,
    Environment,
    File,
    MultiLanguageProperty,
    Operation,
    OperationVariable,
    Property,
    Range,
    ReferenceElement,
    RelationshipElement,
    Submodel,
    SubmodelElementBase,
    SubmodelElementCollection,
    SubmodelElementList,
)
from aasdb.persistence.tables import AasTable, EnvTable

logger = logging.getLogger(__name__)

DEFAULT_SECURITY_MARKER = "globalsecurity"

# Registry value of a submodel claimed only by a security shell
NO_OWNER = None


class UnknownElementError(TypeError):
    """Raised when a node that is no known submodel element kind is visited."""

    def __init__(self, node: object):
        self.node = node
        super().__init__(f"Cannot flatten node of type {type(node).__name__}")


class EnvironmentWalker:
    """Flattens one environment per call into a ``RecordBatch``.

    The concept description cache is supplied by the caller and may be shared
    by walkers over several documents; records are only ever appended to the
    batch of the current walk.

    Args:
        cache: Concept description deduplication cache
        builder: Record builder (a default one is created when omitted)
        security_marker: Case-insensitive idShort substring of shells whose
            submodels are excluded
    """

    def __init__(
        self,
        cache: ConceptDescriptionCache,
        *,
        builder: RecordBuilder | None = None,
        security_marker: str = DEFAULT_SECURITY_MARKER,
    ) -> None:
        self.cache = cache
        self.builder = builder or RecordBuilder()
        self.security_marker = security_marker.lower()

    def walk(self, environment: Environment | None, path: str | None = None) -> RecordBatch:
        env = self.builder.build_environment(path)
        batch = RecordBatch(env)
        if environment is None:
            logger.debug("Empty environment, only the environment record is created")
            return batch

        self._visit_concept_descriptions(environment.concept_descriptions, env, batch)
        owners = self._visit_shells(environment.asset_administration_shells, env, batch)
        self._visit_submodels(environment.submodels, owners, env, batch)

        logger.debug(f"Flattened environment {path or '<memory>'}: {batch.counts()}")
        return batch

    # -------------------------------------------------------------------------
    # Identifiables
    # -------------------------------------------------------------------------

    def _visit_concept_descriptions(
        self,
        concept_descriptions: Iterable[ConceptDescription | None] | None,
        env: EnvTable,
        batch: RecordBatch,
    ) -> None:
        for cd in concept_descriptions or []:
            if cd is None or not cd.id:
                continue
            cd_id = self.cache.get(cd.id)
            if cd_id is None:
                record = self.builder.build_concept_description(cd)
                self.cache.add(cd.id, record.id)
                batch.append(record)
                cd_id = record.id
            batch.append(self.builder.link_concept_description(env, cd_id))

    def is_security_shell(self, shell: AssetAdministrationShell) -> bool:
        return self.security_marker in (shell.id_short or "").lower()

    def _visit_shells(
        self,
        shells: Iterable[AssetAdministrationShell | None] | None,
        env: EnvTable,
        batch: RecordBatch,
    ) -> dict[str, AasTable | None]:
        """Create shell records and return the submodel owner registry."""
        owners: dict[str, AasTable | None] = {}
        for shell in shells or []:
            if shell is None:
                continue

            owner: AasTable | None = NO_OWNER
            if self.is_security_shell(shell):
                logger.debug(f"Not storing security shell '{shell.id_short}'")
            else:
                owner = self.builder.build_shell(shell, env)
                batch.append(owner)

            for reference in shell.submodels or []:
                key = reference.first_key_value
                if key is None:
                    continue
                if key not in owners or owners[key] is NO_OWNER:
                    owners[key] = owner
        return owners

    def _visit_submodels(
        self,
        submodels: Iterable[Submodel | None] | None,
        owners: dict[str, AasTable | None],
        env: EnvTable,
        batch: RecordBatch,
    ) -> None:
        for submodel in submodels or []:
            if submodel is None:
                continue
            if submodel.id in owners and owners[submodel.id] is NO_OWNER:
                logger.info(f"Skipping submodel {submodel.id} referenced by a security shell")
                continue

            record = self.builder.build_submodel(submodel, env, owners.get(submodel.id))
            batch.append(record)
            context = VisitContext(submodel_id=record.id)
            self._visit_elements(submodel.submodel_elements, context, batch)

    # -------------------------------------------------------------------------
    # Submodel elements
    # -------------------------------------------------------------------------

    def _visit_elements(
        self,
        elements: Iterable[SubmodelElementBase | None] | None,
        context: VisitContext,
        batch: RecordBatch,
    ) -> None:
        for element in elements or []:
            if element is not None:
                self._visit_element(element, context, batch)

    def _visit_element(
        self,
        element: SubmodelElementBase,
        context: VisitContext,
        batch: RecordBatch,
    ) -> None:
        match element:
            case (
                RelationshipElement()
                | Property()
                | MultiLanguageProperty()
                | Range()
                | Blob()
                | File()
                | ReferenceElement()
                | Capability()
                | BasicEventElement()
            ):
                self._emit(element, context, batch)

            case SubmodelElementList() | SubmodelElementCollection():
                children = self._emit(element, context, batch)
                self._visit_elements(element.value, children, batch)

            case AnnotatedRelationshipElement():
                children = self._emit(element, context, batch)
                self._visit_elements(element.annotations, children, batch)

            case Entity():
                children = self._emit(element, context, batch)
                self._visit_elements(element.statements, children, batch)

            case Operation():
                children = self._emit(element, context, batch)
                groups = (
                    (OperationGroup.INPUT, element.input_variables),
                    (OperationGroup.OUTPUT, element.output_variables),
                    (OperationGroup.INOUTPUT, element.inoutput_variables),
                )
                for group, variables in groups:
                    self._visit_variables(variables, children.in_group(group), batch)

            case _:
                raise UnknownElementError(element)

    def _visit_variables(
        self,
        variables: Iterable[OperationVariable | None] | None,
        context: VisitContext,
        batch: RecordBatch,
    ) -> None:
        for variable in variables or []:
            if variable is not None and variable.value is not None:
                self._visit_element(variable.value, context, batch)

    def _emit(
        self,
        element: SubmodelElementBase,
        context: VisitContext,
        batch: RecordBatch,
    ) -> VisitContext:
        """Append the element and its values; return the context of its children."""
        record, values = self.builder.build_element(element, context)
        batch.append(record)
        batch.extend(values)
        return context.child_of(record.id)
