"""Identifiable nodes: shells, submodels and concept descriptions."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from aasdb.document import LenientModel
from aasdb.document.administrative import AdministrativeInformation
from aasdb.document.elements import SpecificAssetId, SubmodelElementUnion
from aasdb.document.identifiers import LenientAssetKind, LenientModellingKind, Reference
from aasdb.document.referable import (
    HasQualifiersMixin,
    HasSemanticsMixin,
    ReferableMixin,
)


class IdentifiableMixin(ReferableMixin):
    id: str | None = None
    administration: AdministrativeInformation | None = None


class Resource(LenientModel):
    """A resource referenced by path, such as a thumbnail."""

    path: str | None = None
    content_type: str | None = Field(default=None, alias="contentType")


class AssetInformation(LenientModel):
    """Identification and metadata of the asset an AAS represents."""

    asset_kind: LenientAssetKind = Field(default=None, alias="assetKind")
    global_asset_id: str | None = Field(default=None, alias="globalAssetId")
    specific_asset_ids: list[SpecificAssetId] | None = Field(
        default=None, alias="specificAssetIds"
    )
    asset_type: str | None = Field(default=None, alias="assetType")
    default_thumbnail: Resource | None = Field(default=None, alias="defaultThumbnail")


class AssetAdministrationShell(IdentifiableMixin):
    """The administration shell of one managed asset.

    ``submodels`` lists references to the submodels the shell claims; they
    are matched against submodel identifiers by the walker.
    """

    model_type: Literal["AssetAdministrationShell"] = Field(
        default="AssetAdministrationShell", alias="modelType"
    )
    asset_information: AssetInformation | None = Field(
        default=None, alias="assetInformation"
    )
    derived_from: Reference | None = Field(default=None, alias="derivedFrom")
    submodels: list[Reference] | None = None


class Submodel(IdentifiableMixin, HasSemanticsMixin, HasQualifiersMixin):
    """An ordered collection of elements describing one aspect of an asset."""

    model_type: Literal["Submodel"] = Field(default="Submodel", alias="modelType")
    kind: LenientModellingKind = None
    submodel_elements: list[SubmodelElementUnion] | None = Field(
        default=None, alias="submodelElements"
    )


class ConceptDescription(IdentifiableMixin):
    """A globally identified, reusable definition referenced via semanticId."""

    model_type: Literal["ConceptDescription"] = Field(
        default="ConceptDescription", alias="modelType"
    )
    is_case_of: list[Reference] | None = Field(default=None, alias="isCaseOf")
