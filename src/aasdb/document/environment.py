"""Root container of a parsed document.

Note: This class uses string annotations to avoid circular imports.
The model is rebuilt in __init__.py after all dependencies are loaded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from aasdb.document import LenientModel

if TYPE_CHECKING:
    from aasdb.document.identifiables import (
        AssetAdministrationShell,
        ConceptDescription,
        Submodel,
    )


class Environment(LenientModel):
    """Shells, submodels and concept descriptions of one document.

    Entries may be ``None`` when a loader could not parse them; the walker
    skips such holes.
    """

    asset_administration_shells: list[AssetAdministrationShell | None] | None = Field(
        default=None, alias="assetAdministrationShells"
    )
    submodels: list[Submodel | None] | None = None
    concept_descriptions: list[ConceptDescription | None] | None = Field(
        default=None, alias="conceptDescriptions"
    )
