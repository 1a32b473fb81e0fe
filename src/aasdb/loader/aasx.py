"""AASX package reading and auxiliary file export.

AASX is a ZIP archive following the Open Packaging Conventions (OPC). The
reader merges every JSON environment part of a package into one parsed
``Environment`` and keeps the thumbnail and supplementary files in memory so
that they can be exported next to the database records.

Plain ``.json`` environment files are accepted as well; they have no
thumbnail or supplementary files.

Example:
    reader = AasxReader()
    package = await reader.read("/path/to/package.aasx")
    results = await export_package_files(package, "package.aasx", "./data/files")
"""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO, TypeVar

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]
import orjson
from pydantic import BaseModel, ValidationError

from aasdb.document import (
    AssetAdministrationShell,
    ConceptDescription,
    Environment,
    Submodel,
)

logger = logging.getLogger(__name__)

THUMBNAIL_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg")

M = TypeVar("M", bound=BaseModel)


@dataclass
class AasxPackage:
    """Contents of one package: the merged environment plus auxiliary files."""

    environment: Environment = field(default_factory=Environment)
    supplementary_files: dict[str, bytes] = field(default_factory=dict)
    thumbnail: bytes | None = None
    thumbnail_name: str | None = None
    environment_parts: list[str] = field(default_factory=list)


class AuxiliaryStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class AuxiliaryResult:
    """Outcome of exporting one auxiliary file.

    ``SKIPPED`` means the resource is absent from the package; ``FAILED``
    carries the error message. Neither aborts the load.
    """

    name: str
    status: AuxiliaryStatus
    target: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not AuxiliaryStatus.FAILED


class AasxReader:
    """Reads AASX packages and JSON environment files."""

    async def read(self, path: str | Path) -> AasxPackage:
        """Read a package from file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is neither a ZIP package nor JSON
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"AASX file not found: {path}")

        if path.suffix.lower() == ".json":
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
            package = AasxPackage()
            if not self._merge_json(content, path.name, package):
                raise ValueError(f"Invalid environment file: {path}")
            return package

        with open(path, "rb") as f:
            return self.read_stream(f)

    def read_stream(self, stream: BinaryIO) -> AasxPackage:
        """Read a package from a binary stream."""
        package = AasxPackage()

        try:
            with zipfile.ZipFile(stream, "r") as zf:
                names = zf.namelist()
                logger.debug(f"AASX contains {len(names)} parts")

                for name in names:
                    lower_name = name.lower()
                    if name.endswith("/"):
                        continue

                    # OPC bookkeeping
                    if "_rels/" in lower_name or name == "[Content_Types].xml":
                        continue
                    if "core-properties" in lower_name:
                        continue

                    if lower_name.endswith(".json"):
                        if self._merge_json(zf.read(name), name, package):
                            continue
                        package.supplementary_files[name] = zf.read(name)

                    elif lower_name.endswith(".xml") and lower_name.startswith("aasx/"):
                        logger.warning(f"Skipping XML environment part {name}: not supported")

                    elif "thumbnail" in lower_name and lower_name.endswith(THUMBNAIL_EXTENSIONS):
                        package.thumbnail = zf.read(name)
                        package.thumbnail_name = name
                        logger.debug(f"Extracted thumbnail: {name}")

                    else:
                        package.supplementary_files[name] = zf.read(name)

        except zipfile.BadZipFile as e:
            raise ValueError(f"Invalid AASX package: {e}") from e

        env = package.environment
        logger.info(
            f"Read {len(env.asset_administration_shells or [])} shells, "
            f"{len(env.submodels or [])} submodels, "
            f"{len(env.concept_descriptions or [])} concept descriptions, "
            f"{len(package.supplementary_files)} supplementary files"
        )
        return package

    def _merge_json(self, content: bytes, name: str, package: AasxPackage) -> bool:
        """Merge a JSON part into the package environment.

        Returns:
            True if the part held AAS content, False if it is some other file.
        """
        try:
            data = orjson.loads(content)
        except orjson.JSONDecodeError as e:
            logger.warning(f"Failed to parse JSON {name}: {e}")
            return False

        items: list[dict[str, Any]]
        if isinstance(data, dict) and _is_environment(data):
            part = Environment(
                asset_administration_shells=_validate_each(
                    AssetAdministrationShell, data.get("assetAdministrationShells"), name
                ),
                submodels=_validate_each(Submodel, data.get("submodels"), name),
                concept_descriptions=_validate_each(
                    ConceptDescription, data.get("conceptDescriptions"), name
                ),
            )
            _extend(package.environment, part)
            package.environment_parts.append(name)
            return True
        elif isinstance(data, dict) and "modelType" in data:
            items = [data]
        elif isinstance(data, list) and all(
            isinstance(item, dict) and "modelType" in item for item in data
        ):
            items = data
        else:
            return False

        part = Environment()
        for item in items:
            self._add_single_object(item, part, name)
        _extend(package.environment, part)
        package.environment_parts.append(name)
        return True

    def _add_single_object(self, data: dict[str, Any], env: Environment, name: str) -> None:
        """Add one identifiable, selected by its modelType."""
        model_type = data.get("modelType", "")
        try:
            if model_type == "AssetAdministrationShell":
                env.asset_administration_shells = [
                    *(env.asset_administration_shells or []),
                    AssetAdministrationShell.model_validate(data),
                ]
            elif model_type == "Submodel":
                env.submodels = [*(env.submodels or []), Submodel.model_validate(data)]
            elif model_type == "ConceptDescription":
                env.concept_descriptions = [
                    *(env.concept_descriptions or []),
                    ConceptDescription.model_validate(data),
                ]
            else:
                logger.debug(f"Skipping unknown modelType in {name}: {model_type}")
        except ValidationError as e:
            logger.warning(f"Failed to parse {model_type} in {name}: {e.error_count()} errors")


def _is_environment(data: dict[str, Any]) -> bool:
    return any(
        key in data
        for key in ("assetAdministrationShells", "submodels", "conceptDescriptions")
    )


def _validate_each(model: type[M], items: Any, name: str) -> list[M] | None:
    """Validate identifiables one at a time, skipping the malformed ones."""
    if items is None:
        return None
    if not isinstance(items, list):
        logger.warning(f"Skipping {model.__name__} entries in {name}: not a list")
        return None

    parsed: list[M] = []
    for item in items:
        if item is None:
            continue
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as e:
            label = item.get("id") or item.get("idShort") if isinstance(item, dict) else None
            logger.warning(
                f"Skipping {model.__name__} {label or '<unnamed>'} in {name}: "
                f"{e.error_count()} errors"
            )
    return parsed


def _extend(target: Environment, part: Environment) -> None:
    """Append the identifiables of ``part`` to ``target``, keeping order."""
    if part.asset_administration_shells:
        target.asset_administration_shells = [
            *(target.asset_administration_shells or []),
            *part.asset_administration_shells,
        ]
    if part.submodels:
        target.submodels = [*(target.submodels or []), *part.submodels]
    if part.concept_descriptions:
        target.concept_descriptions = [
            *(target.concept_descriptions or []),
            *part.concept_descriptions,
        ]


# -----------------------------------------------------------------------------
# Auxiliary file export
# -----------------------------------------------------------------------------


def thumbnail_file_name(name: str) -> str:
    """File name of an exported thumbnail: ``/`` and ``.`` become ``_``."""
    stem = f"{name}__thumbnail".replace("/", "_").replace(".", "_")
    return f"{stem}.dat"


async def export_package_files(
    package: AasxPackage,
    name: str,
    files_dir: str | Path,
) -> list[AuxiliaryResult]:
    """Export the thumbnail and supplementary files of a package.

    Writes ``<files_dir>/<name>__thumbnail.dat`` and ``<files_dir>/<name>.zip``
    (an archive of every supplementary file under its package path). Failures
    are logged and reported in the results; they never raise.

    Returns:
        One result for the thumbnail, then one per supplementary file
    """
    files_dir = Path(files_dir)
    results: list[AuxiliaryResult] = []

    try:
        if not await aiofiles.os.path.exists(files_dir):
            await aiofiles.os.makedirs(files_dir, exist_ok=True)
    except OSError as e:
        logger.warning(f"Cannot create files directory {files_dir}: {e}")
        failed = [AuxiliaryResult("thumbnail", AuxiliaryStatus.FAILED, error=str(e))]
        failed.extend(
            AuxiliaryResult(file_name, AuxiliaryStatus.FAILED, error=str(e))
            for file_name in package.supplementary_files
        )
        return failed

    results.append(await _export_thumbnail(package, name, files_dir))
    results.extend(await _export_supplementary(package, name, files_dir))
    return results


async def _export_thumbnail(package: AasxPackage, name: str, files_dir: Path) -> AuxiliaryResult:
    if package.thumbnail is None:
        return AuxiliaryResult("thumbnail", AuxiliaryStatus.SKIPPED)

    target = files_dir / thumbnail_file_name(name)
    try:
        async with aiofiles.open(target, "wb") as f:
            await f.write(package.thumbnail)
    except OSError as e:
        logger.warning(f"Failed to write thumbnail {target}: {e}")
        return AuxiliaryResult("thumbnail", AuxiliaryStatus.FAILED, target, str(e))

    logger.debug(f"Copied thumbnail to {target}")
    return AuxiliaryResult("thumbnail", AuxiliaryStatus.SUCCEEDED, target)


async def _export_supplementary(
    package: AasxPackage, name: str, files_dir: Path
) -> list[AuxiliaryResult]:
    target = files_dir / f"{name}.zip"
    results: list[AuxiliaryResult] = []

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for file_name, content in package.supplementary_files.items():
            try:
                archive.writestr(file_name, content)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to archive {file_name}: {e}")
                results.append(AuxiliaryResult(file_name, AuxiliaryStatus.FAILED, target, str(e)))
                continue
            results.append(AuxiliaryResult(file_name, AuxiliaryStatus.SUCCEEDED, target))

    try:
        async with aiofiles.open(target, "wb") as f:
            await f.write(buffer.getvalue())
    except OSError as e:
        logger.warning(f"Failed to write supplementary archive {target}: {e}")
        return [
            AuxiliaryResult(result.name, AuxiliaryStatus.FAILED, target, str(e))
            for result in results
        ]

    logger.debug(f"Archived {len(results)} supplementary files to {target}")
    return results
