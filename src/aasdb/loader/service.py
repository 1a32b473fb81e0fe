"""Loading packages into a record sink.

``load_package`` runs one file through read, walk, commit and the optional
auxiliary file export. ``load_packages`` loads several files in sequence
with one shared concept description cache, so definitions shared between
packages are stored once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

from aasdb.config import settings
from aasdb.core.batch import RecordBatch
from aasdb.core.builder import RecordBuilder
from aasdb.core.cache import ConceptDescriptionCache
from aasdb.core.walker import EnvironmentWalker
from aasdb.loader.aasx import AasxReader, AuxiliaryResult, export_package_files
from aasdb.observability.logging import LogContext
from aasdb.persistence.sink import RecordSink
from aasdb.persistence.tables import ConceptDescriptionTable

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of loading one package."""

    path: Path
    batch: RecordBatch | None = None
    auxiliary: list[AuxiliaryResult] = field(default_factory=list)
    type_fallbacks: int = 0

    @property
    def counts(self) -> dict[str, int]:
        return self.batch.counts() if self.batch is not None else {}

    @property
    def auxiliary_failures(self) -> list[AuxiliaryResult]:
        return [result for result in self.auxiliary if not result.ok]


async def load_package(
    path: str | Path,
    *,
    sink: RecordSink,
    cache: ConceptDescriptionCache,
    create_files_only: bool = False,
    with_db_files: bool = False,
    files_dir: str | Path | None = None,
    reader: AasxReader | None = None,
) -> LoadResult:
    """Load one AASX or JSON environment file.

    Args:
        path: Package file
        sink: Destination of the flattened records
        cache: Concept description cache shared by the batch load
        create_files_only: Only export auxiliary files, store no records
        with_db_files: Export the thumbnail and supplementary files
        files_dir: Target directory of exported files
            (default ``<data_path>/files``)
        reader: Package reader (a default one is created when omitted)

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a readable package
    """
    path = Path(path)
    result = LoadResult(path=path)

    with LogContext(load_id=uuid4().hex[:12], source=path.name):
        package = await (reader or AasxReader()).read(path)

        if not create_files_only:
            builder = RecordBuilder(warn_on_type_fallback=settings.warn_on_type_fallback)
            walker = EnvironmentWalker(
                cache,
                builder=builder,
                security_marker=settings.security_shell_marker,
            )
            batch = walker.walk(package.environment, str(path))
            try:
                await sink.commit(batch)
            except Exception:
                # Concept descriptions of this batch were never stored
                cache.evict(
                    record.identifier
                    for record in batch.of_type(ConceptDescriptionTable)
                    if record.identifier
                )
                raise
            result.batch = batch
            result.type_fallbacks = builder.fallback_count
            logger.info(f"Loaded {path.name}: {len(batch)} records")

        if with_db_files:
            target = Path(files_dir) if files_dir is not None else Path(settings.data_path) / "files"
            result.auxiliary = await export_package_files(package, path.name, target)
            for failure in result.auxiliary_failures:
                logger.warning(f"Auxiliary file {failure.name} not exported: {failure.error}")

    return result


async def load_packages(
    paths: list[str | Path],
    *,
    sink: RecordSink,
    cache: ConceptDescriptionCache | None = None,
    create_files_only: bool = False,
    with_db_files: bool = False,
    files_dir: str | Path | None = None,
) -> list[LoadResult]:
    """Load several files in sequence, sharing one concept description cache.

    The cache must not be populated concurrently, so files are loaded one
    after the other. When a commit fails, the entries added for that file
    are evicted before the error propagates, so a reused cache only points
    at stored concept descriptions.
    """
    cache = cache if cache is not None else ConceptDescriptionCache()
    results = []
    for path in paths:
        results.append(
            await load_package(
                path,
                sink=sink,
                cache=cache,
                create_files_only=create_files_only,
                with_db_files=with_db_files,
                files_dir=files_dir,
            )
        )
    logger.info(f"Loaded {len(results)} packages, {len(cache)} concept descriptions cached")
    return results
