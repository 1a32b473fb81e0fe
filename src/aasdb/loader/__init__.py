"""Package loading: AASX reading, auxiliary file export and the load service."""

from aasdb.loader.aasx import (
    AasxPackage,
    AasxReader,
    AuxiliaryResult,
    AuxiliaryStatus,
    export_package_files,
)
from aasdb.loader.service import LoadResult, load_package, load_packages

__all__ = [
    "AasxPackage",
    "AasxReader",
    "AuxiliaryResult",
    "AuxiliaryStatus",
    "LoadResult",
    "export_package_files",
    "load_package",
    "load_packages",
]
