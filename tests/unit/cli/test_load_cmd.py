"""Tests for the load command."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import orjson
import pytest
from sqlalchemy.exc import OperationalError
from typer.testing import CliRunner

from aasdb.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def environment_file(tmp_path: Path) -> Path:
    path = tmp_path / "motor.json"
    path.write_bytes(
        orjson.dumps(
            {
                "assetAdministrationShells": [{"id": "urn:aas:1", "idShort": "Motor"}],
                "submodels": [
                    {
                        "id": "urn:sm:1",
                        "submodelElements": [
                            {"modelType": "Property", "idShort": "A", "value": "x"}
                        ],
                    }
                ],
            }
        )
    )
    return path


class TestLoadCommand:
    def test_dry_run_prints_summary(self, environment_file: Path) -> None:
        result = runner.invoke(app, ["load", str(environment_file), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Loaded Packages" in result.output
        assert "Dry run mode" in result.output

    def test_files_only_writes_archive(self, environment_file: Path, tmp_path: Path) -> None:
        data_path = tmp_path / "data"
        result = runner.invoke(
            app, ["load", str(environment_file), "--files-only", "--data-path", str(data_path)]
        )

        assert result.exit_code == 0, result.output
        assert (data_path / "files" / "motor.json.zip").exists()

    def test_options_may_follow_several_paths(
        self, environment_file: Path, tmp_path: Path
    ) -> None:
        second = tmp_path / "pump.json"
        second.write_bytes(environment_file.read_bytes())
        result = runner.invoke(app, ["load", str(environment_file), str(second), "-n"])

        assert result.exit_code == 0, result.output
        assert "Dry run mode" in result.output

    def test_missing_path_is_rejected(self) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(app, ["load", "missing.aasx", "--dry-run"])
        assert result.exit_code == 2
        assert "missing.aasx" in result.output
        assert "--dry-run" not in result.output

    def test_invalid_package_exits_with_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.aasx"
        path.write_bytes(b"not a zip")
        result = runner.invoke(app, ["load", str(path), "--dry-run"])
        assert result.exit_code == 1
        assert "Error loading package" in result.output

    def test_database_error_exits_with_error(
        self, environment_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        session = MagicMock()
        session.flush = AsyncMock()
        session.rollback = AsyncMock()
        session.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("connection lost"))
        )

        @asynccontextmanager
        async def fake_session_context():
            yield session

        monkeypatch.setattr("aasdb.persistence.db.health_check", AsyncMock(return_value=True))
        monkeypatch.setattr("aasdb.persistence.session_context", fake_session_context)

        result = runner.invoke(app, ["load", str(environment_file)])

        assert result.exit_code == 1, result.output
        assert "Error loading package" in result.output
        session.rollback.assert_awaited_once()
