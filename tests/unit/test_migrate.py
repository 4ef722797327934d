from pathlib import Path

import pytest

from app.infrastructure.db import migrate


def test_list_migrations_is_sorted_and_sql_only(tmp_path: Path):
    for name in ("20251002_0900_b.sql", "20251001_0900_a.sql", "notes.txt"):
        (tmp_path / name).write_text("-- sql\n")

    found = migrate.list_migrations(tmp_path)

    assert [p.name for p in found] == ["20251001_0900_a.sql", "20251002_0900_b.sql"]


def test_list_migrations_missing_dir(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        migrate.list_migrations(tmp_path / "missing")


def test_pending_skips_applied_versions(tmp_path: Path):
    paths = [tmp_path / "001_a.sql", tmp_path / "002_b.sql", tmp_path / "003_c.sql"]
    assert migrate.pending(paths, {"001_a", "003_c"}) == [tmp_path / "002_b.sql"]
    assert migrate.pending(paths, set()) == paths


def test_cmd_new_creates_timestamped_file(tmp_path: Path):
    path = migrate.cmd_new("add_clients", tmp_path / "migrations")

    assert path.exists()
    assert path.name.endswith("_add_clients.sql")
    assert path.read_text() == "-- write your SQL here\n"


def test_migrations_dir_from_env(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("MIGRATIONS_DIR", str(tmp_path))
    assert migrate.migrations_dir() == tmp_path


def test_repo_migrations_are_discoverable():
    root = Path(__file__).resolve().parents[2] / "migrations"
    names = [p.stem for p in migrate.list_migrations(root)]
    assert "20251001_0900_identity" in names


def test_main_usage_errors():
    assert migrate.main(["migrate"]) == 2
    assert migrate.main(["migrate", "new"]) == 2
    assert migrate.main(["migrate", "sideways"]) == 2
