from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from accel.cli import app

runner = CliRunner()


def _invoke(catalog: Path, *args: str):
    return runner.invoke(app, ["--directory", str(catalog), "--target", "memory://", "--log-level", "WARNING", *args])


def test_ls_lists_motions_in_order(catalog_dir: Path) -> None:
    result = _invoke(catalog_dir, "ls")

    assert result.exit_code == 0, result.output
    names = [line.split()[-1] for line in result.stdout.splitlines() if line.strip()]
    assert names == ["001-create-users.sql", "002-add-email.sql", "004-index-email.sql"]


def test_create_then_ls(catalog_dir: Path) -> None:
    result = _invoke(catalog_dir, "create", "drop-legacy")

    assert result.exit_code == 0, result.output
    assert "005-drop-legacy.add.sql" in result.stdout
    assert (catalog_dir / "005-drop-legacy.sub.sql").exists()

    listed = _invoke(catalog_dir, "ls")
    assert "005-drop-legacy.sql" in listed.stdout


def test_engine_commands_report_status(catalog_dir: Path) -> None:
    # memory:// lives for one invocation, so each command starts from 0
    assert "status: 3" in _invoke(catalog_dir, "up").stdout
    assert "status: 0" in _invoke(catalog_dir, "down").stdout
    assert "status: 2" in _invoke(catalog_dir, "add", "2").stdout
    assert "status: 0" in _invoke(catalog_dir, "sub").stdout
    assert "status: 2" in _invoke(catalog_dir, "goto", "1").stdout
    assert "status: 0" in _invoke(catalog_dir, "redo").stdout
    assert "status: 0" in _invoke(catalog_dir, "reset").stdout
    assert "status: 0" in _invoke(catalog_dir, "status").stdout


def test_catalog_error_exits_nonzero(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "up")

    assert result.exit_code == 1
    assert "CatalogError" in result.output


def test_unknown_driver_exits_nonzero(catalog_dir: Path) -> None:
    result = runner.invoke(app, ["--directory", str(catalog_dir), "--target", "mysql://x", "up"])

    assert result.exit_code == 1
    assert "DriverNotFound" in result.output


def test_command_closes_journal(catalog_dir: Path, tmp_path: Path, monkeypatch) -> None:
    import accel.cli as cli
    from accel.core.assembly import JournalComponent

    built = []
    real_build = cli.build_accelerator

    def build(cfg, **kwargs):
        accelerator = real_build(cfg.model_copy(update={"journal_path": tmp_path / "journal.jsonl"}), **kwargs)
        built.append(accelerator)
        return accelerator

    monkeypatch.setattr(cli, "build_accelerator", build)

    result = _invoke(catalog_dir, "up")
    assert result.exit_code == 0

    [accelerator] = built
    [journal] = [o for o in accelerator.observers if isinstance(o, JournalComponent)]
    assert not journal.store.is_open
    assert len(journal.store.iter_events()) == 5
