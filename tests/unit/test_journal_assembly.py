from __future__ import annotations

from pathlib import Path

import pytest

from accel.core.assembly import JournalComponent, build_accelerator
from accel.core.config.settings import AppSettings
from accel.core.events.motions import StepCompleted
from accel.drivers.memory import MemoryDriver
from accel.storage.jsonl import JsonlEventStore


def test_store_appends_one_line_per_event(tmp_path: Path) -> None:
    store = JsonlEventStore(path=tmp_path / "nested" / "journal.jsonl", fsync=False)
    for i in (1, 2):
        store.append(
            StepCompleted.create(
                run_id="r", motion=f"00{i}-m", index=i, operation="forward", reached=i + 1, sequence=i
            )
        )
    store.close()

    events = store.iter_events()
    assert [e["index"] for e in events] == [1, 2]
    assert all(e["event_type"] == "run.step_completed" for e in events)
    assert isinstance(events[0]["event_id"], str)


def test_missing_journal_reads_empty(tmp_path: Path) -> None:
    assert JsonlEventStore(path=tmp_path / "none.jsonl").iter_events() == []


@pytest.mark.asyncio
async def test_build_accelerator_from_settings(catalog_dir: Path, tmp_path: Path) -> None:
    journal = tmp_path / "journal.jsonl"
    cfg = AppSettings(
        _env_file=None,
        motions_dir=catalog_dir,
        database_url="memory://",
        journal_path=journal,
        single_flight=True,
    )

    accelerator = build_accelerator(cfg)
    assert isinstance(accelerator.driver, MemoryDriver)
    assert accelerator.single_flight
    assert accelerator.wiring is not None
    assert accelerator.wiring.components() == ("JournalComponent",)

    await accelerator.up()
    await accelerator.sub()

    driver = accelerator.driver
    assert driver.cursor == 2
    assert driver.history == [
        "CREATE TABLE users (id int);\n",
        "ALTER TABLE users ADD email text;\n",
        "CREATE INDEX users_email ON users (email);\n",
        "DROP INDEX users_email;\n",
    ]

    events = JsonlEventStore(path=journal).iter_events()
    steps = [e for e in events if e["event_type"] == "run.step_completed"]
    assert [(s["motion"], s["operation"]) for s in steps] == [
        ("001-create-users.sql", "forward"),
        ("002-add-email.sql", "forward"),
        ("004-index-email.sql", "forward"),
        ("004-index-email.sql", "backward"),
    ]
    assert [e["event_type"] for e in events].count("run.succeeded") == 2


def test_build_accelerator_uses_given_driver(catalog_dir: Path) -> None:
    driver = MemoryDriver()
    cfg = AppSettings(_env_file=None, motions_dir=catalog_dir, database_url="postgres://ignored")

    accelerator = build_accelerator(cfg, driver=driver)

    assert accelerator.driver is driver
    assert accelerator.wiring is not None
    assert accelerator.wiring.subscriptions == ()


def test_journal_component_subscribes_to_everything(tmp_path: Path) -> None:
    component = JournalComponent(store=JsonlEventStore(path=tmp_path / "j.jsonl"))
    [(event_type, _)] = component.subscriptions()
    assert event_type == "*"


@pytest.mark.asyncio
async def test_close_releases_driver_and_journal(catalog_dir: Path, tmp_path: Path) -> None:
    cfg = AppSettings(
        _env_file=None,
        motions_dir=catalog_dir,
        database_url="memory://",
        journal_path=tmp_path / "journal.jsonl",
    )
    accelerator = build_accelerator(cfg)
    [journal] = [o for o in accelerator.observers if isinstance(o, JournalComponent)]

    await accelerator.add()
    assert journal.store.is_open

    await accelerator.close()
    assert not journal.store.is_open


class _FailingCloseDriver(MemoryDriver):
    async def close(self) -> None:
        raise OSError("socket already gone")


@pytest.mark.asyncio
async def test_close_releases_journal_when_driver_close_fails(catalog_dir: Path, tmp_path: Path) -> None:
    cfg = AppSettings(_env_file=None, motions_dir=catalog_dir, journal_path=tmp_path / "journal.jsonl")
    accelerator = build_accelerator(cfg, driver=_FailingCloseDriver())
    [journal] = [o for o in accelerator.observers if isinstance(o, JournalComponent)]

    await accelerator.up()
    assert journal.store.is_open

    with pytest.raises(OSError, match="socket already gone"):
        await accelerator.close()
    assert not journal.store.is_open
