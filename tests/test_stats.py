import tomllib
from datetime import datetime, timezone

import pytest

from argonsync import stats
from argonsync.stats import ArgonStats, StatTracker


@pytest.fixture
def argon_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    directory = tmp_path / ".argon"
    directory.mkdir()
    stats.save()
    (directory / "stats.toml").unlink()
    return directory


def _read(directory):
    return tomllib.loads((directory / "stats.toml").read_text())


def _load(directory):
    return StatTracker._from_toml((directory / "stats.toml").read_text())


def test_total_counts_whole_hours():
    assert ArgonStats(files_synced=7).total() == 7
    assert ArgonStats(minutes_used=59).total() == 0
    assert ArgonStats().total() == 0


def test_extend_adds_each_field():
    first = ArgonStats(1, 2, 3, 4, 5, 6)
    second = ArgonStats(10, 20, 30, 40, 50, 60)
    first.extend(second)
    assert first == ArgonStats(1 + 10, 2 + 20, 3 + 30, 4 + 40, 5 + 50, 6 + 60)


def test_merge_keeps_latest_sync_time():
    early = datetime(2020, 1, 1, tzinfo=timezone.utc)
    late = datetime(2021, 1, 1, tzinfo=timezone.utc)

    tracker = StatTracker(last_synced=early, stats=ArgonStats(files_synced=1))
    tracker.merge(StatTracker(last_synced=late, stats=ArgonStats(files_synced=2)))
    assert tracker.last_synced == late
    assert tracker.stats.files_synced == 1 + 2

    tracker.merge(StatTracker(last_synced=early))
    assert tracker.last_synced == late


def test_reset_clears_stats():
    tracker = StatTracker(stats=ArgonStats(lines_synced=9))
    tracker.reset()
    assert tracker.stats == ArgonStats()


def test_save_writes_counters(argon_dir):
    stats.files_synced(3)
    stats.projects_built(2)
    stats.save()
    restored = _load(argon_dir)
    assert restored.stats == ArgonStats(files_synced=3, projects_built=2)
    assert _read(argon_dir)["last_synced"] == {"secs_since_epoch": 0, "nanos_since_epoch": 0}


def test_save_accumulates(argon_dir):
    stats.lines_synced(4)
    stats.save()
    stats.lines_synced(6)
    stats.save()
    assert _load(argon_dir).stats.lines_synced == 4 + 6


def test_save_resets_memory(argon_dir):
    stats.sessions_started(1)
    stats.save()
    stats.save()
    assert _load(argon_dir).stats.sessions_started == 1


def test_corrupted_file_is_replaced(argon_dir):
    (argon_dir / "stats.toml").write_text("[[[ broken")
    stats.minutes_used(4)
    stats.save()
    assert _load(argon_dir).stats == ArgonStats(minutes_used=4)


def test_sync_time_round_trips(argon_dir):
    moment = datetime(2022, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)
    (argon_dir / "stats.toml").write_text(StatTracker(last_synced=moment)._to_toml())
    stats.save()
    data = _read(argon_dir)
    restored = _load(argon_dir)
    assert restored.last_synced == moment
    assert data["last_synced"]["nanos_since_epoch"] == 123456 * 1000