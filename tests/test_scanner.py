import pytest

from regionmigrate.errors import MigrationFailure
from regionmigrate.fs import LocalFileSystem
from regionmigrate.models import Action, Classification, MigrationState
from regionmigrate.policy import AnomalyPolicy
from regionmigrate.scanner import LayoutScanner


def make_scanner(root, new_layout_present=False, log_action=Action.IGNORE,
                 other_action=Action.IGNORE):
    fs = LocalFileSystem()
    state = MigrationState(read_only=False, new_layout_present=new_layout_present)
    log_files = AnomalyPolicy(log_action, fs)
    other_files = AnomalyPolicy(other_action, fs)
    return LayoutScanner(fs, root, state, log_files, other_files), state


def test_old_region_marks_migration_needed(storage_root):
    scanner, state = make_scanner(storage_root)
    entries = scanner.scan()
    assert [e.name for e in entries] == ["hregion_70236052"]
    assert entries[0].classification is Classification.OLD_REGION
    assert state.migration_needed


def test_log_files_use_their_own_policy(storage_root):
    (storage_root / "log_1234").write_text("edits")
    (storage_root / "stray.txt").write_text("x")
    scanner, _ = make_scanner(storage_root, log_action=Action.DELETE)
    scanner.scan()
    assert not (storage_root / "log_1234").exists()
    assert (storage_root / "stray.txt").exists()
    assert scanner.other_files.warnings == ["Unrecognized file stray.txt"]


def test_abort_stops_before_later_entries(storage_root):
    (storage_root / "aaa_first").write_text("x")
    (storage_root / "log_1234").write_text("edits")
    scanner, _ = make_scanner(storage_root, log_action=Action.DELETE,
                              other_action=Action.ABORT)
    with pytest.raises(MigrationFailure, match="Unrecognized file aaa_first"):
        scanner.scan()
    # scanning is interleaved with disposition, so the log file was never reached
    assert (storage_root / "log_1234").exists()


def test_stale_old_regions_with_new_layout(storage_root):
    (storage_root / "-ROOT-" / "70236052").mkdir(parents=True)
    (storage_root / "users").mkdir()
    scanner, state = make_scanner(storage_root, new_layout_present=True,
                                  other_action=Action.DELETE)
    scanner.scan()
    assert not (storage_root / "hregion_70236052").exists()
    assert (storage_root / "users").exists()
    assert not state.migration_needed


def test_empty_root_fails(tmp_path):
    scanner, _ = make_scanner(tmp_path)
    with pytest.raises(MigrationFailure, match="No files found"):
        scanner.scan()


def test_unlistable_root_fails(storage_root, monkeypatch):
    scanner, _ = make_scanner(storage_root)

    def deny(path):
        raise PermissionError(f"Permission denied: {path}")

    monkeypatch.setattr(scanner.fs, "list_status", deny)
    with pytest.raises(MigrationFailure, match="Cannot list root directory"):
        scanner.scan()
