"""
Pytest configuration and fixtures
=================================

Fixtures build small storage roots on disk in the old flat layout.
"""
import json
import sys
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from regionmigrate.fs import LocalFileSystem


class OfflineSession:
    """Liveness check stand-in: nothing is listening."""

    def __init__(self):
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        raise requests.ConnectionError(f"Connection refused: {url}")


class CountingFileSystem(LocalFileSystem):
    """LocalFileSystem that counts every mutating call."""

    def __init__(self, journal=None):
        super().__init__(journal)
        self.mutations = []

    def mkdirs(self, path):
        self.mutations.append(("mkdirs", path))
        super().mkdirs(path)

    def rename(self, src, dst):
        self.mutations.append(("rename", src, dst))
        super().rename(src, dst)

    def delete(self, path):
        self.mutations.append(("delete", path))
        super().delete(path)

    def write_text(self, path, text):
        self.mutations.append(("write_text", path))
        super().write_text(path, text)


def write_rows(region_dir: Path, rows) -> None:
    region_dir.mkdir(parents=True, exist_ok=True)
    (region_dir / "rows.json").write_text(json.dumps(rows), encoding="utf-8")


def make_region(root: Path, name: str, family: str = "info") -> Path:
    region = root / name
    (region / family / "mapfiles").mkdir(parents=True)
    (region / family / "info").mkdir()
    (region / family / "mapfiles" / "4711").write_text("data", encoding="utf-8")
    return region


@pytest.fixture
def offline_session():
    return OfflineSession()


@pytest.fixture
def counting_fs():
    return CountingFileSystem()


@pytest.fixture
def storage_root(tmp_path):
    """An old-layout root holding only the root region (no catalog rows)."""
    root = tmp_path / "hbase"
    root.mkdir()
    make_region(root, "hregion_70236052")
    return root


@pytest.fixture
def catalog_root(tmp_path):
    """An old-layout root with root, meta and two table regions.

    hregion_111 holds a reference to region 999, which is not in the
    catalog; hregion_555 is in no catalog and referenced by nobody.
    """
    root = tmp_path / "hbase"
    root.mkdir()

    rootregion = make_region(root, "hregion_70236052")
    write_rows(rootregion, [{"table": ".META.", "encoded_name": "1028785192"}])

    meta = make_region(root, "hregion_1028785192")
    write_rows(meta, [
        {"table": "users", "encoded_name": "111", "start_key": "", "end_key": "m"},
        {"table": "users", "encoded_name": "222", "start_key": "m", "end_key": ""},
    ])

    r111 = make_region(root, "hregion_111")
    (r111 / "info" / "mapfiles" / "123.999").write_text("ref", encoding="utf-8")
    compaction = r111 / "compaction.dir" / "hregion_111" / "info"
    compaction.mkdir(parents=True)
    (compaction / "done").write_text("", encoding="utf-8")

    make_region(root, "hregion_222")
    make_region(root, "hregion_999")
    make_region(root, "hregion_555")
    return root
