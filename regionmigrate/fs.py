import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

from .logger import MigrationJournal
from .models import FileStatus

log = logging.getLogger(__name__)


class LocalFileSystem:
    """The handful of filesystem operations the migration needs.

    Renames and deletes are recorded in the journal when one is given.
    """

    def __init__(self, journal: Optional[MigrationJournal] = None):
        self.journal = journal

    def list_status(self, path: Path) -> List[FileStatus]:
        entries = [
            FileStatus(path=p, name=p.name, is_dir=p.is_dir())
            for p in path.iterdir()
        ]
        return sorted(entries, key=lambda e: e.name)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_readable(self, path: Path) -> bool:
        return os.access(path, os.R_OK | os.X_OK)

    def mkdirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def rename(self, src: Path, dst: Path) -> None:
        if not src.exists():
            raise FileNotFoundError(f"Rename source does not exist: {src}")
        if dst.exists():
            raise FileExistsError(f"Rename destination already exists: {dst}")
        log.debug("rename %s -> %s", src, dst)
        # Plain rename: a move across devices fails instead of copying.
        src.rename(dst)
        if self.journal:
            self.journal.record("rename", src, dst)

    def delete(self, path: Path) -> None:
        log.debug("delete %s", path)
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        if self.journal:
            self.journal.record("delete", path)

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, text: str) -> None:
        path.write_text(text, encoding="utf-8")
