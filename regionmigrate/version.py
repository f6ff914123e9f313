import logging
from enum import Enum
from pathlib import Path

from .defaults import FILE_SYSTEM_VERSION, VERSION_FILE_NAME
from .errors import FileSystemVersionError, MigrationFailure
from .fs import LocalFileSystem

log = logging.getLogger(__name__)


class VersionStatus(Enum):
    CURRENT = "current"
    REQUIRES_MIGRATION = "requires_migration"


def check_version(fs: LocalFileSystem, root: Path) -> None:
    """Raise FileSystemVersionError unless the marker records the current layout."""
    marker = root / VERSION_FILE_NAME
    if not fs.exists(marker):
        raise FileSystemVersionError(f"No version file found at {marker}")
    try:
        found = fs.read_text(marker).strip()
    except OSError as e:
        raise MigrationFailure(f"Cannot read version file {marker}: {e}") from e
    if found != FILE_SYSTEM_VERSION:
        raise FileSystemVersionError(
            f"File system needs to be upgraded: found version {found!r}, "
            f"expected {FILE_SYSTEM_VERSION!r}"
        )


def set_version(fs: LocalFileSystem, root: Path) -> None:
    fs.write_text(root / VERSION_FILE_NAME, FILE_SYSTEM_VERSION)


class VersionProbe:
    def __init__(self, fs: LocalFileSystem, root: Path):
        self.fs = fs
        self.root = root

    def check(self) -> VersionStatus:
        try:
            check_version(self.fs, self.root)
        except FileSystemVersionError as e:
            log.info("%s", e)
            return VersionStatus.REQUIRES_MIGRATION
        return VersionStatus.CURRENT


class VersionStamper:
    def __init__(self, fs: LocalFileSystem, root: Path):
        self.fs = fs
        self.root = root

    def stamp(self) -> None:
        log.info("Setting file system version.")
        try:
            set_version(self.fs, self.root)
        except OSError as e:
            raise MigrationFailure(f"Cannot write version file under {self.root}: {e}") from e
