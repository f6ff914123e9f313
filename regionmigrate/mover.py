import logging
from pathlib import Path
from typing import Iterator, Optional, Set

from .defaults import MAPFILES_DIR, OLD_PREFIX
from .errors import RelocationError
from .fs import LocalFileSystem
from .models import RelocationTask
from .utils import reference_token, strip_old_prefix

log = logging.getLogger(__name__)


class ReferenceTracker:
    """Encoded names of regions that some store file still points into."""

    def __init__(self, tokens: Optional[Set[str]] = None):
        self.tokens: Set[str] = tokens if tokens is not None else set()

    def add(self, encoded_name: str) -> None:
        self.tokens.add(encoded_name)

    def __contains__(self, encoded_name: str) -> bool:
        return encoded_name in self.tokens

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)


class RegionRelocator:
    """Moves a region directory from the flat layout into its table directory."""

    def __init__(self, fs: LocalFileSystem, root: Path, references: ReferenceTracker):
        self.fs = fs
        self.root = root
        self.references = references

    def relocate(self, table: str, old_relative_path: str) -> Path:
        task = RelocationTask(table, old_relative_path)
        table_dir = self.root / task.table
        src = self.root / task.old_relative_path
        dst = table_dir / task.new_name

        try:
            self.fs.mkdirs(table_dir)
            self.fs.rename(src, dst)
        except OSError as e:
            raise RelocationError(
                f"Could not move region {task.old_relative_path} into {table_dir}: {e}"
            ) from e
        log.info("Moved %s -> %s", src, dst)

        self._process_subdirs(dst)
        return dst

    def _process_subdirs(self, region_path: Path) -> None:
        in_mapfiles = region_path.name == MAPFILES_DIR
        try:
            children = self.fs.list_status(region_path)
        except OSError as e:
            raise RelocationError(f"Could not list {region_path}: {e}") from e

        for child in children:
            if child.is_dir:
                self._process_subdirs(child.path)

                # Old compaction directories carry the region prefix too
                if child.name.startswith(OLD_PREFIX):
                    renamed = region_path / strip_old_prefix(child.name)
                    try:
                        self.fs.rename(child.path, renamed)
                    except OSError as e:
                        raise RelocationError(
                            f"Could not rename {child.path} to {renamed}: {e}"
                        ) from e
            elif in_mapfiles:
                token = reference_token(child.name)
                if token is not None:
                    log.debug("%s references region %s", child.path, token)
                    self.references.add(token)
