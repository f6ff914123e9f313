import logging
from pathlib import Path
from typing import List

from .classifier import LayoutClassifier
from .errors import MigrationFailure
from .fs import LocalFileSystem
from .models import Classification, LayoutEntry, MigrationState
from .policy import AnomalyPolicy

log = logging.getLogger(__name__)


def list_root(fs: LocalFileSystem, root: Path):
    try:
        stats = fs.list_status(root)
    except OSError as e:
        raise MigrationFailure(f"Cannot list root directory {root}: {e}") from e
    if not stats:
        raise MigrationFailure(f"No files found under root directory {root}")
    return stats


class LayoutScanner:
    """Scans the top level of the storage root and disposes of anomalies as it goes."""

    def __init__(self, fs: LocalFileSystem, root: Path, state: MigrationState,
                 log_files: AnomalyPolicy, other_files: AnomalyPolicy):
        self.fs = fs
        self.root = root
        self.state = state
        self.log_files = log_files
        self.other_files = other_files

    def scan(self) -> List[LayoutEntry]:
        classifier = LayoutClassifier(self.state.new_layout_present)
        entries: List[LayoutEntry] = []
        for st in list_root(self.fs, self.root):
            entry = classifier.classify(st)
            if entry.classification is Classification.OLD_REGION \
                    and not self.state.new_layout_present:
                self.state.migration_needed = True
            if entry.is_anomaly:
                policy = self.log_files \
                    if entry.classification is Classification.LOG_FILE \
                    else self.other_files
                policy.resolve(entry.message, entry.path)
            entries.append(entry)
        return entries
