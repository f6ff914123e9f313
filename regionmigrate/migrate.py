"""Upgrade of a flat ``hregion_<encoded>`` storage root to the per-table layout.

A run walks a fixed sequence of states (see ``RunState``):

    INIT -> VALIDATE_ENV -> CHECK_VERSION -> CHECK_NEW_LAYOUT -> SCAN_TOP_LEVEL
         -> RELOCATE_ROOT -> RELOCATE_VIA_CATALOG -> DETECT_ORPHANS
         -> STAMP_VERSION -> DONE

A current version marker ends the run right after CHECK_VERSION. A check
(read-only) run stops after SCAN_TOP_LEVEL. Any error moves the run to FAILED
and is re-raised; nothing is rolled back, a later run re-derives the remaining
work from what is on disk.
"""
import logging
from pathlib import Path
from typing import Optional

from .catalog import Catalog, JsonCatalog
from .config import MigrationConfig
from .defaults import (
    DEFAULT_PROBE_TIMEOUT,
    DEFAULT_SERVICE_URL,
    META_TABLE_NAME,
    OLD_PREFIX,
    ROOT_REGION_ENCODED_NAME,
    ROOT_TABLE_NAME,
)
from .errors import ConfigError, MigrateError, MigrationFailure
from .fs import LocalFileSystem
from .guard import AvailabilityGuard
from .logger import MigrationJournal
from .models import Action, CatalogRow, MigrationReport, MigrationState, RunState
from .mover import ReferenceTracker, RegionRelocator
from .orphans import OrphanDetector
from .policy import AnomalyPolicy, Confirmer
from .scanner import LayoutScanner
from .utils import validate_root_path
from .version import VersionProbe, VersionStamper, VersionStatus

log = logging.getLogger(__name__)


class Migration:
    def __init__(
        self,
        root_dir: str,
        read_only: bool = False,
        log_files: Action = Action.IGNORE,
        other_files: Action = Action.IGNORE,
        fs: Optional[LocalFileSystem] = None,
        catalog: Optional[Catalog] = None,
        confirm: Optional[Confirmer] = None,
        service_url: str = DEFAULT_SERVICE_URL,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        session=None,
    ):
        self.root_dir = str(root_dir)
        self.root: Optional[Path] = None
        self.fs = fs or LocalFileSystem()
        self.catalog = catalog
        self.service_url = service_url
        self.probe_timeout = probe_timeout
        self.session = session

        # A check never touches the disk, whatever the configured dispositions.
        if read_only:
            log_files = other_files = Action.IGNORE
        self.log_files = AnomalyPolicy(log_files, self.fs, confirm)
        self.other_files = AnomalyPolicy(other_files, self.fs, confirm)

        self.state = RunState.INIT
        self.migration = MigrationState(read_only=read_only)
        self.references = ReferenceTracker(self.migration.references)
        self.report = MigrationReport(read_only=read_only)

    @classmethod
    def from_config(cls, config: MigrationConfig, read_only: bool = False,
                    confirm: Optional[Confirmer] = None) -> "Migration":
        journal = None
        if config.journal_dir and not read_only:
            journal_dir = Path(config.journal_dir).expanduser()
            try:
                journal = MigrationJournal(journal_dir)
            except OSError as e:
                raise ConfigError(f"Cannot open journal directory {journal_dir}: {e}") from e
        return cls(
            config.root_dir,
            read_only=read_only,
            log_files=config.log_files,
            other_files=config.extra_files,
            fs=LocalFileSystem(journal),
            confirm=confirm,
            service_url=config.service_url,
            probe_timeout=config.probe_timeout,
        )

    def _enter(self, state: RunState) -> None:
        log.debug("%s -> %s", self.state.value, state.value)
        self.state = state
        self.report.state = state

    def run(self) -> MigrationReport:
        try:
            self._run()
        except MigrateError:
            self._enter(RunState.FAILED)
            raise
        except OSError as e:
            self._enter(RunState.FAILED)
            raise MigrationFailure(f"Filesystem error: {e}") from e
        finally:
            self._finish_report()
        return self.report

    def _run(self) -> None:
        read_only = self.migration.read_only

        self._enter(RunState.VALIDATE_ENV)
        self.root = validate_root_path(self.root_dir)
        AvailabilityGuard(self.fs, self.root, self.service_url, self.probe_timeout,
                          session=self.session).check()
        if self.catalog is None:
            self.catalog = JsonCatalog(self.root)

        log.info("Starting upgrade%s", " check" if read_only else "")

        self._enter(RunState.CHECK_VERSION)
        if VersionProbe(self.fs, self.root).check() is VersionStatus.CURRENT:
            log.info("No upgrade necessary.")
            self.report.up_to_date = True
            self._enter(RunState.DONE)
            return

        self._enter(RunState.CHECK_NEW_LAYOUT)
        new_root_region = self.root / ROOT_TABLE_NAME / ROOT_REGION_ENCODED_NAME
        self.migration.new_layout_present = self.fs.exists(new_root_region)
        self.migration.migration_needed = not self.migration.new_layout_present

        self._enter(RunState.SCAN_TOP_LEVEL)
        LayoutScanner(self.fs, self.root, self.migration,
                      self.log_files, self.other_files).scan()

        if not self.migration.new_layout_present:
            old_root_region = OLD_PREFIX + ROOT_REGION_ENCODED_NAME
            if not self.fs.exists(self.root / old_root_region):
                raise MigrationFailure(f"Cannot find root region {old_root_region}")
            if read_only:
                self.migration.migration_needed = True
            else:
                self._relocate_all(old_root_region)

        if not read_only:
            self._enter(RunState.STAMP_VERSION)
            VersionStamper(self.fs, self.root).stamp()
            self.report.upgraded = True
            log.info("Upgrade successful.")
        elif self.migration.migration_needed:
            log.info("Upgrade needed.")
        self._enter(RunState.DONE)

    def _relocate_all(self, old_root_region: str) -> None:
        relocator = RegionRelocator(self.fs, self.root, self.references)

        def relocate(table: str, encoded_name: str) -> None:
            self.report.relocated.append(relocator.relocate(table, OLD_PREFIX + encoded_name))

        self._enter(RunState.RELOCATE_ROOT)
        self.report.relocated.append(relocator.relocate(ROOT_TABLE_NAME, old_root_region))

        self._enter(RunState.RELOCATE_VIA_CATALOG)

        def visit_table_region(row: CatalogRow) -> bool:
            relocate(row.table, row.encoded_name)
            return True

        def visit_meta_region(row: CatalogRow) -> bool:
            relocate(META_TABLE_NAME, row.encoded_name)
            self.catalog.scan_table_catalog(row, visit_table_region)
            return True

        self.catalog.scan_root_catalog(visit_meta_region)

        self._enter(RunState.DETECT_ORPHANS)
        OrphanDetector(self.fs, self.root, self.references, self.other_files).detect()

    def _finish_report(self) -> None:
        self.report.migration_needed = self.migration.migration_needed
        self.report.warnings = self.log_files.warnings + self.other_files.warnings
        self.report.deleted = self.log_files.deleted + self.other_files.deleted
        journal = getattr(self.fs, "journal", None)
        if journal:
            journal.write_snapshot()
