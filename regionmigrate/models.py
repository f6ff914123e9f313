from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import List, Optional, Set

from .defaults import OLD_PREFIX


class Action(Enum):
    """Disposition of an anomalous file or directory."""
    ABORT = "abort"
    IGNORE = "ignore"
    DELETE = "delete"
    PROMPT = "prompt"


ACTIONS = MappingProxyType({a.value: a for a in Action})


class Classification(Enum):
    OLD_REGION = "old_region"
    LOG_FILE = "log_file"
    UNRECOGNIZED = "unrecognized"
    NORMAL = "normal"


class RunState(Enum):
    INIT = "init"
    VALIDATE_ENV = "validate_env"
    CHECK_VERSION = "check_version"
    CHECK_NEW_LAYOUT = "check_new_layout"
    SCAN_TOP_LEVEL = "scan_top_level"
    RELOCATE_ROOT = "relocate_root"
    RELOCATE_VIA_CATALOG = "relocate_via_catalog"
    DETECT_ORPHANS = "detect_orphans"
    STAMP_VERSION = "stamp_version"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStatus:
    path: Path
    name: str
    is_dir: bool


@dataclass(frozen=True)
class LayoutEntry:
    path: Path
    name: str
    is_dir: bool
    classification: Classification
    encoded_name: Optional[str] = None
    message: str = ""  # empty for NORMAL entries

    @property
    def is_anomaly(self) -> bool:
        return bool(self.message)


@dataclass(frozen=True)
class CatalogRow:
    table: str
    encoded_name: str
    start_key: str = ""
    end_key: str = ""


@dataclass(frozen=True)
class RelocationTask:
    table: str
    old_relative_path: str

    @property
    def new_name(self) -> str:
        name = Path(self.old_relative_path).name
        if name.startswith(OLD_PREFIX):
            return name[len(OLD_PREFIX):]
        return name


@dataclass
class MigrationState:
    read_only: bool
    new_layout_present: bool = False
    migration_needed: bool = False
    references: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class JournalEntry:
    run_id: str
    action: str  # "rename" or "delete"
    src: Path
    dst: Optional[Path]
    timestamp: datetime


@dataclass
class MigrationReport:
    state: RunState = RunState.INIT
    read_only: bool = False
    up_to_date: bool = False
    migration_needed: bool = False
    upgraded: bool = False
    warnings: List[str] = field(default_factory=list)
    relocated: List[Path] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)
