import logging
from pathlib import Path
from typing import Callable, List, Optional

from rich.prompt import Confirm

from .errors import ConfigError, MigrationFailure
from .fs import LocalFileSystem
from .models import ACTIONS, Action

log = logging.getLogger(__name__)

Confirmer = Callable[[str], bool]


def parse_action(name: str) -> Action:
    action = ACTIONS.get(name.strip().lower()) if name else None
    if action is None:
        raise ConfigError(
            f"Unknown action {name!r}, expected one of {{{'|'.join(ACTIONS)}}}"
        )
    return action


def console_confirm(message: str) -> bool:
    return Confirm.ask(message, default=False)


class AnomalyPolicy:
    """Applies one configured disposition to anomalous paths."""

    def __init__(self, action: Action, fs: LocalFileSystem,
                 confirm: Optional[Confirmer] = None):
        self.action = action
        self.fs = fs
        self.confirm = confirm or console_confirm
        self.warnings: List[str] = []
        self.deleted: List[Path] = []

    def resolve(self, message: str, path: Path) -> None:
        if self.action is Action.ABORT:
            raise MigrationFailure(f"{message} aborting")
        if self.action is Action.IGNORE:
            log.warning("%s ignoring", message)
            self.warnings.append(message)
            return
        if self.action is Action.DELETE or self.confirm(f"{message} delete?"):
            log.info("%s deleting", message)
            try:
                self.fs.delete(path)
            except OSError as e:
                raise MigrationFailure(f"{message}: could not delete {path}: {e}") from e
            self.deleted.append(path)
