import logging
from pathlib import Path

import requests

from .errors import FileSystemUnavailableError, InvalidServiceUrlError, ServiceRunningError
from .fs import LocalFileSystem

log = logging.getLogger(__name__)


class AvailabilityGuard:
    """Gate run before any mutation: the root must be reachable and the
    storage service must be down."""

    def __init__(self, fs: LocalFileSystem, root: Path, service_url: str,
                 probe_timeout: float = 2.0, session=None):
        self.fs = fs
        self.root = root
        self.service_url = service_url
        self.probe_timeout = probe_timeout
        self.session = session if session is not None else requests

    def ensure_filesystem_reachable(self) -> None:
        log.info("Verifying that file system is available...")
        if not self.fs.exists(self.root):
            raise FileSystemUnavailableError(f"Root directory does not exist: {self.root}")
        if not self.fs.is_dir(self.root):
            raise FileSystemUnavailableError(f"Root path is not a directory: {self.root}")
        if not self.fs.is_readable(self.root):
            raise FileSystemUnavailableError(f"Root directory is not readable: {self.root}")

    def ensure_service_offline(self) -> None:
        if not self.service_url:
            log.warning("No service URL configured, skipping liveness probe")
            return
        log.info("Verifying that the storage service is not running...")
        try:
            resp = self.session.get(self.service_url, timeout=self.probe_timeout)
        except (requests.ConnectionError, requests.Timeout):
            # Expected: nothing is listening.
            return
        except requests.RequestException as e:
            raise InvalidServiceUrlError(
                f"Cannot check service URL {self.service_url!r}: {e}"
            ) from e
        raise ServiceRunningError(
            f"Storage service answered at {self.service_url} "
            f"(HTTP {resp.status_code}); the cluster must be off-line."
        )

    def check(self) -> None:
        self.ensure_filesystem_reachable()
        self.ensure_service_offline()
