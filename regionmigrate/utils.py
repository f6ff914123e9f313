import re
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from .defaults import OLD_PREFIX, REFERENCE_SEPARATOR
from .errors import InvalidRootError

# <file id>.<encoded name of the referenced region>
_REFERENCE_NAME = re.compile(r"^(\d+)(?:" + re.escape(REFERENCE_SEPARATOR) + r"(.+))?$")
_LEGACY_ENCODED_NAME = re.compile(r"^[+-]?\d+$")


def validate_root_path(root: str) -> Path:
    """Return a resolved Path for a plain path or a local file: URI."""
    if not root or not root.strip():
        raise InvalidRootError("Root directory path is empty")
    if "://" in root or root.startswith("file:"):
        parsed = urlparse(root)
        if parsed.scheme != "file":
            raise InvalidRootError(
                f"Root directory '{root}' uses unsupported scheme '{parsed.scheme}'"
            )
        if parsed.netloc not in ("", "localhost"):
            raise InvalidRootError(
                f"Root directory '{root}' names a remote authority '{parsed.netloc}'"
            )
        if not parsed.path:
            raise InvalidRootError(f"Root directory '{root}' has no path")
        root = parsed.path
    return Path(root).expanduser().resolve()


def strip_old_prefix(name: str) -> str:
    if name.startswith(OLD_PREFIX):
        return name[len(OLD_PREFIX):]
    return name


def is_legacy_encoded_name(name: str) -> bool:
    """Old layouts encode region names as a signed 32-bit integer."""
    if not _LEGACY_ENCODED_NAME.match(name):
        return False
    return -2**31 <= int(name) < 2**31


def reference_token(file_name: str) -> Optional[str]:
    """Encoded name of the region a reference store file points into, or None."""
    m = _REFERENCE_NAME.match(file_name)
    if not m or m.group(2) is None:
        return None
    return file_name[file_name.index(REFERENCE_SEPARATOR) + 1:]
