from pathlib import Path
from typing import List

from .defaults import OLD_PREFIX
from .fs import LocalFileSystem
from .mover import ReferenceTracker
from .policy import AnomalyPolicy
from .scanner import list_root
from .utils import strip_old_prefix

class OrphanDetector:
    """Finds old region directories the catalog never mentioned.

    Anything still carrying the old prefix after catalog-driven relocation
    was not reachable from the catalog.
    """
    def __init__(self, fs: LocalFileSystem, root: Path, references: ReferenceTracker,
                 policy: AnomalyPolicy):
        self.fs = fs
        self.root = root
        self.references = references
        self.policy = policy

    def message_for(self, name: str) -> str:
        if strip_old_prefix(name) in self.references:
            return f"Region not in meta table but other regions reference it {name}"
        return f"Region not in meta table and no other regions reference it {name}"

    def detect(self) -> List[Path]:
        orphans: List[Path] = []
        for st in list_root(self.fs, self.root):
            if not st.name.startswith(OLD_PREFIX):
                continue
            orphans.append(st.path)
            self.policy.resolve(self.message_for(st.name), st.path)
        return orphans
