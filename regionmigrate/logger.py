import csv
import json
from pathlib import Path
from datetime import datetime
from typing import List, Optional

from .models import JournalEntry

class MigrationJournal:
    """Append-only record of renames and deletes. Also writes a JSON file per run.

    Rows hit the CSV as they happen, so a crash mid-run still leaves a trace
    of what was already changed on disk.
    """
    def __init__(self, journal_dir: Path, run_id: Optional[str] = None):
        self.journal_dir = journal_dir
        self.journal_dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.journal_dir / "actions.csv"
        self.run_id = run_id or datetime.now().strftime("%Y%m%d-%H%M%S")
        self.entries: List[JournalEntry] = []

        # Ensure CSV header exists
        if not self.csv_path.exists():
            with self.csv_path.open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(["run_id", "action", "src", "dst", "timestamp"])

    def record(self, action: str, src: Path, dst: Optional[Path] = None) -> JournalEntry:
        entry = JournalEntry(self.run_id, action, src, dst, datetime.now())
        self.entries.append(entry)
        with self.csv_path.open("a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow([
                entry.run_id,
                entry.action,
                str(entry.src),
                str(entry.dst) if entry.dst else "",
                entry.timestamp.isoformat(),
            ])
        return entry

    def write_snapshot(self) -> Optional[Path]:
        if not self.entries:
            return None
        run_file = self.journal_dir / f"{self.run_id}.json"
        data = [
            {
                "action": e.action,
                "src": str(e.src),
                "dst": str(e.dst) if e.dst else None,
                "timestamp": e.timestamp.isoformat(),
            }
            for e in self.entries
        ]
        run_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return run_file
