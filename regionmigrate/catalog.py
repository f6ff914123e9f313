"""Catalog access: which regions exist and which table each one belongs to.

The catalog is read from the already relocated root and meta regions. A
visitor is called once per row and stops the scan by returning False.
"""
import json
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Protocol

from .defaults import CATALOG_ROWS_FILE, META_TABLE_NAME, ROOT_REGION_ENCODED_NAME, ROOT_TABLE_NAME
from .errors import CatalogError
from .models import CatalogRow

log = logging.getLogger(__name__)

RowVisitor = Callable[[CatalogRow], bool]

ROOT_REGION_ROW = CatalogRow(table=ROOT_TABLE_NAME, encoded_name=ROOT_REGION_ENCODED_NAME)


class Catalog(Protocol):
    def scan_root_catalog(self, visitor: RowVisitor) -> None: ...

    def scan_table_catalog(self, root_row: CatalogRow, visitor: RowVisitor) -> None: ...


def walk_rows(rows: Iterable[CatalogRow], visitor: RowVisitor) -> int:
    """Feed rows to visitor until they run out or it asks to stop. Returns rows visited."""
    visited = 0
    for row in rows:
        visited += 1
        if not visitor(row):
            break
    return visited


class JsonCatalog:
    """Catalog rows kept as a JSON list in each catalog region's directory.

    Example rows.json:

        [{"table": "users", "encoded_name": "1742356512",
          "start_key": "", "end_key": "m"}]
    """

    def __init__(self, root: Path):
        self.root = root

    def region_dir(self, row: CatalogRow) -> Path:
        return self.root / row.table / row.encoded_name

    def load_rows(self, row: CatalogRow) -> List[CatalogRow]:
        path = self.region_dir(row) / CATALOG_ROWS_FILE
        if not path.exists():
            log.debug("No catalog rows at %s", path)
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Cannot read catalog rows {path}: {e}") from e
        if not isinstance(data, list):
            raise CatalogError(f"Catalog rows in {path} must be a list")

        rows: List[CatalogRow] = []
        for item in data:
            try:
                rows.append(CatalogRow(
                    table=str(item["table"]),
                    encoded_name=str(item["encoded_name"]),
                    start_key=str(item.get("start_key", "")),
                    end_key=str(item.get("end_key", "")),
                ))
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogError(f"Bad catalog row {item!r} in {path}") from e
        return rows

    def scan_root_catalog(self, visitor: RowVisitor) -> None:
        walk_rows(self.load_rows(ROOT_REGION_ROW), visitor)

    def scan_table_catalog(self, root_row: CatalogRow, visitor: RowVisitor) -> None:
        meta_row = CatalogRow(META_TABLE_NAME, root_row.encoded_name)
        walk_rows(self.load_rows(meta_row), visitor)
