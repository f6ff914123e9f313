import pytest

from regionmigrate.catalog import JsonCatalog, walk_rows
from regionmigrate.errors import CatalogError
from regionmigrate.models import CatalogRow

from conftest import write_rows


def test_walk_rows_stops_when_visitor_says_so():
    rows = [CatalogRow("t", str(i)) for i in range(5)]
    seen = []

    def visitor(row):
        seen.append(row.encoded_name)
        return row.encoded_name != "2"

    assert walk_rows(rows, visitor) == 3
    assert seen == ["0", "1", "2"]


def test_root_catalog_reads_relocated_root_region(tmp_path):
    write_rows(tmp_path / "-ROOT-" / "70236052",
               [{"table": ".META.", "encoded_name": "1028785192"}])
    rows = []
    JsonCatalog(tmp_path).scan_root_catalog(lambda r: rows.append(r) or True)
    assert rows == [CatalogRow(".META.", "1028785192")]


def test_table_catalog_reads_meta_region(tmp_path):
    write_rows(tmp_path / ".META." / "1028785192", [
        {"table": "users", "encoded_name": "111", "end_key": "m"},
        {"table": "orders", "encoded_name": "333"},
    ])
    rows = []
    JsonCatalog(tmp_path).scan_table_catalog(
        CatalogRow(".META.", "1028785192"), lambda r: rows.append(r) or True)
    assert [(r.table, r.encoded_name, r.end_key) for r in rows] == [
        ("users", "111", "m"),
        ("orders", "333", ""),
    ]


def test_missing_rows_file_means_no_rows(tmp_path):
    rows = []
    JsonCatalog(tmp_path).scan_root_catalog(lambda r: rows.append(r) or True)
    assert rows == []


def test_malformed_rows(tmp_path):
    region = tmp_path / "-ROOT-" / "70236052"
    region.mkdir(parents=True)
    (region / "rows.json").write_text("{not json")
    with pytest.raises(CatalogError):
        JsonCatalog(tmp_path).scan_root_catalog(lambda r: True)

    write_rows(region, [{"table": ".META."}])
    with pytest.raises(CatalogError):
        JsonCatalog(tmp_path).scan_root_catalog(lambda r: True)
