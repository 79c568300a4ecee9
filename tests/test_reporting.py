import csv
import os
import stat
import sys
from unittest import mock

import pytest

from azure_unused_storage_tool.exceptions import ExportWriteError
from azure_unused_storage_tool.models import ScanProgress, ScanResult, StorageAccount
from azure_unused_storage_tool.reporting import export_csv, format_progress, format_table, print_report

from conftest import NOW

ACCOUNTS = [
    StorageAccount(name="archivesa", location="westeurope"),
    StorageAccount(name="tmpdata01", location="eastus2"),
]


def test_format_progress():
    assert format_progress(ScanProgress.of(1, 3)) == "Processed 1 of 3 storage accounts (33.33%)"


def test_format_table_aligns_columns():
    lines = format_table(ACCOUNTS).splitlines()

    assert lines[0].split() == ["StorageAccountName", "Location"]
    assert set(lines[1].replace(" ", "")) == {"-"}
    assert lines[2].split() == ["archivesa", "westeurope"]
    assert lines[2].index("westeurope") == lines[0].index("Location")


def test_report_lists_unused_accounts(capsys):
    result = ScanResult(threshold_date=NOW, total_count=5, processed_count=5, unused_accounts=list(ACCOUNTS))
    print_report(result)
    out = capsys.readouterr().out

    assert "Unused storage account: archivesa (Location: westeurope)" in out
    assert "Unused storage account: tmpdata01 (Location: eastus2)" in out
    assert "Total: 2 of 5 storage account(s) unused." in out


def test_report_none_found(capsys):
    print_report(ScanResult(threshold_date=NOW, total_count=2, processed_count=2))
    out = capsys.readouterr().out

    assert "No unused storage accounts found" in out
    assert "StorageAccountName" not in out


def test_export_csv_rows_in_order(tmp_path):
    path = export_csv(ACCOUNTS, str(tmp_path))

    assert path == os.path.join(str(tmp_path), "UnusedStorageAccounts.csv")
    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [
        ["StorageAccountName", "Location"],
        ["archivesa", "westeurope"],
        ["tmpdata01", "eastus2"],
    ]
    assert os.listdir(tmp_path) == ["UnusedStorageAccounts.csv"]


def test_export_csv_defaults_to_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = export_csv(ACCOUNTS[:1])

    assert os.path.dirname(path) == str(tmp_path)
    assert (tmp_path / "UnusedStorageAccounts.csv").exists()


def test_export_csv_missing_directory_raises(tmp_path):
    with pytest.raises(ExportWriteError):
        export_csv(ACCOUNTS, str(tmp_path / "missing"))


def test_export_csv_failed_write_leaves_no_file(tmp_path):
    with mock.patch("azure_unused_storage_tool.reporting.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(ExportWriteError, match="disk full"):
            export_csv(ACCOUNTS, str(tmp_path))

    assert os.listdir(tmp_path) == []


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_export_csv_gets_regular_file_permissions(tmp_path):
    previous = os.umask(0o022)
    try:
        path = export_csv(ACCOUNTS, str(tmp_path))
    finally:
        os.umask(previous)

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o644
