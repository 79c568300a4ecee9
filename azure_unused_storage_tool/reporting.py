# azure_unused_storage_tool/reporting.py
"""Console output and CSV export of scan results."""

import csv
import logging
import os
import tempfile

from .config import CSV_FILE_NAME, CSV_HEADER
from .exceptions import ExportWriteError

logger = logging.getLogger(__name__)


def format_progress(progress) -> str:
    return (f"Processed {progress.processed} of {progress.total} storage accounts "
            f"({progress.percent_complete:.2f}%)")


def print_progress(progress):
    print(format_progress(progress))


def format_table(accounts) -> str:
    """Renders name/location rows as a fixed-width table."""
    rows = [(account.name, account.location or "") for account in accounts]
    widths = [max(len(row[i]) for row in [CSV_HEADER, *rows]) for i in range(len(CSV_HEADER))]
    lines = [
        "  ".join(cell.ljust(width) for cell, width in zip(CSV_HEADER, widths)).rstrip(),
        "  ".join("-" * width for width in widths),
    ]
    for row in rows:
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())
    return "\n".join(lines)


def print_report(result):
    print("\n" + "=" * 80)
    print(" UNUSED STORAGE ACCOUNTS ".center(80, "="))
    print("=" * 80)
    if not result.unused_accounts:
        print(f"No unused storage accounts found (no blob modified after {result.threshold_date:%Y-%m-%d}).")
        return

    for account in result.unused_accounts:
        print(f"Unused storage account: {account.name} (Location: {account.location})")
    print()
    print(format_table(result.unused_accounts))
    print(f"\nTotal: {len(result.unused_accounts)} of {result.total_count} storage account(s) unused.")


def _default_file_mode() -> int:
    """The mode open() would give a new file: 0o666 less the process umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def export_csv(accounts, output_dir=None) -> str:
    """Writes the accounts to UnusedStorageAccounts.csv and returns its path.

    The file is written to a temporary name first and moved into place, so a
    failed export never leaves a partial file behind.
    """
    output_dir = output_dir or os.getcwd()
    path = os.path.join(output_dir, CSV_FILE_NAME)
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".unused-", suffix=".csv", dir=output_dir)
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(CSV_HEADER)
            for account in accounts:
                writer.writerow([account.name, account.location])
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ExportWriteError(f"Failed to write {path}: {e}") from e

    logger.info(f"CSV output written to {path}")
    return path
