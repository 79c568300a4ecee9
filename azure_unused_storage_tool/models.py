# azure_unused_storage_tool/models.py
"""Data classes passed between the enumerator, walker, evaluator and reporter."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional


@dataclass(frozen=True)
class StorageAccount:
    """A storage account found in the target resource group.

    `access_context` is whatever the data source needs to list the account's
    containers (for Azure: the blob service endpoint URL).
    """
    name: str
    location: str
    access_context: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Container:
    name: str
    account: StorageAccount = field(compare=False, repr=False)


@dataclass(frozen=True)
class BlobRef:
    name: str
    last_modified: datetime


@dataclass(frozen=True)
class ScanProgress:
    processed: int
    total: int
    percent_complete: float

    @classmethod
    def of(cls, processed: int, total: int) -> "ScanProgress":
        percent = round(processed / total * 100, 2) if total else 100.0
        return cls(processed, total, percent)


@dataclass
class ScanResult:
    """Outcome of one scan. Built while walking, returned once all accounts are processed."""
    threshold_date: datetime
    total_count: int = 0
    processed_count: int = 0
    unused_accounts: List[StorageAccount] = field(default_factory=list)
    # One entry per account: the blob that marked it used, else the last blob seen (or None)
    sampled_blobs: List[Optional[BlobRef]] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.processed_count == self.total_count
