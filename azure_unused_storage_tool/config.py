# azure_unused_storage_tool/config.py
"""Stores constant values and the scan configuration used across the application."""

from dataclasses import dataclass

# Fallback when the resource provider reports no primary blob endpoint
BLOB_ENDPOINT_TEMPLATE = "https://{account_name}.blob.core.windows.net"

CSV_FILE_NAME = "UnusedStorageAccounts.csv"
CSV_HEADER = ("StorageAccountName", "Location")

# Container listing retry policy: 3 attempts, waits of 2s then 4s
CONTAINER_LIST_MAX_ATTEMPTS = 3
CONTAINER_LIST_WAIT_START = 2
CONTAINER_LIST_WAIT_INCREMENT = 2

# Package logger; module loggers named by __name__ are its children
LOGGER_NAME = "azure_unused_storage_tool"


def parse_export_flag(value) -> bool:
    """Returns True only when the flag is 'y' (any case, surrounding spaces ignored)."""
    if value is None:
        return False
    return str(value).strip().lower() == "y"


@dataclass(frozen=True)
class ScanConfig:
    """Input parameters of a single scan run."""
    subscription_id: str
    resource_group: str
    staleness_threshold_days: int
    export_csv: bool = False

    def __post_init__(self):
        if not self.subscription_id:
            raise ValueError("subscription_id cannot be empty.")
        if not self.resource_group:
            raise ValueError("resource_group cannot be empty.")
        if self.staleness_threshold_days < 0:
            raise ValueError(f"staleness_threshold_days must be >= 0, got {self.staleness_threshold_days}.")
