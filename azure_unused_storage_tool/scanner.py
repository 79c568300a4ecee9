# azure_unused_storage_tool/scanner.py
"""Runs a scan over every storage account of a resource group."""

import logging
import time
from datetime import datetime

from .config import ScanConfig
from .models import ScanProgress, ScanResult
from .staleness import compute_threshold, evaluate_account
from .walker import ContainerBlobWalker

logger = logging.getLogger(__name__)


def scan_storage_accounts(source, config: ScanConfig, now: datetime | None = None,
                          on_progress=None, sleep=time.sleep) -> ScanResult:
    """Finds the accounts of `config.resource_group` with no blob newer than the threshold.

    `source` provides `list_storage_accounts`, `account_session`, `list_containers`
    and `list_blobs`. Each account is evaluated inside its own `account_session`.
    The threshold date is computed once, from `now` (defaults to the current UTC time).
    `on_progress` is called with a ScanProgress after each account.
    """
    threshold_date = compute_threshold(config.staleness_threshold_days, now)
    logger.info(f"Staleness threshold date: {threshold_date.isoformat()}")

    accounts = list(source.list_storage_accounts(config.resource_group))
    walker = ContainerBlobWalker(source, sleep=sleep)
    result = ScanResult(threshold_date=threshold_date, total_count=len(accounts))

    for account in accounts:
        logger.info(f"Processing storage account: {account.name} ({account.location})")
        with source.account_session(account):
            is_unused, blob = evaluate_account(walker, account, threshold_date)
        result.sampled_blobs.append(blob)
        if is_unused:
            logger.info(f" -> {account.name} has no blob modified after {threshold_date:%Y-%m-%d}. Marked as unused.")
            result.unused_accounts.append(account)
        else:
            logger.info(f" -> {account.name} is in use.")

        result.processed_count += 1
        if on_progress is not None:
            on_progress(ScanProgress.of(result.processed_count, result.total_count))

    logger.info(f"Scan finished: {len(result.unused_accounts)} of {result.total_count} account(s) unused.")
    return result
