# azure_unused_storage_tool/staleness.py
"""Decides whether a storage account is unused."""

import logging
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)


def ensure_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_threshold(days_ago: int, now: datetime | None = None) -> datetime:
    if now is None:
        now = datetime.now(timezone.utc)
    return ensure_utc(now) - timedelta(days=days_ago)


def is_fresh(blob, threshold_date: datetime) -> bool:
    # A blob modified exactly at the threshold is stale
    return ensure_utc(blob.last_modified) > threshold_date


def evaluate_account(walker, account, threshold_date: datetime):
    """Checks an account's blobs against the threshold.

    Stops at the first blob modified after `threshold_date`.

    Returns:
        tuple: (is_unused, blob) where blob is the blob that marked the account
        as used, or the last blob seen, or None if the account had no blobs.
    """
    last_seen = None
    for container in walker.list_containers(account):
        for blob in walker.iter_blobs(container):
            last_seen = blob
            if is_fresh(blob, threshold_date):
                logger.debug(f" -> {account.name}: '{container.name}/{blob.name}' modified {blob.last_modified}.")
                return False, blob
    return True, last_seen
