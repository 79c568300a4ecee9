# azure_unused_storage_tool/walker.py
"""Walks the containers and blobs of a storage account, tolerating listing failures."""

import logging
import time

from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt, wait_incrementing

from .config import CONTAINER_LIST_MAX_ATTEMPTS, CONTAINER_LIST_WAIT_INCREMENT, CONTAINER_LIST_WAIT_START
from .exceptions import TransientEnumerationError

logger = logging.getLogger(__name__)


class ContainerBlobWalker:
    """Wraps a data source with the container retry policy and blob error containment.

    `source` must provide `list_containers(account)` and `list_blobs(container)`.
    `sleep` is what tenacity uses between attempts.
    """

    def __init__(self, source, sleep=time.sleep):
        self.source = source
        self.sleep = sleep

    def _log_retry(self, retry_state):
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f" -> Container listing attempt {retry_state.attempt_number} failed: "
            f"{retry_state.outcome.exception()}. Retrying in {wait:.0f}s."
        )

    def list_containers(self, account):
        retrying = Retrying(
            retry=retry_if_exception_type(TransientEnumerationError),
            wait=wait_incrementing(start=CONTAINER_LIST_WAIT_START, increment=CONTAINER_LIST_WAIT_INCREMENT),
            stop=stop_after_attempt(CONTAINER_LIST_MAX_ATTEMPTS),
            sleep=self.sleep,
            before_sleep=self._log_retry,
        )
        try:
            return retrying(lambda: list(self.source.list_containers(account)))
        except RetryError as e:
            logger.warning(
                f" -> Giving up listing containers of {account.name} after {CONTAINER_LIST_MAX_ATTEMPTS} attempts "
                f"({e.last_attempt.exception()}). Treating the account as having no containers."
            )
            return []

    def iter_blobs(self, container):
        """Yields the container's blobs; a listing failure ends the iteration with a warning."""
        try:
            yield from self.source.list_blobs(container)
        except TransientEnumerationError as e:
            logger.warning(f" -> {e}. Treating remaining blobs of '{container.name}' as absent.")
