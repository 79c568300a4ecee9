from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

import pytest

from azure_unused_storage_tool.exceptions import AuthError, TransientEnumerationError
from azure_unused_storage_tool.models import BlobRef, Container, StorageAccount

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def days_before_now(days):
    return NOW - timedelta(days=days)


class FakeStorageSource:
    """In-memory stand-in for AzureStorageSource.

    `layout` maps account name -> {container name: [BlobRef, ...]}.
    `container_failures` maps account name -> number of list_containers calls that fail first.
    `failing_blob_containers` holds (account, container) pairs whose blob listing fails.
    `forbidden_accounts` holds account names whose container listing is refused outright.
    """

    def __init__(self, layout, locations=None, container_failures=None, failing_blob_containers=(),
                 forbidden_accounts=()):
        self.layout = layout
        self.locations = locations or {}
        self.container_failures = dict(container_failures or {})
        self.failing_blob_containers = set(failing_blob_containers)
        self.forbidden_accounts = set(forbidden_accounts)
        self.sessions = []
        self.open_session = None
        self.container_calls = []
        self.blob_calls = []

    def list_storage_accounts(self, resource_group):
        return [
            StorageAccount(name=name, location=self.locations.get(name, "westeurope"))
            for name in self.layout
        ]

    @contextmanager
    def account_session(self, account):
        self.open_session = account.name
        try:
            yield self
        finally:
            self.open_session = None
            self.sessions.append(account.name)

    def list_containers(self, account):
        self.container_calls.append(account.name)
        if account.name in self.forbidden_accounts:
            raise AuthError(f"Listing containers of {account.name} was refused (HTTP 403)")
        if self.container_failures.get(account.name, 0) > 0:
            self.container_failures[account.name] -= 1
            raise TransientEnumerationError(f"listing containers of {account.name} timed out")
        return [Container(name=name, account=account) for name in self.layout[account.name]]

    def list_blobs(self, container):
        key = (container.account.name, container.name)
        self.blob_calls.append(key)
        if key in self.failing_blob_containers:
            raise TransientEnumerationError(f"listing blobs of {key[0]}/{key[1]} failed")
        return iter(self.layout[container.account.name][container.name])


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)

    @property
    def total(self):
        return sum(self.calls)


def blob(name, days_old):
    return BlobRef(name=name, last_modified=days_before_now(days_old))


@pytest.fixture
def sleep():
    return RecordingSleep()
