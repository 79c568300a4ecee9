# azure_unused_storage_tool/azure_utils.py
"""Provides the Azure SDK binding used to enumerate accounts, containers and blobs."""

import logging
import re
from contextlib import contextmanager

from azure.core.exceptions import AzureError, ClientAuthenticationError, ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.mgmt.resource import ResourceManagementClient, SubscriptionClient
from azure.mgmt.storage import StorageManagementClient
from azure.storage.blob import BlobServiceClient

from .config import BLOB_ENDPOINT_TEMPLATE
from .exceptions import AuthError, ScopeNotFoundError, TransientEnumerationError
from .models import BlobRef, Container, StorageAccount

# Get a logger specific to this module
logger = logging.getLogger(__name__)

MANAGEMENT_SCOPE = "https://management.azure.com/.default"
_GUID_RE = re.compile(r"^[0-9a-fA-F]{8}-([0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}$")


def get_credential():
    """Returns a credential that has been checked against the management endpoint."""
    credential = DefaultAzureCredential()
    try:
        credential.get_token(MANAGEMENT_SCOPE)
    except ClientAuthenticationError as e:
        raise AuthError(f"Unable to authenticate to Azure: {e.message}") from e
    logger.info("Azure credential acquired.")
    return credential


def resolve_subscription_id(credential, subscription: str) -> str:
    """Resolves a subscription display name or id to the subscription id.

    Both forms are matched case-insensitively against the subscriptions the
    credential can see.
    """
    wanted = subscription.strip().lower()
    try:
        subscriptions = list(SubscriptionClient(credential).subscriptions.list())
    except ClientAuthenticationError as e:
        raise AuthError(f"Not authorized to list subscriptions: {e.message}") from e

    for sub in subscriptions:
        if _GUID_RE.match(wanted) and (sub.subscription_id or "").lower() == wanted:
            return sub.subscription_id
    for sub in subscriptions:
        if (sub.display_name or "").lower() == wanted:
            logger.info(f"Resolved subscription '{subscription}' to {sub.subscription_id}.")
            return sub.subscription_id
    raise ScopeNotFoundError(f"Subscription '{subscription}' was not found or is not accessible.")


# HTTP statuses that mean the caller lacks rights; retrying cannot help
AUTH_FAILURE_STATUSES = (401, 403)


def _enumeration_error(error: AzureError, what: str):
    """Classifies a data-plane listing error as an AuthError or a TransientEnumerationError."""
    status = getattr(error, "status_code", None)
    if isinstance(error, ClientAuthenticationError) or status in AUTH_FAILURE_STATUSES:
        return AuthError(
            f"{what} was refused (HTTP {status or 401}): {error.message}. "
            "The credential needs data-plane read access, e.g. the Storage Blob Data Reader role."
        )
    return TransientEnumerationError(f"{what} failed: {error}")


class AzureStorageSource:
    """Lists storage accounts of one subscription, and their containers and blobs.

    Containers and blobs are only listed inside `account_session(account)`,
    which opens the account's BlobServiceClient and closes it afterwards.
    """

    def __init__(self, credential, subscription_id: str):
        self.credential = credential
        self.subscription_id = subscription_id
        self.resource_client = ResourceManagementClient(credential, subscription_id)
        self.storage_client = StorageManagementClient(credential, subscription_id)
        self._blob_client = None
        self._session_account = None

    def list_storage_accounts(self, resource_group: str) -> list[StorageAccount]:
        try:
            self.resource_client.resource_groups.get(resource_group)
            resources = list(self.storage_client.storage_accounts.list_by_resource_group(resource_group))
        except ResourceNotFoundError as e:
            raise ScopeNotFoundError(
                f"Resource group '{resource_group}' was not found in subscription {self.subscription_id}."
            ) from e
        except ClientAuthenticationError as e:
            raise AuthError(f"Not authorized to list resources in '{resource_group}': {e.message}") from e

        accounts = [
            StorageAccount(
                name=resource.name,
                location=resource.location,
                access_context=_blob_endpoint(resource),
            )
            for resource in resources
        ]
        logger.info(f"Found {len(accounts)} storage account(s) in resource group '{resource_group}'.")
        return accounts

    @contextmanager
    def account_session(self, account: StorageAccount):
        with BlobServiceClient(account_url=account.access_context, credential=self.credential) as client:
            self._blob_client = client
            self._session_account = account.name
            try:
                yield client
            finally:
                self._blob_client = None
                self._session_account = None

    def _client_for(self, account: StorageAccount) -> BlobServiceClient:
        if self._blob_client is None or self._session_account != account.name:
            raise RuntimeError(f"No open session for storage account {account.name}.")
        return self._blob_client

    def list_containers(self, account: StorageAccount) -> list[Container]:
        client = self._client_for(account)
        try:
            return [Container(name=item.name, account=account) for item in client.list_containers()]
        except AzureError as e:
            raise _enumeration_error(e, f"Listing containers of {account.name}") from e

    def list_blobs(self, container: Container):
        """Yields the blobs of a container page by page."""
        container_client = self._client_for(container.account).get_container_client(container.name)
        try:
            for blob in container_client.list_blobs():
                yield BlobRef(name=blob.name, last_modified=blob.last_modified)
        except AzureError as e:
            raise _enumeration_error(e, f"Listing blobs of {container.account.name}/{container.name}") from e


def _blob_endpoint(resource) -> str:
    """The account's primary blob endpoint, as reported by the resource provider."""
    endpoints = getattr(resource, "primary_endpoints", None)
    if endpoints is not None and endpoints.blob:
        return endpoints.blob
    logger.warning(f"No primary blob endpoint reported for {resource.name}; using the public cloud default.")
    return BLOB_ENDPOINT_TEMPLATE.format(account_name=resource.name)
