"""Azure authentication — auth descriptor parsing and SDK client factory."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Union

from azure.identity import ClientSecretCredential
from azure.mgmt.netapp import NetAppManagementClient
from azure.mgmt.resource import ResourceManagementClient
from pydantic import BaseModel, Field, ValidationError

from ..exceptions import ConfigError

AUTH_LOCATION_ENV = "AZURE_AUTH_LOCATION"

_UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")


class AzureAuthInfo(BaseModel):
    """Contents of an ``az ad sp create-for-rbac --sdk-auth`` file."""

    client_id: str = Field(..., alias="clientId", min_length=1)
    client_secret: str = Field(..., alias="clientSecret", min_length=1)
    subscription_id: str = Field(..., alias="subscriptionId", min_length=1)
    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    active_directory_endpoint_url: str = Field(
        "https://login.microsoftonline.com", alias="activeDirectoryEndpointUrl"
    )
    resource_manager_endpoint_url: str = Field(
        "https://management.azure.com/", alias="resourceManagerEndpointUrl"
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def authority(self) -> str:
        """Authority host without scheme, as azure-identity expects it."""
        url = self.active_directory_endpoint_url
        return url.split("://", 1)[-1].rstrip("/")

    @property
    def management_url(self) -> str:
        return self.resource_manager_endpoint_url.rstrip("/")


def _decode(raw: bytes) -> str:
    # The file written by PowerShell redirection is UTF-16 with a BOM
    if raw[:2] in _UTF16_BOMS:
        return raw.decode("utf-16")
    return raw.decode("utf-8-sig")


def read_auth_file(path: Optional[Union[str, Path]] = None) -> AzureAuthInfo:
    """Load the auth descriptor from *path* or ``$AZURE_AUTH_LOCATION``."""
    location = path or os.environ.get(AUTH_LOCATION_ENV, "")
    if not location:
        raise ConfigError(f"{AUTH_LOCATION_ENV} is not set", step="read-auth")

    p = Path(location).expanduser()
    if not p.is_file():
        raise ConfigError(f"auth file not found: {p}", step="read-auth")

    try:
        data = json.loads(_decode(p.read_bytes()))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"could not read auth file {p}: {exc}", step="read-auth") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"auth file {p} does not contain a JSON object", step="read-auth")

    try:
        return AzureAuthInfo.model_validate(data)
    except ValidationError as exc:
        missing = ", ".join(str(e["loc"][0]) for e in exc.errors())
        raise ConfigError(f"auth file {p} is missing or has invalid fields: {missing}", step="read-auth") from exc


# ---------------------------------------------------------------------------
# SDK client factory
# ---------------------------------------------------------------------------


class AzureClients:
    """Lazily-initialised container for the Azure management clients."""

    def __init__(self, auth: AzureAuthInfo):
        self.auth = auth
        self._credential: Optional[ClientSecretCredential] = None
        self._netapp: Optional[NetAppManagementClient] = None
        self._resources: Optional[ResourceManagementClient] = None

    @property
    def subscription_id(self) -> str:
        return self.auth.subscription_id

    @property
    def credential(self) -> ClientSecretCredential:
        if self._credential is None:
            self._credential = ClientSecretCredential(
                tenant_id=self.auth.tenant_id,
                client_id=self.auth.client_id,
                client_secret=self.auth.client_secret,
                authority=self.auth.authority,
            )
        return self._credential

    @property
    def netapp(self) -> NetAppManagementClient:
        if self._netapp is None:
            self._netapp = NetAppManagementClient(
                self.credential,
                self.subscription_id,
                base_url=self.auth.management_url,
                credential_scopes=[f"{self.auth.management_url}/.default"],
            )
        return self._netapp

    @property
    def resources(self) -> ResourceManagementClient:
        if self._resources is None:
            self._resources = ResourceManagementClient(
                self.credential,
                self.subscription_id,
                base_url=self.auth.management_url,
                credential_scopes=[f"{self.auth.management_url}/.default"],
            )
        return self._resources
