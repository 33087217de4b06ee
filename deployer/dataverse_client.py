"""
Dataverse Web API Client - Handles all REST endpoint interactions.

Bearer tokens come from DeviceCodeAuthClient; every call goes through one
requests.Session with the Authorization and OData headers set.

Endpoint reference (relative to <environment>/api/data/<version>):
- GET   webresourceset?$filter=name eq '<name>'&$select=webresourceid
- POST  webresourceset
- PATCH webresourceset(<id>)
- GET   EntityDefinitions(LogicalName='<name>')
- PUT   EntityDefinitions(LogicalName='<name>')   (MSCRM.MergeLabels: true)
- POST  PublishAllXml

Methods raise requests.HTTPError on non-2xx responses; callers decide whether
a failure is fatal.
"""

import requests
from typing import Dict, Any, Optional

from .device_code_auth import DeviceCodeAuthClient

ODATA_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json; charset=utf-8",
    "OData-MaxVersion": "4.0",
    "OData-Version": "4.0",
}


def odata_quote(value: str) -> str:
    """Quote a string literal for an OData $filter (single quotes are doubled)."""
    return "'" + value.replace("'", "''") + "'"


class DataverseClient:
    """Client for the Dataverse Web API using device-code bearer tokens."""

    def __init__(
        self,
        environment_url: str,
        auth_client: DeviceCodeAuthClient,
        api_version: str = "v9.2",
        collection: str = "webresourceset",
        debug: bool = False,
    ):
        self.environment_url = environment_url.rstrip("/")
        self.api_url = f"{self.environment_url}/api/data/{api_version}"
        self.collection = collection
        self._auth = auth_client
        self.debug = debug
        self._token = None
        self._session = requests.Session()
        self._session.headers.update(ODATA_HEADERS)

    def authenticate(self) -> str:
        """Acquire a token and set the Bearer header on the session.

        Raises:
            AuthenticationError: Sign-in failed or was declined.
        """
        self._token = self._auth.get_token()
        self._session.headers.update({"Authorization": f"Bearer {self._token}"})

        if self.debug:
            print(f"  Dataverse session authenticated for {self.environment_url}")

        return self._token

    def find_web_resource_id(self, name: str) -> Optional[str]:
        """Look up a web resource by exact name.

        GET webresourceset?$filter=name eq '<name>'&$select=webresourceid
        Returns the webresourceid, or None when no resource has that name.
        """
        self._ensure_auth()
        url = f"{self.api_url}/{self.collection}"
        params = {
            "$filter": f"name eq {odata_quote(name)}",
            "$select": "webresourceid",
        }

        response = self._session.get(url, params=params)
        response.raise_for_status()

        matches = response.json().get("value", [])
        if not matches:
            return None
        return matches[0]["webresourceid"]

    def create_web_resource(self, descriptor: Dict[str, Any]) -> Optional[str]:
        """Create a web resource.

        POST webresourceset
        Returns the new id parsed from the OData-EntityId header, if present.
        """
        self._ensure_auth()
        url = f"{self.api_url}/{self.collection}"

        if self.debug:
            print(f"  POST {self.collection} ({descriptor.get('name')})")

        response = self._session.post(url, json=descriptor)
        response.raise_for_status()

        # OData-EntityId: https://org.crm.dynamics.com/api/data/v9.2/webresourceset(<guid>)
        entity_id = response.headers.get("OData-EntityId", "")
        if "(" in entity_id:
            return entity_id.rsplit("(", 1)[1].rstrip(")")
        return None

    def update_web_resource(self, web_resource_id: str, descriptor: Dict[str, Any]) -> None:
        """PATCH webresourceset(<id>) with the desired state."""
        self._ensure_auth()
        url = f"{self.api_url}/{self.collection}({web_resource_id})"

        if self.debug:
            print(f"  PATCH {self.collection}({web_resource_id}) ({descriptor.get('name')})")

        response = self._session.patch(url, json=descriptor)
        response.raise_for_status()

    def get_entity_definition(self, logical_name: str) -> Dict[str, Any]:
        """GET EntityDefinitions(LogicalName='<name>')."""
        self._ensure_auth()
        url = f"{self.api_url}/EntityDefinitions(LogicalName={odata_quote(logical_name)})"

        response = self._session.get(url)
        response.raise_for_status()
        return response.json()

    def update_entity_definition(self, logical_name: str, metadata: Dict[str, Any]) -> None:
        """Replace entity metadata.

        PUT EntityDefinitions(LogicalName='<name>')
        MSCRM.MergeLabels keeps label translations that are not in the body;
        without it the PUT wipes every other language.
        """
        self._ensure_auth()
        url = f"{self.api_url}/EntityDefinitions(LogicalName={odata_quote(logical_name)})"

        if self.debug:
            print(f"  PUT EntityDefinitions({logical_name})")

        response = self._session.put(url, json=metadata, headers={"MSCRM.MergeLabels": "true"})
        response.raise_for_status()

    def publish_all(self) -> None:
        """POST PublishAllXml."""
        self._ensure_auth()
        url = f"{self.api_url}/PublishAllXml"

        if self.debug:
            print("  POST PublishAllXml")

        response = self._session.post(url)
        response.raise_for_status()

    def _ensure_auth(self):
        """Authenticate lazily on the first API call."""
        if not self._token:
            self.authenticate()

    @property
    def token(self) -> Optional[str]:
        return self._token
