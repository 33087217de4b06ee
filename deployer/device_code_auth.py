"""
Entra ID Device Code Client - Token acquisition for the Dataverse Web API.
Uses the OAuth 2.0 device authorization grant: the user signs in on another
device with the displayed code while this process polls the token endpoint.
"""

import time
import requests
from typing import Optional

from .exceptions import AuthenticationError

DEVICE_CODE_GRANT = "urn:ietf:params:oauth:grant-type:device_code"


class DeviceCodeAuthClient:
    """Acquires bearer tokens for a Dataverse environment via device-code sign-in."""

    AUTHORITY = "https://login.microsoftonline.com"

    def __init__(
        self,
        environment_url: str,
        client_id: str,
        tenant: str = "organizations",
        debug: bool = False,
    ):
        self.environment_url = environment_url.rstrip("/")
        self.client_id = client_id
        self.tenant = tenant
        self.debug = debug
        self._token = None
        self._expires_at = 0

    @property
    def scope(self) -> str:
        return f"{self.environment_url}/.default"

    def get_token(self) -> str:
        """Return a cached token, or run the device-code flow for a new one."""
        if self._token and time.time() < self._expires_at - 60:
            return self._token

        try:
            flow = self._start_flow()
            data = self._poll_for_token(flow)
        except requests.RequestException as e:
            raise AuthenticationError(f"Device code sign-in failed: {e}") from e

        self._token = data["access_token"]
        self._expires_at = time.time() + int(data.get("expires_in", 3600))

        if self.debug:
            print(f"  Token acquired, expires in {data.get('expires_in', 3600)}s")

        return self._token

    def _start_flow(self) -> dict:
        url = f"{self.AUTHORITY}/{self.tenant}/oauth2/v2.0/devicecode"

        if self.debug:
            print(f"  Requesting device code (scope: {self.scope})")

        response = requests.post(url, data={"client_id": self.client_id, "scope": self.scope})
        response.raise_for_status()
        flow = response.json()

        if "device_code" not in flow:
            raise AuthenticationError(
                f"Device code request rejected: {flow.get('error_description', flow)}"
            )

        # Entra ID returns a ready-made instruction line with the URL and code
        message = flow.get("message") or (
            f"To sign in, open {flow.get('verification_uri')} and enter the code {flow.get('user_code')}"
        )
        print(f"  {message}")
        return flow

    def _poll_for_token(self, flow: dict) -> dict:
        """Poll until the user completes sign-in or the code expires.

        authorization_pending keeps polling, slow_down adds 5 seconds to the
        interval, every other error is terminal.
        """
        url = f"{self.AUTHORITY}/{self.tenant}/oauth2/v2.0/token"
        interval = int(flow.get("interval", 5))
        deadline = time.time() + int(flow.get("expires_in", 900))
        payload = {
            "grant_type": DEVICE_CODE_GRANT,
            "client_id": self.client_id,
            "device_code": flow["device_code"],
        }

        while time.time() < deadline:
            time.sleep(interval)

            # Pending sign-in comes back as HTTP 400, so read the body instead of raise_for_status
            data = requests.post(url, data=payload).json()
            if "access_token" in data:
                return data

            error = data.get("error", "unknown_error")
            if error == "authorization_pending":
                continue
            if error == "slow_down":
                interval += 5
                continue

            raise AuthenticationError(
                f"Device code sign-in failed: {error}: {data.get('error_description', '')}".rstrip(": ")
            )

        raise AuthenticationError("Device code expired before sign-in completed")

    @property
    def token(self) -> Optional[str]:
        return self._token
