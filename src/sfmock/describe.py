from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .env_loader import load_env_files
from .exceptions import MissingCredentialsError

_logger = logging.getLogger(__name__)


@dataclass
class SFConfig:
    """Credentials for the live org the schema is dumped from."""

    login_url: str = "https://login.salesforce.com"
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    # A pre-issued token skips the OAuth round trip
    access_token: Optional[str] = None
    instance_url: Optional[str] = None

    api_version: str = "v60.0"
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> SFConfig:
        load_env_files(quiet=True)
        return cls(
            login_url=os.getenv("SF_LOGIN_URL", "https://login.salesforce.com"),
            client_id=os.getenv("SF_CLIENT_ID"),
            client_secret=os.getenv("SF_CLIENT_SECRET"),
            access_token=os.getenv("SF_ACCESS_TOKEN"),
            instance_url=os.getenv("SF_INSTANCE_URL"),
            api_version=os.getenv("SF_API_VERSION", "v60.0"),
        )


class DescribeClient:
    """Just enough of the Salesforce REST API to read object metadata."""

    def __init__(self, cfg: Optional[SFConfig] = None) -> None:
        self.cfg = cfg or SFConfig.from_env()
        self.session = requests.Session()
        self.instance_url: Optional[str] = None

    def connect(self) -> None:
        if self.cfg.access_token and self.cfg.instance_url:
            _logger.debug("Using existing access token from configuration.")
            token = self.cfg.access_token
            self.instance_url = self.cfg.instance_url.rstrip("/")
        else:
            token, self.instance_url = self._client_credentials_login()

        self.session.headers.update({"Authorization": f"Bearer {token}"})
        _logger.info("Connected to %s (api %s)", self.instance_url, self.cfg.api_version)

    def _client_credentials_login(self) -> tuple[str, str]:
        missing = [
            name
            for name, value in (
                ("SF_CLIENT_ID", self.cfg.client_id),
                ("SF_CLIENT_SECRET", self.cfg.client_secret),
            )
            if not value
        ]
        if missing:
            raise MissingCredentialsError(missing)

        token_url = f"{self.cfg.login_url.rstrip('/')}/services/oauth2/token"
        _logger.debug("Requesting access token from %s", token_url)
        r = self.session.post(
            token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self.cfg.client_id,
                "client_secret": self.cfg.client_secret,
            },
            timeout=self.cfg.timeout,
        )
        r.raise_for_status()
        payload = r.json()
        return payload["access_token"], payload["instance_url"].rstrip("/")

    def describe_object(self, name: str) -> Dict[str, Any]:
        """Return /sobjects/{name}/describe."""
        if not self.instance_url:
            raise RuntimeError("Not connected; call connect() first.")
        url = f"{self.instance_url}/services/data/{self.cfg.api_version}/sobjects/{name}/describe"
        r = self.session.get(url, timeout=self.cfg.timeout)
        if r.status_code >= 400:
            _logger.error("HTTP %s describing %s: %s", r.status_code, name, r.text)
        r.raise_for_status()
        return r.json()
