"""boto3 client construction for shell commands."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import boto3

logger = logging.getLogger(__name__)

# IAM is a global service
GLOBAL_SERVICE_REGIONS = {"iam": "us-east-1"}


class ClientFactory:
    """Create and cache one boto3 client per service.

    A profile of ``None`` lets boto3 use its default credential chain.
    """

    def __init__(
        self,
        profile: Optional[str] = None,
        region: Optional[str] = None,
        session_factory: Optional[Callable[..., Any]] = None,
        clients: Optional[Dict[str, Any]] = None,
    ):
        """Initialize factory.

        Args:
            profile: Named profile from the AWS config/credentials files
            region: Default region for regional services
            session_factory: Callable creating a boto3-like session
                (defaults to ``boto3.Session``)
            clients: Pre-built clients keyed by service name
        """
        self.profile = profile
        self.region = region
        self._session_factory = session_factory or boto3.Session
        self._session: Any = None
        self._clients: Dict[str, Any] = dict(clients or {})

    @property
    def session(self) -> Any:
        """Lazily created boto3 session."""
        if self._session is None:
            self._session = self._session_factory(profile_name=self.profile)
        return self._session

    def client(self, service: str) -> Any:
        """Get (or create) the client for ``service``.

        Args:
            service: boto3 service name, e.g. ``"s3"``

        Returns:
            Service client
        """
        if service not in self._clients:
            region = GLOBAL_SERVICE_REGIONS.get(service, self.region)
            logger.debug(f"Creating {service} client (profile={self.profile}, region={region})")
            self._clients[service] = self.session.client(service, region_name=region)
        return self._clients[service]
