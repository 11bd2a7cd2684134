"""EC2 instance metadata client.

Reads the availability zone, private IP and instance type of the running
instance. An IMDSv2 session token is requested first; instances that only
serve IMDSv1 are read without one.
"""

import logging
from typing import Optional

import requests

from ...config import Config
from .models import MetadataError

logger = logging.getLogger("eksbootstrap.bootstrap.metadata")

TOKEN_HEADER = "X-aws-ec2-metadata-token"
TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"

# Status codes on the token endpoint that mean IMDSv2 is not available
IMDSV1_FALLBACK_CODES = (403, 404, 405)


class InstanceMetadataClient:
    """Minimal client for the instance metadata service."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        token_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.session = session or requests.Session()
        self.base_url = (base_url or Config.METADATA_URL).rstrip('/')
        self.token_url = token_url or Config.METADATA_TOKEN_URL
        self.timeout = timeout if timeout is not None else Config.METADATA_TIMEOUT
        self._token: Optional[str] = None
        self._token_checked = False

    def _get_token(self) -> Optional[str]:
        if self._token_checked:
            return self._token
        self._token_checked = True
        try:
            response = self.session.put(
                self.token_url,
                headers={TOKEN_TTL_HEADER: str(Config.METADATA_TOKEN_TTL)},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.debug(f"IMDSv2 token request failed, using IMDSv1: {e}")
            return None

        if response.status_code in IMDSV1_FALLBACK_CODES:
            logger.debug(f"IMDSv2 token endpoint returned {response.status_code}, using IMDSv1")
            return None
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise MetadataError(f"Failed to obtain metadata token: {e}") from e

        self._token = response.text.strip()
        return self._token

    def get(self, path: str) -> str:
        """Fetch a metadata value.

        Args:
            path: Path below ``/latest/meta-data/``, e.g. ``local-ipv4``

        Returns:
            str: The stripped value

        Raises:
            MetadataError: If the request fails or returns an empty value
        """
        headers = {}
        token = self._get_token()
        if token:
            headers[TOKEN_HEADER] = token

        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise MetadataError(f"Failed to read instance metadata {path}: {e}") from e

        value = response.text.strip()
        if not value:
            raise MetadataError(f"Instance metadata {path} is empty")
        logger.debug(f"metadata {path} = {value}")
        return value

    def availability_zone(self) -> str:
        return self.get("placement/availability-zone")

    def local_ipv4(self) -> str:
        return self.get("local-ipv4")

    def instance_type(self) -> str:
        return self.get("instance-type")


def region_from_zone(zone: str) -> str:
    """Strip the trailing zone letter from an availability zone name."""
    zone = zone.strip()
    if len(zone) < 2:
        raise MetadataError(f"Invalid availability zone: '{zone}'")
    return zone[:-1]
