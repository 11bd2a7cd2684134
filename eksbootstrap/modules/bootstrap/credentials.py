"""Kubelet credential materialization: cluster CA and kubeconfig."""

import base64
import binascii
import logging
from pathlib import Path
from typing import List

import yaml

from ...config import BootstrapPaths
from .configuration import render_template
from .filesystem import NodeFilesystem
from .models import ClusterConnection, CredentialError

logger = logging.getLogger("eksbootstrap.bootstrap.credentials")

AUTHENTICATOR_PATH = '/usr/bin/aws-iam-authenticator'


def decode_ca(b64_ca: str) -> bytes:
    """Decode base64 CA data, ignoring embedded whitespace.

    Raises:
        CredentialError: If the data is not valid base64
    """
    compact = ''.join(b64_ca.split())
    if not compact:
        raise CredentialError("Cluster CA data is empty")
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CredentialError(f"Cluster CA is not valid base64: {e}") from e


def render_kubeconfig(cluster_name: str, endpoint: str, ca_path: Path) -> str:
    """Render the kubelet kubeconfig and check that it parses as YAML."""
    content = render_template(
        'kubeconfig.yaml.j2',
        cluster_name=cluster_name,
        endpoint=endpoint,
        ca_path=str(ca_path),
        authenticator=AUTHENTICATOR_PATH,
    )
    try:
        yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise CredentialError(f"Rendered kubeconfig is not valid YAML: {e}") from e
    return content


def write_credentials(
    fs: NodeFilesystem,
    paths: BootstrapPaths,
    cluster_name: str,
    connection: ClusterConnection,
) -> List[Path]:
    """Write the cluster CA certificate and the kubelet kubeconfig.

    The kubeconfig references the CA by its node path, not by the staged
    location, so a bootstrap staged with a root prefix stays valid once
    the root becomes ``/``.

    Args:
        fs: Filesystem writer
        paths: Configured file locations
        cluster_name: Cluster name placed in the authenticator arguments
        connection: CA data and API server endpoint

    Returns:
        list: Paths of the CA certificate and the kubeconfig

    Raises:
        CredentialError: If the CA cannot be decoded
        FileWriteError: If either file cannot be written
    """
    ca = decode_ca(connection.b64_ca)
    ca_file = fs.write_bytes(paths.ca_cert, ca, mode=0o644)
    logger.info(f"Wrote cluster CA to {ca_file}")

    kubeconfig = render_kubeconfig(cluster_name, connection.endpoint, paths.ca_cert)
    kubeconfig_file = fs.write_text(paths.kubeconfig, kubeconfig, mode=0o600)
    logger.info(f"Wrote kubelet kubeconfig to {kubeconfig_file} (server {connection.endpoint})")

    return [ca_file, kubeconfig_file]
