"""Invocation parameter resolution.

Turns raw CLI values into a :class:`BootstrapConfig`. Everything here runs
before any metadata, AWS or filesystem call is made.
"""

import logging
from typing import Optional

from .models import UNIT_UNSAFE_CHARS, BootstrapConfig, UsageError

logger = logging.getLogger("eksbootstrap.bootstrap.parameters")

TRUE_VALUES = ('true',)
FALSE_VALUES = ('false',)


def parse_bool(value: str, option: str) -> bool:
    """Parse a ``true``/``false`` option value.

    Args:
        value: Raw option value
        option: Option name used in the error message

    Returns:
        bool: The parsed value

    Raises:
        UsageError: If the value is neither true nor false
    """
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise UsageError(f"{option} must be 'true' or 'false', got '{value}'")


def _check_unit_value(value: Optional[str], option: str) -> None:
    if value and any(c in value for c in UNIT_UNSAFE_CHARS):
        raise UsageError(f"{option} must not contain single quotes or newlines")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_parameters(
    cluster_name: Optional[str],
    use_max_pods: str = 'true',
    b64_cluster_ca: Optional[str] = None,
    apiserver_endpoint: Optional[str] = None,
    kubelet_extra_args: Optional[str] = None,
    http_proxy: Optional[str] = None,
    https_proxy: Optional[str] = None,
    no_proxy: Optional[str] = None,
) -> BootstrapConfig:
    """Validate raw invocation values and build the bootstrap configuration.

    Args:
        cluster_name: Name of the EKS cluster to join
        use_max_pods: ``true`` to set ``--max-pods`` from the ENI table
        b64_cluster_ca: Base64 encoded cluster CA, paired with the endpoint
        apiserver_endpoint: API server URL, paired with the CA
        kubelet_extra_args: Extra kubelet arguments, passed through as-is
        http_proxy: HTTP_PROXY value for the kubelet and container runtime
        https_proxy: HTTPS_PROXY value for the kubelet and container runtime
        no_proxy: NO_PROXY value for the kubelet and container runtime

    Returns:
        BootstrapConfig: Immutable configuration for the run

    Raises:
        UsageError: If the cluster name is missing, the max-pods flag is not
            a boolean, only one of the CA/endpoint pair was supplied, or a value
            bound for a systemd drop-in holds a quote or newline
    """
    cluster_name = _blank_to_none(cluster_name)
    if not cluster_name:
        raise UsageError("CLUSTER_NAME is not defined")

    ca = _blank_to_none(b64_cluster_ca)
    endpoint = _blank_to_none(apiserver_endpoint)
    if bool(ca) != bool(endpoint):
        missing = '--apiserver-endpoint' if ca else '--b64-cluster-ca'
        raise UsageError(
            "--b64-cluster-ca and --apiserver-endpoint must be supplied together "
            f"(missing {missing})"
        )

    for value, option in (
        (kubelet_extra_args, '--kubelet-extra-args'),
        (http_proxy, '--http-proxy'),
        (https_proxy, '--https-proxy'),
        (no_proxy, '--no-proxy'),
    ):
        _check_unit_value(value, option)

    config = BootstrapConfig(
        cluster_name=cluster_name,
        use_max_pods=parse_bool(use_max_pods, '--use-max-pods'),
        b64_cluster_ca=ca,
        apiserver_endpoint=endpoint,
        kubelet_extra_args=kubelet_extra_args or '',
        http_proxy=http_proxy or '',
        https_proxy=https_proxy or '',
        no_proxy=no_proxy or '',
    )
    logger.debug(
        "Resolved parameters for cluster %s (use_max_pods=%s, connection supplied=%s)",
        config.cluster_name, config.use_max_pods, config.has_connection
    )
    return config
