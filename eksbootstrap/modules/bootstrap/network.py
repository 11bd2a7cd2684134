"""Instance network parameters: cluster DNS address and max pods."""

import logging
from pathlib import Path
from typing import Dict, Optional

from .models import (
    MaxPodsError,
    PRIMARY_DNS_CLUSTER_IP,
    SECONDARY_DNS_CLUSTER_IP,
    SECONDARY_DNS_IP_PREFIX,
)

logger = logging.getLogger("eksbootstrap.bootstrap.network")


def select_dns_cluster_ip(internal_ip: str) -> str:
    """Pick the cluster DNS service address for a node.

    Nodes whose IP starts with ``10.`` use 172.20.0.10, all others
    10.100.0.10. This is a string prefix test, not a subnet match.
    """
    if internal_ip.startswith(SECONDARY_DNS_IP_PREFIX):
        return SECONDARY_DNS_CLUSTER_IP
    return PRIMARY_DNS_CLUSTER_IP


def parse_max_pods_table(content: str) -> Dict[str, int]:
    """Parse ``<instance-type> <max-pods>`` lines.

    Blank lines and ``#`` comments are skipped, as are lines whose second
    column is not an integer.
    """
    table = {}
    for lineno, line in enumerate(content.splitlines(), 1):
        line = line.split('#', 1)[0].strip()
        if not line:
            continue
        fields = line.split()
        if len(fields) < 2:
            logger.debug(f"max-pods line {lineno} has no count, skipping")
            continue
        try:
            table[fields[0]] = int(fields[1])
        except ValueError:
            logger.debug(f"max-pods line {lineno} has a non-numeric count, skipping")
    return table


def load_max_pods_table(path: Path) -> Dict[str, int]:
    """Read the ENI max-pods table.

    Raises:
        MaxPodsError: If the file cannot be read
    """
    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise MaxPodsError(f"Failed to read max pods table {path}: {e}") from e
    return parse_max_pods_table(content)


def lookup_max_pods(table: Dict[str, int], instance_type: str) -> Optional[int]:
    """Return the max pods for an instance type, or None if it is not listed."""
    max_pods = table.get(instance_type)
    if max_pods is None:
        logger.info(f"Instance type {instance_type} not found in max pods table")
    return max_pods
