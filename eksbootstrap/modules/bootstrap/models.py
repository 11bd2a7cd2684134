"""Data models for the EKS node bootstrap."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

PRIMARY_DNS_CLUSTER_IP = '10.100.0.10'
SECONDARY_DNS_CLUSTER_IP = '172.20.0.10'
SECONDARY_DNS_IP_PREFIX = '10.'

# Characters a single-quoted systemd Environment= value cannot hold
UNIT_UNSAFE_CHARS = ("'", '\n', '\r')


class BootstrapError(Exception):
    """Base class for every error that aborts a bootstrap run."""
    pass


class UsageError(BootstrapError):
    """Raised when invocation parameters are missing or inconsistent."""
    pass


class MetadataError(BootstrapError):
    """Raised when the instance metadata service cannot be read."""
    pass


class ClusterDiscoveryError(BootstrapError):
    """Raised when the EKS control plane cannot describe the cluster."""
    pass


class CredentialError(BootstrapError):
    """Raised when the cluster CA or kubeconfig cannot be produced."""
    pass


class ConfigurationError(BootstrapError):
    """Raised when there is an error rendering a configuration template."""
    pass


class MaxPodsError(BootstrapError):
    """Raised when the max-pods table cannot be read."""
    pass


class FileWriteError(BootstrapError):
    """Raised when a configuration file cannot be written."""
    pass


class ServiceError(BootstrapError):
    """Raised when a service manager command fails."""
    pass


@dataclass(frozen=True)
class BootstrapConfig:
    """Invocation parameters for a bootstrap run."""
    cluster_name: str
    use_max_pods: bool = True
    b64_cluster_ca: Optional[str] = None
    apiserver_endpoint: Optional[str] = None
    kubelet_extra_args: str = ''
    http_proxy: str = ''
    https_proxy: str = ''
    no_proxy: str = ''

    @property
    def has_connection(self) -> bool:
        """True when both the CA and the endpoint were supplied."""
        return bool(self.b64_cluster_ca and self.apiserver_endpoint)


@dataclass(frozen=True)
class ClusterConnection:
    """How the kubelet reaches the cluster API server."""
    b64_ca: str
    endpoint: str


@dataclass(frozen=True)
class NodeNetwork:
    """Per-instance networking parameters."""
    internal_ip: str
    instance_type: str
    dns_cluster_ip: str
    max_pods: Optional[int] = None


@dataclass(frozen=True)
class KubeletFlags:
    """Flags passed to the kubelet through systemd drop-ins."""
    node_ip: str
    cluster_dns: str
    pod_infra_container_image: str
    max_pods: Optional[int] = None

    @property
    def args(self) -> str:
        return (
            f"--node-ip={self.node_ip} "
            f"--cluster-dns={self.cluster_dns} "
            f"--pod-infra-container-image={self.pod_infra_container_image}"
        )

    @property
    def max_pods_arg(self) -> Optional[str]:
        if self.max_pods is None:
            return None
        return f"--max-pods={self.max_pods}"


@dataclass
class BootstrapResult:
    """Outcome of a completed bootstrap run."""
    cluster_name: str
    region: str
    connection: ClusterConnection
    network: NodeNetwork
    discovered: bool = False
    written_files: List[Path] = field(default_factory=list)

    def add_file(self, path: Path) -> None:
        """Record a file written during the run."""
        if path not in self.written_files:
            self.written_files.append(path)
