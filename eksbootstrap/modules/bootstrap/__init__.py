"""EKS node bootstrap.

This package joins the running EC2 instance to an EKS cluster. It's
organized into several focused modules:

- parameters: Invocation parameter validation
- metadata: Instance metadata service client
- cluster: EKS control plane client
- credentials: Cluster CA and kubelet kubeconfig
- network: Cluster DNS address and max pods lookup
- configuration: Kubelet drop-ins and proxy environment
- service: systemd management
- filesystem: Atomic, root-aware file writes
- core: Step sequencing
- models: Data models and errors
"""

from .core import NodeBootstrapper
from .cluster import EKSClusterClient
from .metadata import InstanceMetadataClient
from .filesystem import NodeFilesystem
from .service import SystemdManager
from .parameters import resolve_parameters
from .models import (
    BootstrapConfig,
    BootstrapResult,
    ClusterConnection,
    NodeNetwork,
    KubeletFlags,
    BootstrapError,
    UsageError,
    MetadataError,
    ClusterDiscoveryError,
    CredentialError,
    ConfigurationError,
    MaxPodsError,
    FileWriteError,
    ServiceError,
)

__all__ = [
    'NodeBootstrapper',
    'EKSClusterClient',
    'InstanceMetadataClient',
    'NodeFilesystem',
    'SystemdManager',
    'resolve_parameters',
    'BootstrapConfig',
    'BootstrapResult',
    'ClusterConnection',
    'NodeNetwork',
    'KubeletFlags',
    'BootstrapError',
    'UsageError',
    'MetadataError',
    'ClusterDiscoveryError',
    'CredentialError',
    'ConfigurationError',
    'MaxPodsError',
    'FileWriteError',
    'ServiceError',
]
