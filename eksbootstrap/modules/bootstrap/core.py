"""Core node bootstrap logic.

This module contains the NodeBootstrapper class which joins the running
instance to an EKS cluster. Each step is a method; ``run()`` executes them
in order and the first exception aborts the run. Files written by earlier
steps are left in place.
"""

import logging
from typing import Callable, Optional

from ...config import BootstrapPaths, Config
from .cluster import EKSClusterClient
from .configuration import build_kubelet_flags, write_kubelet_dropins, write_proxy_config
from .credentials import write_credentials
from .filesystem import NodeFilesystem
from .metadata import InstanceMetadataClient, region_from_zone
from .models import BootstrapConfig, BootstrapResult, ClusterConnection, NodeNetwork
from .network import load_max_pods_table, lookup_max_pods, select_dns_cluster_ip
from .service import SystemdManager, activate_kubelet

logger = logging.getLogger("eksbootstrap.bootstrap.core")

ClusterClientFactory = Callable[[str], EKSClusterClient]


class NodeBootstrapper:
    """Bootstraps the local instance into an EKS cluster.

    Collaborators are injected so each can be replaced independently:

    - metadata: instance metadata client
    - cluster_factory: builds the EKS client for a region, only called when
      the CA and endpoint have to be discovered
    - filesystem: writer for every file produced
    - services: systemd manager
    """

    def __init__(
        self,
        config: BootstrapConfig,
        metadata: Optional[InstanceMetadataClient] = None,
        cluster_factory: Optional[ClusterClientFactory] = None,
        filesystem: Optional[NodeFilesystem] = None,
        services: Optional[SystemdManager] = None,
        paths: Optional[BootstrapPaths] = None,
    ):
        self.config = config
        self.metadata = metadata or InstanceMetadataClient()
        self.cluster_factory = cluster_factory or EKSClusterClient
        self.fs = filesystem or NodeFilesystem()
        self.services = services or SystemdManager()
        self.paths = paths or Config.paths()

    def resolve_region(self) -> str:
        zone = self.metadata.availability_zone()
        region = region_from_zone(zone)
        logger.info(f"Instance is in {zone} ({region})")
        return region

    def resolve_connection(self, region: str) -> ClusterConnection:
        """Use the supplied CA/endpoint pair or ask the control plane for it."""
        if self.config.has_connection:
            logger.info("Using supplied cluster CA and API server endpoint")
            return ClusterConnection(
                b64_ca=self.config.b64_cluster_ca,
                endpoint=self.config.apiserver_endpoint,
            )
        client = self.cluster_factory(region)
        connection = client.describe(self.config.cluster_name)
        logger.info(f"Discovered API server endpoint {connection.endpoint}")
        return connection

    def resolve_network(self) -> NodeNetwork:
        internal_ip = self.metadata.local_ipv4()
        instance_type = self.metadata.instance_type()
        dns_cluster_ip = select_dns_cluster_ip(internal_ip)

        max_pods = None
        if self.config.use_max_pods:
            table = load_max_pods_table(self.paths.max_pods_file)
            max_pods = lookup_max_pods(table, instance_type)

        network = NodeNetwork(
            internal_ip=internal_ip,
            instance_type=instance_type,
            dns_cluster_ip=dns_cluster_ip,
            max_pods=max_pods,
        )
        logger.info(
            f"Node {internal_ip} ({instance_type}): cluster DNS {dns_cluster_ip}, "
            f"max pods {max_pods if max_pods is not None else 'unset'}"
        )
        return network

    def run(self) -> BootstrapResult:
        """Run every bootstrap step.

        Returns:
            BootstrapResult: Resolved values and the files written

        Raises:
            BootstrapError: From the first step that fails
        """
        logger.info(f"🚀 Bootstrapping node into EKS cluster {self.config.cluster_name}")

        region = self.resolve_region()
        connection = self.resolve_connection(region)

        credential_files = write_credentials(
            self.fs, self.paths, self.config.cluster_name, connection
        )

        network = self.resolve_network()
        result = BootstrapResult(
            cluster_name=self.config.cluster_name,
            region=region,
            connection=connection,
            network=network,
            discovered=not self.config.has_connection,
        )
        for path in credential_files:
            result.add_file(path)

        flags = build_kubelet_flags(network, region)
        for path in write_kubelet_dropins(
            self.fs, self.paths, flags, self.config.kubelet_extra_args
        ):
            result.add_file(path)
        for path in write_proxy_config(self.fs, self.paths, self.config):
            result.add_file(path)

        activate_kubelet(self.services)
        logger.info(f"✅ Node bootstrapped into {self.config.cluster_name}")
        return result
