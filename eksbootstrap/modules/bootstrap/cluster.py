"""EKS control plane access."""

import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .models import ClusterConnection, ClusterDiscoveryError

logger = logging.getLogger("eksbootstrap.bootstrap.cluster")


class EKSClusterClient:
    """Looks up cluster connection details through ``eks:DescribeCluster``."""

    def __init__(self, region: str, client: Optional[Any] = None):
        self.region = region
        self.client = client or boto3.client('eks', region_name=region)

    def describe(self, cluster_name: str) -> ClusterConnection:
        """Return the CA data and API server endpoint of a cluster.

        Args:
            cluster_name: Name of the EKS cluster

        Returns:
            ClusterConnection: Base64 CA data and endpoint URL

        Raises:
            ClusterDiscoveryError: If the call fails or the cluster has no
                CA data or endpoint yet
        """
        logger.info(f"Describing EKS cluster {cluster_name} in {self.region}")
        try:
            response = self.client.describe_cluster(name=cluster_name)
        except (ClientError, BotoCoreError) as e:
            raise ClusterDiscoveryError(
                f"Failed to describe cluster {cluster_name} in {self.region}: {e}"
            ) from e

        cluster = response.get('cluster', {})
        ca_data = cluster.get('certificateAuthority', {}).get('data')
        endpoint = cluster.get('endpoint')
        if not ca_data or not endpoint:
            raise ClusterDiscoveryError(
                f"Cluster {cluster_name} did not report "
                f"{'certificate authority data' if not ca_data else 'an endpoint'}"
            )

        return ClusterConnection(b64_ca=ca_data, endpoint=endpoint)
