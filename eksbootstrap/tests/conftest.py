import base64
import dataclasses

import pytest

from eksbootstrap.config import Config
from eksbootstrap.modules.bootstrap.filesystem import NodeFilesystem
from eksbootstrap.modules.bootstrap.models import ClusterConnection, MetadataError

CA_PEM = "-----BEGIN CERTIFICATE-----\nMIIC5zCCAc+gAwIBAgIBADANBgkq\n-----END CERTIFICATE-----\n"
CA_B64 = base64.b64encode(CA_PEM.encode()).decode()
ENDPOINT = "https://ABCDEF0123456789.gr7.us-west-2.eks.amazonaws.com"

MAX_PODS_TABLE = """\
# Mapping is calculated from AWS ENI documentation
#
c5.large 29
m5.large 29
m5.xlarge 58
t3.micro 4
"""


class FakeMetadata:
    def __init__(self, zone="us-west-2a", ip="192.168.12.34", instance_type="m5.large", fail=None):
        self.values = {
            "placement/availability-zone": zone,
            "local-ipv4": ip,
            "instance-type": instance_type,
        }
        self.fail = fail
        self.calls = []

    def get(self, path):
        self.calls.append(path)
        if path == self.fail:
            raise MetadataError(f"Failed to read instance metadata {path}")
        return self.values[path]

    def availability_zone(self):
        return self.get("placement/availability-zone")

    def local_ipv4(self):
        return self.get("local-ipv4")

    def instance_type(self):
        return self.get("instance-type")


class FakeClusterClient:
    def __init__(self, region, connection):
        self.region = region
        self.connection = connection
        self.described = []

    def describe(self, cluster_name):
        self.described.append(cluster_name)
        return self.connection


class FakeClusterFactory:
    def __init__(self, connection=None):
        self.connection = connection or ClusterConnection(b64_ca=CA_B64, endpoint=ENDPOINT)
        self.clients = []

    def __call__(self, region):
        client = FakeClusterClient(region, self.connection)
        self.clients.append(client)
        return client

    @property
    def describe_calls(self):
        return [name for client in self.clients for name in client.described]


class FakeServices:
    def __init__(self, fail_on=None, error=None):
        self.calls = []
        self.fail_on = fail_on
        self.error = error

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_on == call[0]:
            raise self.error

    def daemon_reload(self):
        self._record("daemon-reload")

    def enable(self, unit):
        self._record("enable", unit)

    def start(self, unit):
        self._record("start", unit)


@pytest.fixture
def node_root(tmp_path):
    return tmp_path / "root"


@pytest.fixture
def fs(node_root):
    return NodeFilesystem(node_root)


@pytest.fixture
def paths(tmp_path):
    # the table is read from the node, outside any staging root
    return dataclasses.replace(Config.paths(), max_pods_file=tmp_path / "eks" / "eni-max-pods.txt")


@pytest.fixture
def max_pods_file(paths):
    target = paths.max_pods_file
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(MAX_PODS_TABLE)
    return target
