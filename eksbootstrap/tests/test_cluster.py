import boto3
import pytest
from botocore.stub import Stubber

from eksbootstrap.modules.bootstrap.cluster import EKSClusterClient
from eksbootstrap.modules.bootstrap.models import ClusterDiscoveryError

from conftest import CA_B64, ENDPOINT


@pytest.fixture
def eks():
    client = boto3.client(
        "eks",
        region_name="us-west-2",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


def test_describe(eks):
    client, stubber = eks
    stubber.add_response(
        "describe_cluster",
        {"cluster": {"name": "prod", "endpoint": ENDPOINT, "certificateAuthority": {"data": CA_B64}}},
        {"name": "prod"},
    )

    connection = EKSClusterClient("us-west-2", client=client).describe("prod")

    assert connection.b64_ca == CA_B64
    assert connection.endpoint == ENDPOINT


def test_describe_cluster_not_found(eks):
    client, stubber = eks
    stubber.add_client_error(
        "describe_cluster",
        service_error_code="ResourceNotFoundException",
        service_message="No cluster found for name: prod.",
        http_status_code=404,
        expected_params={"name": "prod"},
    )

    with pytest.raises(ClusterDiscoveryError, match="No cluster found"):
        EKSClusterClient("us-west-2", client=client).describe("prod")


def test_describe_cluster_still_creating(eks):
    client, stubber = eks
    stubber.add_response(
        "describe_cluster",
        {"cluster": {"name": "prod", "status": "CREATING"}},
        {"name": "prod"},
    )

    with pytest.raises(ClusterDiscoveryError, match="certificate authority"):
        EKSClusterClient("us-west-2", client=client).describe("prod")
