"""Configuration management for the eksbootstrap application."""
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

_PREFIX = "EKS_BOOTSTRAP_"


def _env(name: str, default: str) -> str:
    return os.getenv(_PREFIX + name, default)


@dataclass(frozen=True)
class BootstrapPaths:
    """Filesystem locations written or read during a bootstrap run."""
    ca_cert: Path
    kubeconfig: Path
    kubelet_dropin_dir: Path
    max_pods_file: Path
    docker_sysconfig: Path
    profile: Path


class Config:
    """Application configuration with sensible defaults."""

    # Instance metadata service
    METADATA_URL: str = _env("METADATA_URL", "http://169.254.169.254/latest/meta-data")
    METADATA_TOKEN_URL: str = _env("METADATA_TOKEN_URL", "http://169.254.169.254/latest/api/token")
    METADATA_TIMEOUT: float = float(_env("METADATA_TIMEOUT", "5"))
    METADATA_TOKEN_TTL: int = int(_env("METADATA_TOKEN_TTL", "21600"))

    # Files
    CA_CERT_PATH: str = _env("CA_CERT_PATH", "/etc/kubernetes/pki/ca.crt")
    KUBECONFIG_PATH: str = _env("KUBECONFIG_PATH", "/var/lib/kubelet/kubeconfig")
    KUBELET_DROPIN_DIR: str = _env("KUBELET_DROPIN_DIR", "/etc/systemd/system/kubelet.service.d")
    MAX_PODS_FILE: str = _env("MAX_PODS_FILE", "/etc/eks/eni-max-pods.txt")
    DOCKER_SYSCONFIG_PATH: str = _env("DOCKER_SYSCONFIG_PATH", "/etc/sysconfig/docker")
    PROFILE_PATH: str = _env("PROFILE_PATH", "/etc/profile")

    # Kubelet
    KUBELET_SERVICE: str = _env("KUBELET_SERVICE", "kubelet")
    PAUSE_IMAGE_ACCOUNT: str = _env("PAUSE_IMAGE_ACCOUNT", "602401143452")
    PAUSE_IMAGE_TAG: str = _env("PAUSE_IMAGE_TAG", "3.1")

    # Logging
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = _env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def paths(cls) -> BootstrapPaths:
        """Return the configured file locations."""
        return BootstrapPaths(
            ca_cert=Path(cls.CA_CERT_PATH),
            kubeconfig=Path(cls.KUBECONFIG_PATH),
            kubelet_dropin_dir=Path(cls.KUBELET_DROPIN_DIR),
            max_pods_file=Path(cls.MAX_PODS_FILE),
            docker_sysconfig=Path(cls.DOCKER_SYSCONFIG_PATH),
            profile=Path(cls.PROFILE_PATH),
        )

    @classmethod
    def pause_image(cls, region: str) -> str:
        """Pause container image reference for the given region."""
        return (
            f"{cls.PAUSE_IMAGE_ACCOUNT}.dkr.ecr.{region}.amazonaws.com"
            f"/eks/pause-amd64:{cls.PAUSE_IMAGE_TAG}"
        )
