"""Kubelet service management through systemd."""

import logging
import subprocess
from typing import List, Optional

from ...config import Config
from .models import ServiceError

logger = logging.getLogger("eksbootstrap.bootstrap.service")


class SystemdManager:
    """Runs ``systemctl`` commands on the local host."""

    def __init__(self, systemctl: str = 'systemctl'):
        self.systemctl = systemctl

    def _run(self, *args: str) -> str:
        cmd: List[str] = [self.systemctl, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or '').strip()
            raise ServiceError(
                f"Command '{' '.join(cmd)}' failed with exit code {e.returncode}: {detail}"
            ) from e
        except OSError as e:
            raise ServiceError(f"Failed to run {self.systemctl}: {e}") from e
        return result.stdout

    def daemon_reload(self) -> None:
        self._run('daemon-reload')

    def enable(self, unit: str) -> None:
        self._run('enable', unit)

    def start(self, unit: str) -> None:
        self._run('start', unit)


def activate_kubelet(manager: SystemdManager, unit: Optional[str] = None) -> None:
    """Reload unit definitions, then enable and start the kubelet.

    Raises:
        ServiceError: If any step fails; later steps are not attempted
    """
    unit = unit or Config.KUBELET_SERVICE
    logger.info("Reloading systemd unit definitions")
    manager.daemon_reload()
    manager.enable(unit)
    logger.info(f"Starting {unit}")
    manager.start(unit)
    logger.info(f"✅ {unit} started")
