"""Kubelet runtime configuration.

This module renders the kubelet systemd drop-ins and the proxy environment
files using Jinja2 templates from the ``templates`` directory:

- kubelet-dropin.conf.j2: one ``[Service]`` section setting one environment
  variable, rendered with ``name`` and ``value``
- kubeconfig.yaml.j2: the kubelet client configuration (see ``credentials``)

Drop-ins always written: ``10-kubelet-args.conf``. Conditional ones: max pods,
extra args, and one per non-empty proxy variable. Proxy variables are also
exported from the container runtime sysconfig file and the shell profile.
"""

import logging
import os
from pathlib import Path
from typing import List, Tuple

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from ...config import BootstrapPaths, Config
from .filesystem import NodeFilesystem
from .models import (
    UNIT_UNSAFE_CHARS,
    BootstrapConfig,
    ConfigurationError,
    KubeletFlags,
    NodeNetwork,
)

logger = logging.getLogger("eksbootstrap.bootstrap.configuration")

KUBELET_ARGS_DROPIN = '10-kubelet-args.conf'
MAX_PODS_DROPIN = '20-max-pods.conf'
EXTRA_ARGS_DROPIN = '30-kubelet-extra-args.conf'

# (BootstrapConfig attribute, variable name, drop-in file)
PROXY_VARIABLES: Tuple[Tuple[str, str, str], ...] = (
    ('http_proxy', 'HTTP_PROXY', 'http-proxy.conf'),
    ('https_proxy', 'HTTPS_PROXY', 'https-proxy.conf'),
    ('no_proxy', 'NO_PROXY', 'no-proxy.conf'),
)


def get_template_path() -> str:
    """Get the absolute path to the templates directory."""
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')


def render_template(template_name: str, **context) -> str:
    """Render a template from the templates directory.

    Raises:
        ConfigurationError: If the template is missing, broken, or refers to
            an undefined variable
    """
    env = Environment(
        loader=FileSystemLoader(get_template_path()),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined
    )
    try:
        return env.get_template(template_name).render(**context)
    except TemplateNotFound as e:
        raise ConfigurationError(f"Configuration template not found: {e}") from e
    except TemplateSyntaxError as e:
        raise ConfigurationError(f"Template syntax error: {e}") from e
    except UndefinedError as e:
        raise ConfigurationError(f"Missing required template variable: {e}") from e


def escape_unit_value(value: str) -> str:
    """Escape backslashes and specifiers for a quoted systemd setting."""
    return value.replace('\\', '\\\\').replace('%', '%%')


def render_dropin(name: str, value: str) -> str:
    """Render a drop-in that sets a single environment variable.

    systemd expands ``%`` specifiers and C-style escapes inside
    ``Environment=``, so the value is escaped to reach the kubelet verbatim.
    """
    if any(c in value for c in UNIT_UNSAFE_CHARS):
        raise ConfigurationError(f"{name} must not contain single quotes or newlines")
    return render_template('kubelet-dropin.conf.j2', name=name, value=escape_unit_value(value))


def build_kubelet_flags(network: NodeNetwork, region: str) -> KubeletFlags:
    return KubeletFlags(
        node_ip=network.internal_ip,
        cluster_dns=network.dns_cluster_ip,
        pod_infra_container_image=Config.pause_image(region),
        max_pods=network.max_pods,
    )


def write_kubelet_dropins(
    fs: NodeFilesystem,
    paths: BootstrapPaths,
    flags: KubeletFlags,
    extra_args: str = '',
) -> List[Path]:
    """Write the kubelet argument drop-ins.

    Args:
        fs: Filesystem writer
        paths: Configured file locations
        flags: Kubelet flags for this instance
        extra_args: Extra kubelet arguments, skipped when empty

    Returns:
        list: Paths of the files written
    """
    written = []
    dropin_dir = paths.kubelet_dropin_dir

    written.append(fs.write_text(
        dropin_dir / KUBELET_ARGS_DROPIN,
        render_dropin('KUBELET_ARGS', flags.args)
    ))

    max_pods_arg = flags.max_pods_arg
    if max_pods_arg:
        written.append(fs.write_text(
            dropin_dir / MAX_PODS_DROPIN,
            render_dropin('KUBELET_MAX_PODS', max_pods_arg)
        ))
    else:
        logger.info("max-pods not set for this instance")

    if extra_args:
        written.append(fs.write_text(
            dropin_dir / EXTRA_ARGS_DROPIN,
            render_dropin('KUBELET_EXTRA_ARGS', extra_args)
        ))

    for path in written:
        logger.info(f"Wrote kubelet drop-in {path}")
    return written


def proxy_lines(name: str, value: str) -> Tuple[List[str], List[str]]:
    """Export lines for the container runtime file and the shell profile.

    The runtime file gets both casings, the profile only the lower case one.
    """
    lower = f"export {name.lower()}={value}"
    upper = f"export {name}={value}"
    return [lower, upper], [lower]


def write_proxy_config(
    fs: NodeFilesystem,
    paths: BootstrapPaths,
    config: BootstrapConfig,
) -> List[Path]:
    """Write proxy settings for every non-empty proxy variable.

    Each variable is handled on its own and touches exactly three files: its
    kubelet drop-in, the container runtime sysconfig file and the profile.

    Returns:
        list: Paths of the files written or appended to
    """
    written: List[Path] = []
    for attr, name, dropin in PROXY_VARIABLES:
        value = getattr(config, attr)
        if not value:
            continue

        logger.info(f"Configuring {name}")
        runtime_lines, profile_lines = proxy_lines(name, value)
        targets = [
            fs.write_text(paths.kubelet_dropin_dir / dropin, render_dropin(name, value)),
        ]
        fs.append_lines(paths.docker_sysconfig, runtime_lines)
        targets.append(fs.resolve(paths.docker_sysconfig))
        fs.append_lines(paths.profile, profile_lines)
        targets.append(fs.resolve(paths.profile))

        for target in targets:
            if target not in written:
                written.append(target)
    return written
