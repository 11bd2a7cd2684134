import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from eksbootstrap.logging import configure_logging
from eksbootstrap.modules.bootstrap import (
    BootstrapError,
    NodeBootstrapper,
    NodeFilesystem,
    UsageError,
    resolve_parameters,
)

logger = logging.getLogger("eksbootstrap.cli")

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": []},
)


def _print_help(ctx: typer.Context, value: bool):
    """Print usage and exit with an error status."""
    if value and not ctx.resilient_parsing:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)


@app.command()
def bootstrap(
    cluster_name: Optional[str] = typer.Argument(None, metavar="CLUSTER_NAME", show_default=False),
    use_max_pods: str = typer.Option(
        "true", "--use-max-pods", help="Sets --max-pods for the kubelet when true."
    ),
    b64_cluster_ca: Optional[str] = typer.Option(
        None, "--b64-cluster-ca",
        help="The base64 encoded cluster CA content. Only valid when used with "
             "--apiserver-endpoint. Bypasses calling eks:DescribeCluster."
    ),
    apiserver_endpoint: Optional[str] = typer.Option(
        None, "--apiserver-endpoint",
        help="The EKS cluster API Server endpoint. Only valid when used with "
             "--b64-cluster-ca. Bypasses calling eks:DescribeCluster."
    ),
    kubelet_extra_args: Optional[str] = typer.Option(
        None, "--kubelet-extra-args",
        help="Extra arguments to add to the kubelet. Useful for adding labels or taints."
    ),
    http_proxy: Optional[str] = typer.Option(None, "--http-proxy", help="Adds HTTP_PROXY config to kubelet"),
    https_proxy: Optional[str] = typer.Option(None, "--https-proxy", help="Adds HTTPS_PROXY config to kubelet"),
    no_proxy: Optional[str] = typer.Option(None, "--no-proxy", help="Adds NO_PROXY config to kubelet"),
    root: Optional[Path] = typer.Option(
        None, "--root",
        help="Write every file below this directory instead of / (the max-pods table is still read from the node)"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
    help_: bool = typer.Option(
        False, "-h", "--help", is_eager=True,
        callback=_print_help, help="Print this help"
    ),
):
    """Bootstraps an instance into an EKS cluster."""
    configure_logging(debug)

    try:
        config = resolve_parameters(
            cluster_name,
            use_max_pods=use_max_pods,
            b64_cluster_ca=b64_cluster_ca,
            apiserver_endpoint=apiserver_endpoint,
            kubelet_extra_args=kubelet_extra_args,
            http_proxy=http_proxy,
            https_proxy=https_proxy,
            no_proxy=no_proxy,
        )
    except UsageError as e:
        typer.echo(str(e), err=True)
        typer.echo("usage: eks-bootstrap [options] <cluster-name>", err=True)
        raise typer.Exit(code=1)

    try:
        result = NodeBootstrapper(config, filesystem=NodeFilesystem(root)).run()
    except BootstrapError as e:
        logger.debug("Bootstrap failed", exc_info=True)
        typer.echo(f"❌ Bootstrap failed: {e}", err=True)
        raise typer.Exit(code=1)

    for path in result.written_files:
        logger.debug(f"  {path}")


if __name__ == "__main__":
    try:
        app()
    except Exception as e:
        logging.error(f"Error: {e}")
        sys.exit(1)
