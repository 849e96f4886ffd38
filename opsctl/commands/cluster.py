import logging
from typing import List, Optional

import typer

from ..config import Config
from ..errors import OperationError
from ..modules.accessor import KubeResourceAccessor
from ..modules.builder import build_and_submit
from ..modules.models import (
    HorizontalScaleOperation,
    OperationDescriptor,
    ReconfigureOperation,
    RestartOperation,
    UpgradeOperation,
    VerticalScaleOperation,
    VolumeExpandOperation,
)

logger = logging.getLogger("opsctl.commands")

app = typer.Typer(help="Cluster maintenance operations")

# Replaced in tests with an in-memory accessor factory.
get_accessor = KubeResourceAccessor

NAME_ARGUMENT = typer.Argument("", help="Cluster name", show_default=False)
NAMESPACE_OPTION = typer.Option(Config.NAMESPACE, "--namespace", "-n", help="Namespace of the cluster")
OPS_REQUEST_OPTION = typer.Option("", "--ops-request", help="OpsRequest name. if not specified, it will be randomly generated")
TTL_OPTION = typer.Option(0, "--ttlSecondsAfterSucceed", min=0, help="Time to live after the OpsRequest succeed")
COMPONENT_NAMES_OPTION = typer.Option("", "--component-names", help="Component names to this operations (comma separated)")


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma separated flag value, dropping blank entries."""
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def submit(op: OperationDescriptor) -> None:
    logger.debug(f"Submitting {op.ops_type.value} for cluster {op.name or '<unset>'}")
    try:
        created = build_and_submit(op, get_accessor())
    except OperationError as e:
        typer.secho(f"❌ {e}", err=True, fg="red")
        raise typer.Exit(code=1)
    typer.echo(f"OpsRequest {created['metadata']['name']} created")


@app.command("restart")
def restart_cmd(
    name: str = NAME_ARGUMENT,
    component_names: str = COMPONENT_NAMES_OPTION,
    namespace: str = NAMESPACE_OPTION,
    ops_request: str = OPS_REQUEST_OPTION,
    ttl: int = TTL_OPTION,
):
    """Restart the specified components in the cluster (all of them when none given)."""
    submit(RestartOperation(
        name=name, namespace=namespace, component_names=split_list(component_names),
        ops_request_name=ops_request, ttl_seconds_after_succeed=ttl,
    ))


@app.command("upgrade")
def upgrade_cmd(
    name: str = NAME_ARGUMENT,
    cluster_version: str = typer.Option("", "--cluster-version", help="Reference cluster version (required)"),
    namespace: str = NAMESPACE_OPTION,
    ops_request: str = OPS_REQUEST_OPTION,
    ttl: int = TTL_OPTION,
):
    """Upgrade the cluster version."""
    submit(UpgradeOperation(
        name=name, namespace=namespace, cluster_version_ref=cluster_version,
        ops_request_name=ops_request, ttl_seconds_after_succeed=ttl,
    ))


@app.command("vscale")
def vscale_cmd(
    name: str = NAME_ARGUMENT,
    component_names: str = COMPONENT_NAMES_OPTION,
    request_cpu: str = typer.Option("", "--requests.cpu", help="CPU size requested by the component"),
    request_memory: str = typer.Option("", "--requests.memory", help="Memory size requested by the component"),
    limit_cpu: str = typer.Option("", "--limits.cpu", help="CPU size limited by the component"),
    limit_memory: str = typer.Option("", "--limits.memory", help="Memory size limited by the component"),
    namespace: str = NAMESPACE_OPTION,
    ops_request: str = OPS_REQUEST_OPTION,
    ttl: int = TTL_OPTION,
):
    """Vertically scale the specified components in the cluster."""
    submit(VerticalScaleOperation(
        name=name, namespace=namespace, component_names=split_list(component_names),
        request_cpu=request_cpu, request_memory=request_memory,
        limit_cpu=limit_cpu, limit_memory=limit_memory,
        ops_request_name=ops_request, ttl_seconds_after_succeed=ttl,
    ))


@app.command("hscale")
def hscale_cmd(
    name: str = NAME_ARGUMENT,
    component_names: str = COMPONENT_NAMES_OPTION,
    replicas: int = typer.Option(-1, "--replicas", help="Replicas with the specified components"),
    namespace: str = NAMESPACE_OPTION,
    ops_request: str = OPS_REQUEST_OPTION,
    ttl: int = TTL_OPTION,
):
    """Horizontally scale the specified components in the cluster."""
    submit(HorizontalScaleOperation(
        name=name, namespace=namespace, component_names=split_list(component_names),
        replicas=replicas, ops_request_name=ops_request, ttl_seconds_after_succeed=ttl,
    ))


@app.command("volume-expand")
def volume_expand_cmd(
    name: str = NAME_ARGUMENT,
    component_names: str = COMPONENT_NAMES_OPTION,
    vct_names: str = typer.Option("", "--volume-claim-template-names", help="VolumeClaimTemplate names in components (required)"),
    storage: str = typer.Option("", "--storage", help="Volume storage size (required)"),
    namespace: str = NAMESPACE_OPTION,
    ops_request: str = OPS_REQUEST_OPTION,
    ttl: int = TTL_OPTION,
):
    """Expand volume with the specified components and volumeClaimTemplates in the cluster."""
    submit(VolumeExpandOperation(
        name=name, namespace=namespace, component_names=split_list(component_names),
        vct_names=split_list(vct_names), storage=storage,
        ops_request_name=ops_request, ttl_seconds_after_succeed=ttl,
    ))


@app.command("configure")
def configure_cmd(
    name: str = NAME_ARGUMENT,
    parameters: Optional[List[str]] = typer.Option(None, "--set", help="Updated parameters, e.g. --set max_connections=1000,general_log=OFF"),
    component_name: str = typer.Option("", "--component-name", help="Component to update. If the cluster has only one component, unset the parameter."),
    template_name: str = typer.Option("", "--template-name", help="Configuration template to update (e.g. mysql-3node-tpl)"),
    configure_file: str = typer.Option("", "--configure-file", help="Configuration file to update (e.g. my.cnf)"),
    namespace: str = NAMESPACE_OPTION,
    ops_request: str = OPS_REQUEST_OPTION,
    ttl: int = TTL_OPTION,
):
    """Reconfigure parameters with the specified components in the cluster."""
    submit(ReconfigureOperation(
        name=name, namespace=namespace, component_names=split_list(component_name),
        parameters=list(parameters or []), cfg_template_name=template_name, cfg_file=configure_file,
        ops_request_name=ops_request, ttl_seconds_after_succeed=ttl,
    ))
