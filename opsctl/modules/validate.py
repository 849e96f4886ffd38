"""Per operation kind validation and completion."""
import logging
from typing import Callable, Dict

from .accessor import CLUSTER_GVR, ResourceAccessor, nested_get
from .models import (
    HorizontalScaleOperation,
    OperationDescriptor,
    OpsType,
    ReconfigureOperation,
    RestartOperation,
    UpgradeOperation,
    VolumeExpandOperation,
)
from .reconfigure import fill_component_name, validate_reconfigure
from ..errors import RemoteError, UsageError

logger = logging.getLogger("opsctl.validate")

Validator = Callable[[OperationDescriptor, ResourceAccessor], None]


def _require_components(op: OperationDescriptor) -> None:
    if not op.component_names:
        raise UsageError("missing component-names")


def validate_restart(op: RestartOperation, accessor: ResourceAccessor) -> None:
    # Runs after completion, so an empty list means nothing is restartable.
    _require_components(op)


def validate_upgrade(op: UpgradeOperation, accessor: ResourceAccessor) -> None:
    if not op.cluster_version_ref:
        raise UsageError("missing cluster-version")


def validate_vertical_scaling(op: OperationDescriptor, accessor: ResourceAccessor) -> None:
    _require_components(op)


def validate_horizontal_scaling(op: HorizontalScaleOperation, accessor: ResourceAccessor) -> None:
    _require_components(op)
    if op.replicas < -1:
        raise UsageError("replicas required natural number")
    if op.replicas == -1:
        raise UsageError("missing replicas")


def validate_volume_expansion(op: VolumeExpandOperation, accessor: ResourceAccessor) -> None:
    _require_components(op)
    if not op.vct_names:
        raise UsageError("missing volume-claim-template-names")
    if not op.storage:
        raise UsageError("missing storage")


def validate_reconfiguring(op: ReconfigureOperation, accessor: ResourceAccessor) -> None:
    _require_components(op)
    validate_reconfigure(op, accessor)


VALIDATORS: Dict[OpsType, Validator] = {
    OpsType.RESTART: validate_restart,
    OpsType.UPGRADE: validate_upgrade,
    OpsType.VERTICAL_SCALING: validate_vertical_scaling,
    OpsType.HORIZONTAL_SCALING: validate_horizontal_scaling,
    OpsType.VOLUME_EXPANSION: validate_volume_expansion,
    OpsType.RECONFIGURING: validate_reconfiguring,
}


def validate_operation(op: OperationDescriptor, accessor: ResourceAccessor) -> None:
    """Validate an operation, raising an OperationError on the first failure."""
    if not op.name:
        raise UsageError("missing cluster name")
    VALIDATORS[op.ops_type](op, accessor)


def complete_restart(op: RestartOperation, accessor: ResourceAccessor) -> None:
    """Restarting with no components means every restartable component."""
    if op.component_names:
        return
    cluster = accessor.get(CLUSTER_GVR, op.namespace, op.name)
    restartable = nested_get(cluster, "status", "operations", "restartable", default=[]) or []
    if not isinstance(restartable, list) or not all(isinstance(n, str) for n in restartable):
        raise RemoteError(f"cannot read restartable components of cluster {op.name}: {restartable!r}")
    op.component_names = list(restartable)
    logger.info(f"Restartable components: {', '.join(op.component_names) or '<none>'}")


COMPLETERS: Dict[OpsType, Validator] = {
    OpsType.RESTART: complete_restart,
    OpsType.RECONFIGURING: fill_component_name,
}


def complete_operation(op: OperationDescriptor, accessor: ResourceAccessor) -> None:
    """Fill in omitted fields from the control plane before validation."""
    completer = COMPLETERS.get(op.ops_type)
    if completer is not None and op.name:
        completer(op, accessor)
