import pytest

from opsctl.errors import NotFoundError, RemoteError, UsageError
from opsctl.modules import fake
from opsctl.modules.accessor import CLUSTER_GVR
from opsctl.modules.models import (
    HorizontalScaleOperation,
    ReconfigureOperation,
    RestartOperation,
    UpgradeOperation,
    VerticalScaleOperation,
    VolumeExpandOperation,
)
from opsctl.modules.validate import complete_operation, validate_operation

ALL_KINDS = [
    RestartOperation,
    UpgradeOperation,
    VerticalScaleOperation,
    HorizontalScaleOperation,
    VolumeExpandOperation,
    ReconfigureOperation,
]


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_missing_cluster_name_fails_first(kind, accessor):
    op = kind(component_names=["mysql"])
    with pytest.raises(UsageError, match="missing cluster name"):
        validate_operation(op, accessor)
    assert accessor.calls == []


@pytest.mark.parametrize("kind", [
    RestartOperation,
    VerticalScaleOperation,
    HorizontalScaleOperation,
    VolumeExpandOperation,
    ReconfigureOperation,
])
def test_component_operations_require_component_names(kind, accessor):
    op = kind(name="mycluster")
    with pytest.raises(UsageError, match="missing component-names"):
        validate_operation(op, accessor)
    assert accessor.calls == []


def test_restart_without_restartable_components_fails():
    accessor = fake.InMemoryAccessor((CLUSTER_GVR, fake.cluster()))
    op = RestartOperation(name=fake.CLUSTER_NAME, namespace=fake.NAMESPACE)
    complete_operation(op, accessor)
    assert op.component_names == []
    with pytest.raises(UsageError, match="missing component-names"):
        validate_operation(op, accessor)


def test_upgrade_requires_cluster_version(accessor):
    with pytest.raises(UsageError, match="missing cluster-version"):
        validate_operation(UpgradeOperation(name="mycluster"), accessor)
    validate_operation(UpgradeOperation(name="mycluster", cluster_version_ref="v8.0.30"), accessor)


def test_vertical_scaling_takes_quantities_as_given(accessor):
    op = VerticalScaleOperation(name="mycluster", component_names=["mysql"], request_cpu="not-a-quantity")
    validate_operation(op, accessor)


@pytest.mark.parametrize("replicas,message", [
    (-2, "replicas required natural number"),
    (-1, "missing replicas"),
])
def test_horizontal_scaling_rejects_negative_replicas(replicas, message, accessor):
    op = HorizontalScaleOperation(name="mycluster", component_names=["mysql"], replicas=replicas)
    with pytest.raises(UsageError, match=message):
        validate_operation(op, accessor)


@pytest.mark.parametrize("replicas", [0, 5])
def test_horizontal_scaling_accepts_natural_numbers(replicas, accessor):
    validate_operation(HorizontalScaleOperation(name="mycluster", component_names=["mysql"], replicas=replicas), accessor)


def test_volume_expansion_requires_vct_names(accessor):
    op = VolumeExpandOperation(name="mycluster", component_names=["mysql"], storage="10Gi")
    with pytest.raises(UsageError, match="missing volume-claim-template-names"):
        validate_operation(op, accessor)


def test_volume_expansion_requires_storage(accessor):
    op = VolumeExpandOperation(name="mycluster", component_names=["mysql"], vct_names=["data"])
    with pytest.raises(UsageError, match="missing storage"):
        validate_operation(op, accessor)


def test_volume_expansion_with_both_fields_passes(accessor):
    op = VolumeExpandOperation(name="mycluster", component_names=["mysql"], vct_names=["data"], storage="10Gi")
    validate_operation(op, accessor)


def test_restart_completion_reads_restartable_components():
    accessor = fake.InMemoryAccessor(
        (CLUSTER_GVR, fake.cluster(restartable=["mysql", "proxy"])),
    )
    op = RestartOperation(name=fake.CLUSTER_NAME, namespace=fake.NAMESPACE)
    complete_operation(op, accessor)
    assert op.component_names == ["mysql", "proxy"]


def test_restart_completion_keeps_given_components(accessor):
    op = RestartOperation(name=fake.CLUSTER_NAME, namespace=fake.NAMESPACE, component_names=["mysql"])
    complete_operation(op, accessor)
    assert op.component_names == ["mysql"]
    assert accessor.calls == []


def test_restart_completion_fails_for_unknown_cluster():
    op = RestartOperation(name="missing", namespace=fake.NAMESPACE)
    with pytest.raises(NotFoundError):
        complete_operation(op, fake.InMemoryAccessor())


def test_restart_completion_fails_on_unreadable_status():
    record = fake.cluster()
    record["status"] = {"operations": {"restartable": "mysql"}}
    op = RestartOperation(name=fake.CLUSTER_NAME, namespace=fake.NAMESPACE)
    with pytest.raises(RemoteError):
        complete_operation(op, fake.InMemoryAccessor((CLUSTER_GVR, record)))


def test_completion_is_skipped_without_cluster_name(accessor):
    op = RestartOperation()
    complete_operation(op, accessor)
    assert accessor.calls == []
