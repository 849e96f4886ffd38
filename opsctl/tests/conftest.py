import pytest

from opsctl.modules import fake
from opsctl.modules.models import ReconfigureOperation


@pytest.fixture
def accessor():
    return fake.reconfigure_accessor()


@pytest.fixture
def reconfigure_op():
    def _make(**kwargs):
        kwargs.setdefault("name", fake.CLUSTER_NAME)
        kwargs.setdefault("namespace", fake.NAMESPACE)
        kwargs.setdefault("component_names", [fake.COMPONENT_NAME])
        return ReconfigureOperation(**kwargs)
    return _make
