"""In-memory control plane used by tests and offline runs."""
import copy
from typing import Any, Dict, List, Optional, Tuple

from .accessor import (
    CLUSTER_DEFINITION_GVR,
    CLUSTER_GVR,
    CLUSTER_VERSION_GVR,
    CONFIG_CONSTRAINT_GVR,
    CONFIGMAP_GVR,
    GroupVersionResource,
)
from ..config import Config
from ..errors import NotFoundError

CLUSTER_NAME = "fake-cluster-name"
NAMESPACE = "fake-namespace"
CLUSTER_DEF_NAME = "fake-cluster-definition"
CLUSTER_VERSION_NAME = "fake-cluster-version"
COMPONENT_NAME = "fake-component-name"
COMPONENT_TYPE = "fake-component-type"
CONFIG_TEMPLATE_NAME = "fake-config-template"
CONFIG_VOLUME_NAME = "fake-config-volume"
CONFIG_CONSTRAINT_NAME = "fake-config-constraint"
CONFIG_FILE_NAME = "my.cnf"

_Key = Tuple[GroupVersionResource, str, str]


def _matches(labels: Dict[str, str], selector: Optional[str]) -> bool:
    if not selector:
        return True
    for term in selector.split(","):
        key, _, value = term.partition("=")
        if labels.get(key.strip()) != value.strip():
            return False
    return True


class InMemoryAccessor:
    """ResourceAccessor holding fixture records in a dictionary.

    Every call is appended to ``calls`` as ``(verb, resource, namespace, name)``.
    """

    def __init__(self, *objects: Tuple[GroupVersionResource, Dict[str, Any]]):
        self._store: Dict[_Key, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, str, str, str]] = []
        self.created: List[Dict[str, Any]] = []
        for gvr, obj in objects:
            self.add(gvr, obj)

    def add(self, gvr: GroupVersionResource, obj: Dict[str, Any]) -> None:
        meta = obj.get("metadata", {})
        self._store[(gvr, meta.get("namespace", ""), meta["name"])] = copy.deepcopy(obj)

    def get(self, gvr: GroupVersionResource, namespace: str, name: str) -> Dict[str, Any]:
        self.calls.append(("get", gvr.resource, namespace, name))
        try:
            return copy.deepcopy(self._store[(gvr, namespace or "", name)])
        except KeyError:
            target = f"{namespace}/{name}" if namespace else name
            raise NotFoundError(f"{gvr.resource} \"{target}\" not found") from None

    def list(self, gvr: GroupVersionResource, namespace: str,
             label_selector: Optional[str] = None) -> List[Dict[str, Any]]:
        self.calls.append(("list", gvr.resource, namespace, label_selector or ""))
        return [
            copy.deepcopy(obj)
            for (g, ns, _), obj in self._store.items()
            if g == gvr and (not namespace or ns == namespace)
            and _matches(obj.get("metadata", {}).get("labels", {}), label_selector)
        ]

    def create(self, gvr: GroupVersionResource, namespace: str, body: Dict[str, Any]) -> Dict[str, Any]:
        obj = copy.deepcopy(body)
        meta = obj.setdefault("metadata", {})
        if not meta.get("name"):
            meta["name"] = f"{meta.get('generateName', '')}{len(self.created):05d}"
        meta["namespace"] = namespace
        self.calls.append(("create", gvr.resource, namespace, meta["name"]))
        self.add(gvr, obj)
        self.created.append(obj)
        return copy.deepcopy(obj)


# ----------------------------------------------------------------------
# Fixture records
# ----------------------------------------------------------------------


def _api_version() -> str:
    return f"{Config.API_GROUP}/{Config.API_VERSION}"


def cluster(name: str = CLUSTER_NAME, namespace: str = NAMESPACE,
            components: Optional[List[Tuple[str, str]]] = None,
            restartable: Optional[List[str]] = None) -> Dict[str, Any]:
    """A cluster record; ``components`` is a list of (name, type) pairs."""
    if components is None:
        components = [(COMPONENT_NAME, COMPONENT_TYPE)]
    obj = {
        "apiVersion": _api_version(),
        "kind": "Cluster",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "clusterDefinitionRef": CLUSTER_DEF_NAME,
            "clusterVersionRef": CLUSTER_VERSION_NAME,
            "components": [{"name": n, "type": t, "replicas": 1} for n, t in components],
        },
        "status": {},
    }
    if restartable is not None:
        obj["status"]["operations"] = {"restartable": list(restartable)}
    return obj


def config_template(name: str = CONFIG_TEMPLATE_NAME, volume_name: str = CONFIG_VOLUME_NAME,
                    constraint: Optional[str] = CONFIG_CONSTRAINT_NAME) -> Dict[str, Any]:
    tpl = {"name": name, "configTplRef": f"{name}-tpl", "namespace": "default", "volumeName": volume_name}
    if constraint:
        tpl["configConstraintRef"] = constraint
    return tpl


def cluster_definition(name: str = CLUSTER_DEF_NAME, component_type: str = COMPONENT_TYPE,
                       templates: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    if templates is None:
        templates = [config_template()]
    component = {"typeName": component_type}
    if templates:
        component["configSpec"] = {"configTemplateRefs": templates}
    return {
        "apiVersion": _api_version(),
        "kind": "ClusterDefinition",
        "metadata": {"name": name},
        "spec": {"components": [component]},
    }


def cluster_version(name: str = CLUSTER_VERSION_NAME, component_type: str = COMPONENT_TYPE,
                    templates: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    component: Dict[str, Any] = {"type": component_type}
    if templates:
        component["configTemplateRefs"] = templates
    return {
        "apiVersion": _api_version(),
        "kind": "ClusterVersion",
        "metadata": {"name": name},
        "spec": {"clusterDefinitionRef": CLUSTER_DEF_NAME, "components": [component]},
    }


def config_map(cluster_name: str = CLUSTER_NAME, component: str = COMPONENT_NAME,
               volume_name: str = CONFIG_VOLUME_NAME, namespace: str = NAMESPACE,
               data: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    if data is None:
        data = {CONFIG_FILE_NAME: "[mysqld]\nmax_connections=100\n"}
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": f"{cluster_name}-{component}-{volume_name}", "namespace": namespace},
        "data": dict(data),
    }


def config_constraint(name: str = CONFIG_CONSTRAINT_NAME, schema: Optional[Dict[str, Any]] = None,
                      top_level_name: str = "", immutable: Optional[List[str]] = None) -> Dict[str, Any]:
    if schema is None:
        schema = {
            "type": "object",
            "properties": {
                "max_connections": {"type": "integer", "minimum": 1, "maximum": 100000},
                "general_log": {"type": "string", "enum": ["ON", "OFF"]},
            },
        }
    spec: Dict[str, Any] = {"configurationSchema": {"schema": schema}}
    if top_level_name:
        spec["cfgSchemaTopLevelName"] = top_level_name
    if immutable:
        spec["immutableParameters"] = list(immutable)
    return {
        "apiVersion": _api_version(),
        "kind": "ConfigConstraint",
        "metadata": {"name": name},
        "spec": spec,
    }


def reconfigure_accessor(**overrides) -> InMemoryAccessor:
    """An accessor populated with one cluster, one component and one config template."""
    return InMemoryAccessor(
        (CLUSTER_GVR, overrides.get("cluster", cluster())),
        (CLUSTER_DEFINITION_GVR, overrides.get("cluster_definition", cluster_definition())),
        (CLUSTER_VERSION_GVR, overrides.get("cluster_version", cluster_version())),
        (CONFIGMAP_GVR, overrides.get("config_map", config_map())),
        (CONFIG_CONSTRAINT_GVR, overrides.get("config_constraint", config_constraint())),
    )
