"""Generic access to control plane records by group-version-resource."""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from urllib3.exceptions import HTTPError

from ..config import Config
from ..errors import NotFoundError, RemoteError

logger = logging.getLogger("opsctl.accessor")


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def __str__(self) -> str:
        return f"{self.resource}.{self.version}.{self.group}" if self.group else f"{self.resource}.{self.version}"


def _dbaas(resource: str) -> GroupVersionResource:
    return GroupVersionResource(Config.API_GROUP, Config.API_VERSION, resource)


CLUSTER_GVR = _dbaas("clusters")
CLUSTER_DEFINITION_GVR = _dbaas("clusterdefinitions")
CLUSTER_VERSION_GVR = _dbaas("clusterversions")
OPS_REQUEST_GVR = _dbaas("opsrequests")
CONFIG_CONSTRAINT_GVR = _dbaas("configconstraints")
CONFIGMAP_GVR = GroupVersionResource("", "v1", "configmaps")


class ResourceAccessor(Protocol):
    """The narrow view of the control plane the validators need."""

    def get(self, gvr: GroupVersionResource, namespace: str, name: str) -> Dict[str, Any]:
        ...

    def list(self, gvr: GroupVersionResource, namespace: str,
             label_selector: Optional[str] = None) -> List[Dict[str, Any]]:
        ...

    def create(self, gvr: GroupVersionResource, namespace: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...


def translate_api_error(err: ApiException, action: str, gvr: GroupVersionResource,
                        namespace: str, name: str = "") -> Exception:
    """Map a kubernetes ApiException onto the opsctl error taxonomy."""
    target = f"{namespace}/{name}" if namespace else name
    if err.status == 404:
        return NotFoundError(f"{gvr.resource} \"{target}\" not found")
    return RemoteError(f"failed to {action} {gvr.resource} {target}: {err.reason or err}")


class KubeResourceAccessor:
    """ResourceAccessor backed by the kubernetes dynamic client."""

    def __init__(self, kubeconfig: Optional[str] = None, api_client: Optional[client.ApiClient] = None):
        self._kubeconfig = kubeconfig or Config.KUBECONFIG or None
        self._api_client = api_client
        self._client: Optional[DynamicClient] = None
        self._resources: Dict[GroupVersionResource, Any] = {}

    @property
    def _dyn(self) -> DynamicClient:
        # Connected on first use.
        if self._client is None:
            if self._api_client is None:
                try:
                    config.load_kube_config(config_file=self._kubeconfig)
                except (ConfigException, FileNotFoundError) as e:
                    logger.debug(f"Falling back to in-cluster config: {e}")
                    try:
                        config.load_incluster_config()
                    except ConfigException as ie:
                        raise RemoteError(f"failed to load kubernetes config: {e}") from ie
                self._api_client = client.ApiClient()
            self._client = DynamicClient(self._api_client)
        return self._client

    def _resource(self, gvr: GroupVersionResource):
        if gvr not in self._resources:
            try:
                self._resources[gvr] = self._dyn.resources.get(api_version=gvr.api_version, name=gvr.resource)
            except ResourceNotFoundError as e:
                raise NotFoundError(f"the server doesn't have a resource type \"{gvr}\"") from e
        return self._resources[gvr]

    @contextmanager
    def _translate(self, action: str, gvr: GroupVersionResource, namespace: str, name: str = ""):
        try:
            yield
        except ApiException as e:
            raise translate_api_error(e, action, gvr, namespace, name) from e
        except HTTPError as e:
            raise RemoteError(f"failed to {action} {gvr.resource}: {e}") from e

    def get(self, gvr: GroupVersionResource, namespace: str, name: str) -> Dict[str, Any]:
        logger.debug(f"GET {gvr} {namespace}/{name}")
        with self._translate("get", gvr, namespace, name):
            return self._resource(gvr).get(name=name, namespace=namespace or None).to_dict()

    def list(self, gvr: GroupVersionResource, namespace: str,
             label_selector: Optional[str] = None) -> List[Dict[str, Any]]:
        logger.debug(f"LIST {gvr} {namespace} selector={label_selector}")
        with self._translate("list", gvr, namespace):
            objs = self._resource(gvr).get(namespace=namespace or None, label_selector=label_selector)
        return objs.to_dict().get("items", [])

    def create(self, gvr: GroupVersionResource, namespace: str, body: Dict[str, Any]) -> Dict[str, Any]:
        meta = body.get("metadata", {})
        name = meta.get("name") or meta.get("generateName", "")
        logger.debug(f"CREATE {gvr} {namespace}/{name}")
        with self._translate("create", gvr, namespace, name):
            return self._resource(gvr).create(body=body, namespace=namespace).to_dict()


def nested_get(obj: Dict[str, Any], *path: str, default: Any = None) -> Any:
    """Walk nested dictionaries, returning ``default`` when a key is missing."""
    cur: Any = obj
    for key in path:
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return cur
