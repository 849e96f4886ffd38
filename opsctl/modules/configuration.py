"""Lookup of components and config templates for a cluster."""
import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from .accessor import (
    CLUSTER_DEFINITION_GVR,
    CLUSTER_GVR,
    CLUSTER_VERSION_GVR,
    ResourceAccessor,
    nested_get,
)
from .models import ConfigTemplate
from ..errors import NotFoundError, RemoteError

logger = logging.getLogger("opsctl.configuration")


def component_config_name(cluster_name: str, component_name: str, volume_name: str) -> str:
    """Name of the config map holding a component's live config files."""
    return f"{cluster_name}-{component_name}-{volume_name}"


def get_components(cluster: Dict[str, Any]) -> List[str]:
    """Names of the components declared in a cluster record."""
    components = nested_get(cluster, "spec", "components", default=[]) or []
    return [c["name"] for c in components if c.get("name")]


def get_components_from_cluster(accessor: ResourceAccessor, name: str, namespace: str) -> List[str]:
    return get_components(accessor.get(CLUSTER_GVR, namespace, name))


def _parse_templates(refs: List[Dict[str, Any]], source: str) -> List[ConfigTemplate]:
    try:
        return [ConfigTemplate.model_validate(ref) for ref in refs or []]
    except ValidationError as e:
        raise RemoteError(f"invalid config template reference in {source}: {e}") from e


def get_config_templates(accessor: ResourceAccessor, cluster_name: str, namespace: str,
                         component_name: str) -> List[ConfigTemplate]:
    """
    Collect the config templates bound to a component of a cluster.

    Templates come from the component definition of the cluster definition.
    Entries in the cluster version replace same-named ones and add new ones.

    Args:
        accessor: Control plane accessor
        cluster_name: Name of the cluster
        namespace: Namespace of the cluster
        component_name: Name of the component inside the cluster

    Returns:
        List of ConfigTemplate, possibly empty

    Raises:
        NotFoundError: If the cluster or the component does not exist
    """
    cluster = accessor.get(CLUSTER_GVR, namespace, cluster_name)
    component = next(
        (c for c in nested_get(cluster, "spec", "components", default=[]) or []
         if c.get("name") == component_name),
        None,
    )
    if component is None:
        raise NotFoundError(f"component[{component_name}] does not exist in cluster[{cluster_name}]")
    component_type = component.get("type") or component.get("componentDefRef", "")

    def_name = nested_get(cluster, "spec", "clusterDefinitionRef", default="")
    cluster_def = accessor.get(CLUSTER_DEFINITION_GVR, "", def_name)
    templates: List[ConfigTemplate] = []
    for comp_def in nested_get(cluster_def, "spec", "components", default=[]) or []:
        if comp_def.get("typeName") == component_type:
            refs = nested_get(comp_def, "configSpec", "configTemplateRefs", default=[])
            templates = _parse_templates(refs, def_name)
            break

    version_name = nested_get(cluster, "spec", "clusterVersionRef", default="")
    if version_name:
        cluster_version = accessor.get(CLUSTER_VERSION_GVR, "", version_name)
        for comp_ver in nested_get(cluster_version, "spec", "components", default=[]) or []:
            if comp_ver.get("type", comp_ver.get("componentDefRef")) != component_type:
                continue
            for tpl in _parse_templates(comp_ver.get("configTemplateRefs"), version_name):
                idx = next((i for i, t in enumerate(templates) if t.name == tpl.name), None)
                if idx is None:
                    templates.append(tpl)
                else:
                    templates[idx] = tpl

    logger.debug(f"Component {component_name} has config templates: {[t.name for t in templates]}")
    return templates
