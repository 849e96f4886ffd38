"""
Reconfigure validation.

Resolves the chain component -> config template -> config file -> config
constraint one step at a time. Each step either returns the resolved value or
raises, and omitted selectors are filled in when exactly one candidate exists.
Template resolution must come before config file resolution because the
config map being searched belongs to the chosen template.
"""
import logging
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from .accessor import CONFIG_CONSTRAINT_GVR, CONFIGMAP_GVR, ResourceAccessor
from .configuration import component_config_name, get_components_from_cluster, get_config_templates
from .constraint import validate_parameters
from .models import ConfigConstraint, ConfigMapSnapshot, ConfigTemplate, ReconfigureOperation
from ..errors import AmbiguityError, NotFoundError, RemoteError, UsageError

logger = logging.getLogger("opsctl.reconfigure")


def parse_parameters(parameters: List[str]) -> Dict[str, str]:
    """Turn ``--set`` values into a mapping; later keys win."""
    key_values: Dict[str, str] = {}
    for param in parameters:
        for pair in param.split(","):
            fields = pair.split("=", 1)
            if len(fields) != 2:
                raise UsageError("updated parameter formatter: key=value")
            key_values[fields[0]] = fields[1]
    return key_values


def resolve_template(op: ReconfigureOperation, templates: List[ConfigTemplate]) -> ConfigTemplate:
    if not templates:
        raise NotFoundError("not support reconfiguring because there is no config template.")

    if not op.cfg_template_name and len(templates) > 1:
        raise AmbiguityError("when multi templates exist, must specify which template to use.")

    if not op.cfg_template_name:
        op.cfg_template_name = templates[0].name
        logger.info(f"Using config template {op.cfg_template_name}")
        return templates[0]

    for tpl in templates:
        if tpl.name == op.cfg_template_name:
            return tpl
    raise NotFoundError(f"specify template name[{op.cfg_template_name}] is not exist.")


def fetch_config_map(accessor: ResourceAccessor, op: ReconfigureOperation,
                     component_name: str, tpl: ConfigTemplate) -> ConfigMapSnapshot:
    cm_name = component_config_name(op.name, component_name, tpl.volume_name)
    obj = accessor.get(CONFIGMAP_GVR, op.namespace, cm_name)
    return ConfigMapSnapshot(name=cm_name, namespace=op.namespace, data=obj.get("data") or {})


def resolve_config_file(op: ReconfigureOperation, cm: ConfigMapSnapshot) -> str:
    if not cm.data:
        raise NotFoundError("not support reconfiguring because there is no config file.")

    if not op.cfg_file and len(cm.data) == 1:
        op.cfg_file = next(iter(cm.data))
        logger.info(f"Using config file {op.cfg_file}")
        return op.cfg_file

    if op.cfg_file not in cm.data:
        raise NotFoundError(f"specify file name[{op.cfg_file}] is not exist.")
    return op.cfg_file


def fetch_constraint(accessor: ResourceAccessor, name: str) -> ConfigConstraint:
    obj = accessor.get(CONFIG_CONSTRAINT_GVR, "", name)
    try:
        return ConfigConstraint(name=obj["metadata"]["name"], spec=obj.get("spec") or {})
    except (KeyError, ValidationError) as e:
        raise RemoteError(f"invalid config constraint {name}: {e}") from e


def validate_reconfigure(op: ReconfigureOperation, accessor: ResourceAccessor) -> None:
    """Run every reconfigure precondition in order, filling in omitted selectors."""
    if len(op.component_names) != 1:
        raise UsageError("reconfiguring only support one component.")

    if op.url_path:
        if not Path(op.url_path).exists():
            raise UsageError(f"failed to check if {op.url_path} exists")
        logger.info(f"Reconfiguring from local file {op.url_path}")
        return

    if not op.parameters:
        raise UsageError("reconfiguring required configure file or updated parameters.")
    try:
        op.key_values = parse_parameters(op.parameters)
    except UsageError as e:
        raise UsageError(f"failed to validate updated params. {e}") from e

    component_name = op.component_names[0]
    tpl = resolve_template(op, get_config_templates(accessor, op.name, op.namespace, component_name))
    cfg_file = resolve_config_file(op, fetch_config_map(accessor, op, component_name, tpl))

    # Templates without a constraint are submitted unchecked.
    if not tpl.config_constraint_ref:
        logger.warning(f"Config template {tpl.name} has no config constraint, skipping parameter validation")
        return
    constraint = fetch_constraint(accessor, tpl.config_constraint_ref)
    validate_parameters(constraint, cfg_file, op.key_values)


def fill_component_name(op: ReconfigureOperation, accessor: ResourceAccessor) -> None:
    """Adopt the cluster's only component when none was given."""
    if op.component_names:
        return
    components = get_components_from_cluster(accessor, op.name, op.namespace)
    if len(components) != 1:
        raise AmbiguityError("when multi component exist, must specify which component to use.")
    op.component_names = components
    logger.info(f"Using component {components[0]}")
