"""Rendering and submission of OpsRequest records.

The request body is rendered from templates/ops_request.yaml.j2 with the
descriptor's ``to_options()`` mapping as context:
- options: flattened operation descriptor
- api_version: group/version of the OpsRequest resource
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List

import yaml
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from .accessor import OPS_REQUEST_GVR, GroupVersionResource, ResourceAccessor
from .confirm import confirm
from .models import OperationDescriptor, OpsType
from .validate import complete_operation, validate_operation
from ..errors import ConfirmationDeclined, OperationError, SubmissionError

logger = logging.getLogger("opsctl.builder")

OPS_REQUEST_TEMPLATE = "ops_request.yaml.j2"

ConfirmFunc = Callable[[List[str]], bool]


def get_template_path() -> str:
    """Get the absolute path to the templates directory."""
    return os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'templates')


@dataclass
class BuildInputs:
    """Everything needed to turn a descriptor into a submitted record."""
    template_name: str
    gvr: GroupVersionResource
    operation: OperationDescriptor
    complete: Callable[[], None]
    validate: Callable[[], None]


def build_operation_inputs(op: OperationDescriptor, accessor: ResourceAccessor) -> BuildInputs:
    return BuildInputs(
        template_name=OPS_REQUEST_TEMPLATE,
        gvr=OPS_REQUEST_GVR,
        operation=op,
        complete=lambda: complete_operation(op, accessor),
        validate=lambda: validate_operation(op, accessor),
    )


def _render_options(op: OperationDescriptor) -> Dict[str, Any]:
    options = op.to_options()
    if op.ops_type == OpsType.RECONFIGURING and options["urlPath"]:
        path = Path(options["urlPath"])
        try:
            options["fileContent"] = path.read_text()
        except OSError as e:
            raise SubmissionError(f"failed to read {path}: {e}") from e
        options["cfgFile"] = options["cfgFile"] or path.name
    return options


def render(template_name: str, gvr: GroupVersionResource, op: OperationDescriptor) -> Dict[str, Any]:
    """Render the record for ``op`` and parse it into a dictionary.

    Raises:
        SubmissionError: If the template is missing, broken or cannot be rendered
    """
    env = Environment(
        loader=FileSystemLoader(get_template_path()),
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined
    )
    try:
        template = env.get_template(template_name)
        text = template.render(options=_render_options(op), api_version=gvr.api_version)
    except TemplateNotFound as e:
        raise SubmissionError(f"request template not found: {e}") from e
    except TemplateSyntaxError as e:
        raise SubmissionError(f"template syntax error: {e}") from e
    except UndefinedError as e:
        raise SubmissionError(f"missing required template variable: {e}") from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SubmissionError(f"rendered request is not valid YAML: {e}") from e


def run(inputs: BuildInputs, accessor: ResourceAccessor, confirm_func: ConfirmFunc = confirm) -> Dict[str, Any]:
    """Complete, validate, confirm, render and create one request."""
    op = inputs.operation
    inputs.complete()
    inputs.validate()
    if not confirm_func([op.name]):
        raise ConfirmationDeclined(f"{op.ops_type.value} of cluster {op.name} cancelled")
    op.seal()

    body = render(inputs.template_name, inputs.gvr, op)
    try:
        created = accessor.create(inputs.gvr, op.namespace, body)
    except OperationError as e:
        raise SubmissionError(f"failed to create {inputs.gvr.resource}: {e}") from e
    logger.info(f"✅ {created.get('kind', 'OpsRequest')} {created['metadata']['name']} created")
    return created


def build_and_submit(op: OperationDescriptor, accessor: ResourceAccessor,
                     confirm_func: ConfirmFunc = confirm) -> Dict[str, Any]:
    return run(build_operation_inputs(op, accessor), accessor, confirm_func)
