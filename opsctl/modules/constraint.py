"""Validation of updated parameters against a config constraint."""
import copy
import logging
from typing import Any, Dict

from jsonschema import Draft7Validator, SchemaError, ValidationError, validate

from .models import ConfigConstraint
from ..errors import SchemaViolationError

logger = logging.getLogger("opsctl.constraint")

_TRUE = ("true", "on", "yes", "1")
_FALSE = ("false", "off", "no", "0")


def _declared_types(prop: Dict[str, Any]):
    declared = prop.get("type", [])
    return [declared] if isinstance(declared, str) else list(declared)


def coerce_value(key: str, value: str, prop: Dict[str, Any]) -> Any:
    """Convert a command line string into the type the schema declares."""
    types = _declared_types(prop)
    if not types or "string" in types:
        return value
    try:
        if "integer" in types:
            return int(value)
        if "number" in types:
            return float(value)
    except ValueError:
        raise SchemaViolationError(f"parameter[{key}] expects {types[0]}, got \"{value}\"") from None
    if "boolean" in types:
        if value.lower() in _TRUE:
            return True
        if value.lower() in _FALSE:
            return False
        raise SchemaViolationError(f"parameter[{key}] expects boolean, got \"{value}\"")
    return value


def _parameter_schema(constraint: ConfigConstraint) -> Dict[str, Any]:
    schema = copy.deepcopy(constraint.json_schema)
    top = constraint.top_level_name
    if top and top in schema.get("properties", {}):
        schema = schema["properties"][top]
    # Only the updated parameters are checked, so nothing is required.
    schema.pop("required", None)
    return schema


def validate_parameters(constraint: ConfigConstraint, file_name: str,
                        key_values: Dict[str, str]) -> Dict[str, Any]:
    """
    Check updated parameters of one config file against its constraint.

    Args:
        constraint: The config constraint of the selected template
        file_name: The config file (config map key) being updated
        key_values: Parameters to update, as given on the command line

    Returns:
        The parameters converted to the types declared by the schema

    Raises:
        SchemaViolationError: If any parameter is rejected
    """
    for key in key_values:
        if key in constraint.immutable_parameters:
            raise SchemaViolationError(f"parameter[{key}] is immutable, cannot be updated")

    if not constraint.json_schema:
        logger.warning(f"Config constraint {constraint.name} has no schema, skipping parameter validation")
        return dict(key_values)

    schema = _parameter_schema(constraint)
    properties = schema.get("properties", {})
    params = {k: coerce_value(k, v, properties.get(k, {})) for k, v in key_values.items()}
    try:
        validate(instance=params, schema=schema, cls=Draft7Validator)
    except ValidationError as ve:
        raise SchemaViolationError(f"failed to validate updated params of [{file_name}]: {ve.message}") from ve
    except SchemaError as se:
        raise SchemaViolationError(f"config constraint {constraint.name} has an invalid schema: {se.message}") from se
    logger.debug(f"Updated params of {file_name} passed constraint {constraint.name}")
    return params
