"""
Data models for cluster operation requests.

Every operation kind has its own descriptor class carrying only the fields
that kind understands. Records read back from the control plane (config
templates, config maps, config constraints) are parsed into pydantic models.
"""
from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class OpsType(str, Enum):
    """Operation kinds understood by the control plane."""
    RESTART = 'Restart'
    UPGRADE = 'Upgrade'
    VERTICAL_SCALING = 'VerticalScaling'
    HORIZONTAL_SCALING = 'HorizontalScaling'
    VOLUME_EXPANSION = 'VolumeExpansion'
    RECONFIGURING = 'Reconfiguring'


# Fields that may be set once and never changed afterwards.
_WRITE_ONCE = ('name', 'namespace')


@dataclass
class OperationDescriptor:
    """One requested operation against a cluster.

    ``name`` is the target cluster. Once ``seal()`` has been called the
    descriptor is read-only.
    """
    ops_type: ClassVar[OpsType]

    name: str = ''
    namespace: str = 'default'
    component_names: List[str] = field(default_factory=list)
    ops_request_name: str = ''
    ttl_seconds_after_succeed: int = 0

    def __setattr__(self, key: str, value: Any) -> None:
        if self.__dict__.get('_sealed'):
            raise AttributeError(f"operation is sealed, cannot set {key}")
        if key in _WRITE_ONCE and self.__dict__.get(key):
            raise AttributeError(f"{key} cannot be changed once set")
        super().__setattr__(key, value)

    def seal(self) -> None:
        """Freeze the descriptor after confirmation, including its lists and mappings."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, list):
                object.__setattr__(self, f.name, tuple(value))
            elif isinstance(value, dict):
                object.__setattr__(self, f.name, MappingProxyType(dict(value)))
        object.__setattr__(self, '_sealed', True)

    @property
    def sealed(self) -> bool:
        return bool(self.__dict__.get('_sealed'))

    def to_options(self) -> Dict[str, Any]:
        """Flatten the descriptor into the mapping used to render the request."""
        return {
            'name': self.name,
            'namespace': self.namespace,
            'opsRequestName': self.ops_request_name,
            'ttlSecondsAfterSucceed': self.ttl_seconds_after_succeed,
            'type': self.ops_type.value,
            'typeLower': self.ops_type.value.lower(),
            'componentNames': list(self.component_names),
        }


@dataclass
class RestartOperation(OperationDescriptor):
    ops_type: ClassVar[OpsType] = OpsType.RESTART


@dataclass
class UpgradeOperation(OperationDescriptor):
    ops_type: ClassVar[OpsType] = OpsType.UPGRADE

    cluster_version_ref: str = ''

    def to_options(self) -> Dict[str, Any]:
        options = super().to_options()
        options['clusterVersionRef'] = self.cluster_version_ref
        return options


@dataclass
class VerticalScaleOperation(OperationDescriptor):
    ops_type: ClassVar[OpsType] = OpsType.VERTICAL_SCALING

    # Resource quantities are passed through untouched.
    request_cpu: str = ''
    request_memory: str = ''
    limit_cpu: str = ''
    limit_memory: str = ''

    def to_options(self) -> Dict[str, Any]:
        options = super().to_options()
        options.update({
            'requestCPU': self.request_cpu,
            'requestMemory': self.request_memory,
            'limitCPU': self.limit_cpu,
            'limitMemory': self.limit_memory,
        })
        return options


@dataclass
class HorizontalScaleOperation(OperationDescriptor):
    ops_type: ClassVar[OpsType] = OpsType.HORIZONTAL_SCALING

    # -1 means the flag was never given.
    replicas: int = -1

    def to_options(self) -> Dict[str, Any]:
        options = super().to_options()
        options['replicas'] = self.replicas
        return options


@dataclass
class VolumeExpandOperation(OperationDescriptor):
    ops_type: ClassVar[OpsType] = OpsType.VOLUME_EXPANSION

    vct_names: List[str] = field(default_factory=list)
    storage: str = ''

    def to_options(self) -> Dict[str, Any]:
        options = super().to_options()
        options.update({
            'vctNames': list(self.vct_names),
            'storage': self.storage,
        })
        return options


@dataclass
class ReconfigureOperation(OperationDescriptor):
    ops_type: ClassVar[OpsType] = OpsType.RECONFIGURING

    parameters: List[str] = field(default_factory=list)
    key_values: Dict[str, str] = field(default_factory=dict)
    cfg_template_name: str = ''
    cfg_file: str = ''
    url_path: str = ''

    def to_options(self) -> Dict[str, Any]:
        options = super().to_options()
        options.update({
            'urlPath': self.url_path,
            'parameters': list(self.parameters),
            'keyValues': dict(self.key_values),
            'cfgTemplateName': self.cfg_template_name,
            'cfgFile': self.cfg_file,
        })
        return options


OPERATION_TYPES: Dict[OpsType, Type[OperationDescriptor]] = {
    OpsType.RESTART: RestartOperation,
    OpsType.UPGRADE: UpgradeOperation,
    OpsType.VERTICAL_SCALING: VerticalScaleOperation,
    OpsType.HORIZONTAL_SCALING: HorizontalScaleOperation,
    OpsType.VOLUME_EXPANSION: VolumeExpandOperation,
    OpsType.RECONFIGURING: ReconfigureOperation,
}


def new_operation(ops_type: OpsType, **kwargs) -> OperationDescriptor:
    """Create the descriptor class matching ``ops_type``."""
    return OPERATION_TYPES[OpsType(ops_type)](**kwargs)


# ----------------------------------------------------------------------
# Control plane records
# ----------------------------------------------------------------------


class ConfigTemplate(BaseModel):
    """A config template bound to a component definition."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    name: str
    template_ref: str = Field(default='', alias='configTplRef')
    namespace: str = ''
    volume_name: str = Field(default='', alias='volumeName')
    config_constraint_ref: Optional[str] = Field(default=None, alias='configConstraintRef')


class ConfigMapSnapshot(BaseModel):
    """Live configuration files of one component."""
    name: str
    namespace: str = ''
    data: Dict[str, str] = {}


class ConfigConstraint(BaseModel):
    """Schema describing the legal parameters of a config file."""
    model_config = ConfigDict(extra='ignore')

    name: str
    spec: Dict[str, Any] = {}

    @property
    def json_schema(self) -> Optional[Dict[str, Any]]:
        return (self.spec.get('configurationSchema') or {}).get('schema')

    @property
    def top_level_name(self) -> str:
        return self.spec.get('cfgSchemaTopLevelName', '')

    @property
    def immutable_parameters(self) -> List[str]:
        return list(self.spec.get('immutableParameters') or [])
