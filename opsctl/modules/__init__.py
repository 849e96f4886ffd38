"""
Operation request modules: descriptors, validation, control plane access and
request rendering.
"""
from .accessor import GroupVersionResource, KubeResourceAccessor, ResourceAccessor
from .builder import build_and_submit, render
from .models import (
    HorizontalScaleOperation,
    OperationDescriptor,
    OpsType,
    ReconfigureOperation,
    RestartOperation,
    UpgradeOperation,
    VerticalScaleOperation,
    VolumeExpandOperation,
    new_operation,
)
from .validate import complete_operation, validate_operation

__all__ = [
    'GroupVersionResource',
    'KubeResourceAccessor',
    'ResourceAccessor',
    'build_and_submit',
    'render',
    'OperationDescriptor',
    'OpsType',
    'RestartOperation',
    'UpgradeOperation',
    'VerticalScaleOperation',
    'HorizontalScaleOperation',
    'VolumeExpandOperation',
    'ReconfigureOperation',
    'new_operation',
    'complete_operation',
    'validate_operation',
]
