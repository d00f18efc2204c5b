"""Models for viber00t."""

from .config import (
    EffectiveConfig,
    GlobalConfig,
    InstallBlock,
    PortMapping,
    ProjectConfig,
    ProjectSection,
    VolumeMount,
)
from .environment import EnvironmentName, EnvironmentProfile
from .image import BuildStateRecord, CleanupResult, ImageReference, LaunchSpec, Mount

__all__ = [
    'EffectiveConfig',
    'GlobalConfig',
    'InstallBlock',
    'PortMapping',
    'ProjectConfig',
    'ProjectSection',
    'VolumeMount',
    'EnvironmentName',
    'EnvironmentProfile',
    'BuildStateRecord',
    'CleanupResult',
    'ImageReference',
    'LaunchSpec',
    'Mount',
]
