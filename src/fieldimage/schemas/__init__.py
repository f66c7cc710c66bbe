"""Pydantic configuration schemas for the fieldimage pipeline.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from fieldimage.schemas.resolve import resolve_config
from fieldimage.schemas.internal import InternalConfig
from fieldimage.schemas.param import ParamConfig
from fieldimage.schemas.user import UserConfig
from fieldimage.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
