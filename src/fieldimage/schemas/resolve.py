"""Merge the config layers into one InternalConfig.

CLI overrides beat the user file, which beats the expert defaults.
"""

from typing import Optional, Type, Union

from fieldimage.schemas.base import FieldImageBaseModel
from fieldimage.schemas.param import ParamConfig
from fieldimage.schemas.user import UserConfig
from fieldimage.schemas.cli import CLIConfig
from fieldimage.schemas.internal import InternalConfig


# the band mapping is replaced as a whole: {3: "R"} must not inherit 1 and 2
ATOMIC_KEYS = frozenset({"mapping"})


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Overlay ``overrides`` on ``base``, left to right.

    Nested dicts merge recursively except under ATOMIC_KEYS.

    >>> deep_merge({"stretch": {"low": 0.02, "high": 0.98}}, {"stretch": {"low": 0.05}})
    {'stretch': {'low': 0.05, 'high': 0.98}}
    """
    result = base.copy()
    for override in overrides:
        for key, value in override.items():
            nested = isinstance(result.get(key), dict) and isinstance(value, dict)
            if nested and key not in ATOMIC_KEYS:
                result[key] = deep_merge(result[key], value)
            else:
                result[key] = value
    return result


def _as_model(cfg, model: Type[FieldImageBaseModel]):
    if cfg is None or (isinstance(cfg, dict) and not cfg):
        return model()
    if isinstance(cfg, model):
        return cfg
    return model.model_validate(cfg)


def resolve_config(
    param_cfg: Union[dict, ParamConfig],
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Validated, frozen runtime config from the param, user and CLI layers.

    Raises ``pydantic.ValidationError`` when a layer or the merged result is
    invalid (e.g. ``low >= high`` after merging).

    >>> config = resolve_config(ParamConfig(), UserConfig(hue_quantile=0.8))
    >>> config.classifier.quantile
    0.8
    """
    param = _as_model(param_cfg, ParamConfig)
    user = _as_model(user_cfg, UserConfig)
    cli = _as_model(cli_cfg, CLIConfig)

    merged = deep_merge(
        param.model_dump(),
        user.to_internal_overrides(),
        cli.to_internal_overrides(),
    )
    return InternalConfig.model_validate(merged)
