"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from fieldimage.schemas import ParamConfig, UserConfig, CLIConfig, InternalConfig
from fieldimage.schemas.resolve import deep_merge, resolve_config
from fieldimage.schemas.user import UserClassifierConfig, UserPlotGridConfig

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert config.bands.mapping == {1: "R", 2: "G", 3: "B"}
        assert config.stretch.low == 0.02
        assert config.stretch.high == 0.98
        assert config.classifier.quantile == 0.7
        assert config.denoiser.window_size == 3
        assert config.plots.corners is None
        assert (config.plots.nx, config.plots.ny) == (14, 9)

    def test_user_config_overrides_param_config(self):
        config = resolve_config(ParamConfig(), UserConfig(hue_quantile=0.8), None)

        assert config.classifier.quantile == 0.8

    def test_uppercase_aliases(self):
        user = UserConfig.model_validate({
            "IMAGE_PATH": "rgb_ex1.tif",
            "LOW_PERCENTILE": 0.05,
            "MODE_WINDOW": 5,
            "PLOT_GRID": (7, 3),
        })
        config = resolve_config(ParamConfig(), user, None)

        assert config.inputs.image_path == "rgb_ex1.tif"
        assert config.stretch.low == 0.05
        assert config.denoiser.window_size == 5
        assert (config.plots.nx, config.plots.ny) == (7, 3)

    def test_unknown_user_keys_ignored(self):
        user = UserConfig.model_validate({"SENSOR": "DJI Phantom 4", "HUE_QUANTILE": 1})
        config = resolve_config(ParamConfig(), user, None)

        assert config.classifier.quantile == 1.0

    def test_nested_user_sections(self):
        user = UserConfig(
            classifier=UserClassifierConfig(label_name="veg"),
            plots=UserPlotGridConfig(nx=2, ny=2, crs="EPSG:32618"),
        )
        config = resolve_config(ParamConfig(), user, None)

        assert config.classifier.label_name == "veg"
        assert config.classifier.quantile == 0.7
        assert config.plots.crs == "EPSG:32618"

    def test_band_mapping_replaced_not_merged(self):
        user = UserConfig(bands={"3": "R", "2": "G", "1": "B"})
        config = resolve_config(ParamConfig(), user, None)

        assert config.bands.mapping == {3: "R", 2: "G", 1: "B"}

    def test_band_mapping_missing_rgb_target_rejected(self):
        with pytest.raises(ValidationError, match="rgb bands"):
            resolve_config(ParamConfig(), UserConfig(bands={1: "R", 2: "G"}), None)

    def test_band_mapping_duplicate_target_rejected(self):
        user = UserConfig(bands={1: "R", 2: "R", 3: "G", 4: "B"})

        with pytest.raises(ValidationError, match=r"several bands to \['R'\]"):
            resolve_config(ParamConfig(), user, None)

    def test_param_band_mapping_duplicate_target_rejected(self):
        with pytest.raises(ValidationError, match="several bands"):
            ParamConfig.model_validate({"bands": {"mapping": {1: "R", 2: "G", 3: "B", 4: "B"}}})

    def test_precedence_cli_over_user(self):
        user = UserConfig(image_path="a.tif", base_dir="out_user", log_level="warning")
        cli = CLIConfig(image_path="b.tif")
        config = resolve_config(ParamConfig(), user, cli)

        assert config.inputs.image_path == "b.tif"
        assert config.inputs.base_dir == "out_user"
        assert config.logging.level == "WARNING"

    def test_cli_no_plots_disables_visualization(self):
        config = resolve_config(ParamConfig(), None, CLIConfig(no_plots=True))

        assert config.visualization.enabled is False

    def test_dict_inputs_accepted(self):
        config = resolve_config({}, {"HUE_QUANTILE": 0.6}, {"log_level": "DEBUG"})

        assert config.classifier.quantile == 0.6
        assert config.logging.level == "DEBUG"


class TestConfigValidation:
    """Invalid settings fail at resolution time, before any stage runs."""

    def test_low_percentile_above_high(self):
        with pytest.raises(ValidationError, match="below high"):
            resolve_config(ParamConfig(), UserConfig(low_percentile=0.9, high_percentile=0.1), None)

    def test_percentile_out_of_range(self):
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), UserConfig(high_percentile=1.5), None)

    def test_quantile_out_of_range(self):
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), UserConfig(hue_quantile=-0.2), None)

    def test_even_mode_window(self):
        with pytest.raises(ValidationError, match="odd"):
            resolve_config(ParamConfig(), UserConfig(mode_window=4), None)

    def test_internal_config_is_frozen(self, internal_config):
        with pytest.raises(ValidationError):
            internal_config.classifier = None

    def test_param_config_forbids_unknown_keys(self):
        with pytest.raises(ValidationError):
            ParamConfig.model_validate({"sensor": {}})


def test_deep_merge_nested():
    base = {"a": 1, "b": {"c": 2, "d": 3}}
    override = {"b": {"d": 4, "e": 5}, "f": 6}

    assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}


def test_deep_merge_atomic_mapping():
    base = {"bands": {"mapping": {1: "R", 2: "G"}}}
    override = {"bands": {"mapping": {5: "NIR"}}}

    assert deep_merge(base, override) == {"bands": {"mapping": {5: "NIR"}}}


def test_deep_merge_leaves_base_untouched():
    base = {"stretch": {"low": 0.02, "high": 0.98}}

    merged = deep_merge(base, {"stretch": {"low": 0.05}}, {"stretch": {"high": 0.9}})

    assert merged == {"stretch": {"low": 0.05, "high": 0.9}}
    assert base == {"stretch": {"low": 0.02, "high": 0.98}}


def test_resolve_config_accepts_models_and_empty_dicts(internal_config):
    assert resolve_config(ParamConfig(), {}, {}) == internal_config
    assert resolve_config({}, UserConfig(), CLIConfig()) == internal_config
