"""Core field imagery pipeline execution logic.

This module contains the actual pipeline runner, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import json
import logging
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any

from fieldimage.setup_directories import setup_output_directories, get_log_path
from fieldimage.pipeline.processor import VegetationProcessor
from fieldimage.visualization.plotter import FieldPlotter
from fieldimage.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(level: str, log_path: Optional[Path] = None) -> None:
    """Configure the root logger with console and (optional) file handlers.

    Existing root handlers are replaced so repeated runs in one interpreter
    do not duplicate output.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    if log_path is not None:
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    logger.info("Logging: level=%s, file=%s", logging.getLevelName(log_level), log_path)


def run_fieldimage_pipeline(
    user_config_path: str,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False
) -> dict:
    """Execute the field imagery pipeline on one orthomosaic.

    This is the core pipeline execution function. It:
    1. Loads and resolves configuration (Param < User < CLI)
    2. Sets up output directories and logging
    3. Runs the VegetationProcessor on the configured orthomosaic
    4. Writes figures unless visualization is disabled

    Parameters
    ----------
    user_config_path : str
        Path to user config file (Python file with CONFIG dict).

    cli_args : dict, optional
        CLI argument overrides. Keys: image_path, table_path, base_dir,
        log_level, no_plots. All optional.

    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    dict
        Processor result (``raster``, ``vegetation``, ``plots``, ``outputs``)
        with an extra ``figures`` entry.

    Raises
    ------
    FileNotFoundError
        If the config, orthomosaic or plot table does not exist.
    ValueError
        If configuration validation fails or no orthomosaic is configured.

    Examples
    --------
    Run with user config only::

        run_fieldimage_pipeline("scripts/user_config.py")

    Run with CLI overrides::

        run_fieldimage_pipeline(
            "scripts/user_config.py",
            cli_args={"image_path": "rgb_ex2.tif", "no_plots": True},
        )
    """
    param_cfg = ParamConfig()

    user_cfg_dict = load_user_config_dict(user_config_path)
    user_cfg = UserConfig.model_validate(user_cfg_dict)

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    image_path = config.inputs.image_path
    if image_path is None:
        raise ValueError("No orthomosaic configured: set IMAGE_PATH or pass --image")

    output_dirs = setup_output_directories(config.inputs.base_dir)
    setup_logging(config.logging.level, get_log_path(output_dirs, image_path))

    print(f"\n{'='*60}")
    print("Field Imagery Vegetation Pipeline")
    print('='*60)
    print(f"Config: {user_config_path}")
    print(f"Image:  {image_path}")
    print(f"Table:  {config.inputs.table_path}")
    print(f"Output: {output_dirs['base']}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(mode="json"), indent=2))
        print('='*60)

    processor = VegetationProcessor(config, output_dirs)
    result = processor.process_file(image_path, config.inputs.table_path)

    result["figures"] = {}
    if config.visualization.enabled:
        plotter = FieldPlotter(config)
        result["figures"] = plotter.plot_all(
            result["raster"], result["vegetation"], result["plots"], image_path, output_dirs
        )

    plots = result["plots"]
    if plots is not None:
        logger.info("Mean vegetation fraction over %d plots: %.3f",
                    len(plots), float(plots["vegetation_fraction"].mean()))
    logger.info("Pipeline finished: %s", Path(image_path).name)
    return result
