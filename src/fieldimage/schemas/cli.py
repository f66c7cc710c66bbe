"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: input files, output directory, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from fieldimage.schemas.base import FieldImageBaseModel


class CLIConfig(FieldImageBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            image_path="rgb_ex1.tif",
            base_dir="/scratch/fieldimage_output",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    image_path: Optional[str] = None
    table_path: Optional[str] = None
    base_dir: Optional[str] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    no_plots: bool = False

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        inputs = {}
        if self.image_path is not None:
            inputs["image_path"] = self.image_path
        if self.table_path is not None:
            inputs["table_path"] = self.table_path
        if self.base_dir is not None:
            inputs["base_dir"] = str(self.base_dir)
        if inputs:
            overrides["inputs"] = inputs

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        if self.no_plots:
            overrides["visualization"] = {"enabled": False}

        return overrides
