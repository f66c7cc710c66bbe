#!/usr/bin/env python3
"""``fieldimage`` vegetation pipeline runner.

Usage:
    python scripts/run_fieldimage_pipeline.py scripts/user_config.py
    python scripts/run_fieldimage_pipeline.py scripts/user_config.py --image rgb_ex2.tif
    python scripts/run_fieldimage_pipeline.py scripts/user_config.py --no-plots -v

Note: User config in scripts/user_config.py, expert defaults in fieldimage.schemas.param
"""

import argparse

from fieldimage.cli import run_fieldimage_pipeline


def main():
    parser = argparse.ArgumentParser(description="Extract vegetation from a drone orthomosaic")
    parser.add_argument("config", help="Path to user config file")
    parser.add_argument("--image", help="Override orthomosaic path")
    parser.add_argument("--table", help="Override per-plot table path")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--no-plots", action="store_true", help="Skip figures")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    run_fieldimage_pipeline(
        args.config,
        cli_args={
            "image_path": args.image,
            "table_path": args.table,
            "base_dir": args.base_dir,
            "no_plots": args.no_plots or None,
        },
        verbose=args.verbose,
    )


if __name__ == "__main__":
    main()
