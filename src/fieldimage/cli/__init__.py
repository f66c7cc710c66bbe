"""Command-line interface modules for fieldimage pipeline execution.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from fieldimage.cli.run_fieldimage import run_fieldimage_pipeline

__all__ = ['run_fieldimage_pipeline']
