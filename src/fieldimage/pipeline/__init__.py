"""Pipeline modules.

- processor: runs one orthomosaic through all stages and persists results
"""

from fieldimage.pipeline.processor import VegetationProcessor

__all__ = [
    "VegetationProcessor",
]
