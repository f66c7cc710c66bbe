"""Static figures of processed orthomosaics."""

from .plotter import FieldPlotter

__all__ = ['FieldPlotter']
