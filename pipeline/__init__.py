"""
Pipeline orchestration for stratified geo-experiment designs.

This module provides high-level interfaces for building a design from
a table of geos and summarizing its randomization space.
"""

from .runner import StrataDesignRunner
from .config import StrataConfig

__all__ = ['StrataDesignRunner', 'StrataConfig']
