"""
Data simulation library for geo-experiment designs.

This module provides functions to generate synthetic geos for trying
out stratification schemes.
"""

from .generators import SimpleGeoGenerator, GeoConfig

__all__ = ['SimpleGeoGenerator', 'GeoConfig']
