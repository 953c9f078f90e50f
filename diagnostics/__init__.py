"""
Diagnostics and visualization library for stratified designs.

This module provides tools for visualizing strata and their randomizations.
"""

from .plots import DiagnosticPlotter

__all__ = ['DiagnosticPlotter']
