"""
Stratification of geos for randomized geo-experiments.

This module provides functions for dividing ordered geos into strata and
for counting how many distinct randomizations a design allows.
"""

from .errors import PreconditionError, InvalidGroupIdError, CapacityExceededWarning
from .strata import GeoStrata, generate_strata, FREE, EXCLUDED
from .counting import (
    is_stratum_compatible_with_ratios,
    count_randomizations_in_stratum,
    count_randomizations,
    is_fixed_randomization,
    log_sum_exp
)
from .stratified_utils import summarize_strata, print_strata_summary

__all__ = [
    'GeoStrata',
    'generate_strata',
    'FREE',
    'EXCLUDED',
    'is_stratum_compatible_with_ratios',
    'count_randomizations_in_stratum',
    'count_randomizations',
    'is_fixed_randomization',
    'log_sum_exp',
    'summarize_strata',
    'print_strata_summary',
    'PreconditionError',
    'InvalidGroupIdError',
    'CapacityExceededWarning'
]
