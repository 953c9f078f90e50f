"""
Counting the possible randomizations of geo strata.

Within a stratum, every group k receives exactly ``group_ratios[k]`` geos.
Geos already fixed to a group use up part of that capacity; the free geos are
distributed over what remains. The number of distinct outcomes grows like a
multinomial coefficient, so all counting is done on the natural-log scale.
"""

import functools
import warnings
from typing import Iterable, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.special import gammaln, logsumexp

from .errors import CapacityExceededWarning, InvalidGroupIdError, PreconditionError
from .strata import GeoStrata, as_geo_group, validate_group_ratios


def log_sum_exp(log_values: Iterable[float]) -> float:
    """
    Sum values given on the log scale, returning the log of the sum.

    An empty input, or one where every value is -inf, sums to 0 (-inf).
    """
    log_values = np.asarray(list(log_values), dtype=float)
    if log_values.size == 0 or np.all(np.isneginf(log_values)):
        return -np.inf
    return float(logsumexp(log_values))


def log_multinomial(sizes: Sequence[int]) -> float:
    """log(n! / prod(k!)) where n = sum(sizes)."""
    sizes = np.asarray(sizes, dtype=float)
    return float(gammaln(sizes.sum() + 1) - np.sum(gammaln(sizes + 1)))


def _tabulate_groups(geo_group, group_ratios) -> Tuple[np.ndarray, np.ndarray, int]:
    """
    Validate a stratum and count its geos per group.

    Returns:
        Tuple of (ratios array, fixed geos per group, number of free geos)

    Raises:
        InvalidGroupIdError: If some fixed group is outside 1..n_groups
    """
    ratios = np.asarray(validate_group_ratios(group_ratios), dtype=int)
    n_groups = len(ratios)

    groups = as_geo_group(geo_group)
    fixed = groups.dropna().to_numpy(dtype=int)

    invalid = fixed[(fixed < 1) | (fixed > n_groups)]
    if invalid.size > 0:
        raise InvalidGroupIdError(invalid, n_groups)

    counts = np.bincount(fixed - 1, minlength=n_groups)
    n_free = int(groups.isna().sum())
    return ratios, counts, n_free


def is_stratum_compatible_with_ratios(geo_group, group_ratios: Sequence[int]) -> bool:
    """
    Check whether a stratum is compatible with the group ratios.

    Args:
        geo_group: Group values of the geos in one stratum (missing values
            are free geos; 0 is not allowed, excluded geos have no stratum)
        group_ratios: Positive integer ratios of the group sizes

    Returns:
        True if no group has more fixed geos than its ratio allows

    Raises:
        InvalidGroupIdError: Listing every group id outside 1..n_groups
    """
    ratios, counts, _ = _tabulate_groups(geo_group, group_ratios)
    return bool(np.all(ratios - counts >= 0))


def count_randomizations_in_stratum(geo_group, group_ratios: Sequence[int],
                                    log_scale: bool = True) -> float:
    """
    Count the possible randomizations of a single stratum.

    The free geos are assigned to the capacity each group has left after the
    fixed geos. Slots of the same group are interchangeable, so the count is
    the number of distinct geo -> group outcomes. A stratum that is already
    over capacity has no valid outcome and counts 0 (-inf on the log scale).

    Args:
        geo_group: Group values of the geos in one stratum (missing values
            are free geos; 0 is not allowed)
        group_ratios: Positive integer ratios of the group sizes
        log_scale: If True, returns the natural log of the count

    Returns:
        Number of randomizations (or its log)

    Raises:
        InvalidGroupIdError: Listing every group id outside 1..n_groups
        PreconditionError: If the stratum has more geos than sum(group_ratios)
    """
    ratios, counts, n_free = _tabulate_groups(geo_group, group_ratios)

    n_geos = n_free + int(counts.sum())
    if n_geos > ratios.sum():
        raise PreconditionError(
            f"Stratum has {n_geos} geos but sum(group_ratios) is {int(ratios.sum())}"
        )

    remaining = ratios - counts
    if np.any(remaining < 0):
        log_count = -np.inf
    else:
        log_count = _log_count_assignments(n_free, tuple(int(r) for r in remaining))

    if log_scale:
        return float(log_count)
    return float(np.exp(log_count))


def _log_count_assignments(n_free: int, remaining: Tuple[int, ...]) -> float:
    """log of the number of ways to put n_free geos into the remaining slots."""

    @functools.lru_cache(maxsize=None)
    def choose(x: int, amongst: Tuple[int, ...]) -> float:
        available = [n for n in amongst if n > 0]
        if x == 0:
            return 0.0
        if not available:
            return -np.inf
        if x == 1:
            # Any group with a free slot can take the last geo.
            return float(np.log(len(available)))
        if x == sum(available):
            return log_multinomial(available)
        # Fewer geos than slots: e.g. 3 geos for ratios (4, 2, 1, 1). Give the
        # next geo to each available group in turn and add up the outcomes.
        branches = [
            choose(x - 1, amongst[:i] + (n - 1,) + amongst[i + 1:])
            for i, n in enumerate(amongst) if n > 0
        ]
        return log_sum_exp(branches)

    return choose(n_free, remaining)


def count_randomizations(geostrata: GeoStrata, show_warnings: bool = True,
                         log_scale: bool = False) -> pd.Series:
    """
    Count the possible randomizations of every stratum of a design.

    Args:
        geostrata: GeoStrata object
        show_warnings: If True, warns when strata are not compatible with
            the group ratios
        log_scale: If True, returns the counts on the log scale

    Returns:
        Series of counts indexed by stratum id (stratum 0 is left out).
        Incompatible strata count 0 (-inf on the log scale).
    """
    group_ratios = geostrata.group_ratios

    counts = {}
    incompatible = []
    for stratum_id, geo_group in geostrata.iter_strata():
        if not is_stratum_compatible_with_ratios(geo_group, group_ratios):
            incompatible.append(stratum_id)
        counts[stratum_id] = count_randomizations_in_stratum(
            geo_group, group_ratios, log_scale=log_scale
        )

    if show_warnings and incompatible:
        ids = ', '.join(str(s) for s in incompatible)
        noun, verb = ('Stratum', 'is') if len(incompatible) == 1 else ('Strata', 'are')
        warnings.warn(
            f"{noun} {ids} {verb} not compatible with group_ratios {group_ratios}",
            CapacityExceededWarning,
            stacklevel=2
        )

    result = pd.Series(list(counts.values()), index=pd.Index(list(counts.keys()), dtype=int),
                       dtype=float, name='randomizations')
    result.index.name = 'stratum'
    return result


def is_fixed_randomization(geostrata: GeoStrata) -> bool:
    """
    Test if randomizing the strata can lead to only a single outcome.

    Args:
        geostrata: GeoStrata object

    Returns:
        True if every stratum has exactly one possible randomization
    """
    for _, geo_group in geostrata.iter_strata():
        log_count = count_randomizations_in_stratum(
            geo_group, geostrata.group_ratios, log_scale=True
        )
        if log_count != 0:
            return False
    return True
