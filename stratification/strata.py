"""
Stratum generation for geo-experiment designs.

Geos are kept in their ordering (usually decreasing volume) and cut into
consecutive blocks of ``sum(group_ratios)`` geos. Each block is a stratum
inside which the geos are later randomized into groups. Geos fixed to group
``0`` are excluded from the scheme and get stratum ``0``.
"""

from typing import Iterator, Optional, Sequence, Tuple, Union, Mapping

import numpy as np
import pandas as pd

from .errors import InvalidGroupIdError, PreconditionError

# Sentinels of the geo_group column.
FREE = pd.NA
EXCLUDED = 0


def _is_integer_valued(value) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, (int, np.integer)):
        return True
    if isinstance(value, (float, np.floating)):
        return bool(np.isfinite(value)) and float(value).is_integer()
    return False


def as_geo_group(values) -> pd.Series:
    """
    Convert a sequence of geo group values to a nullable integer Series.

    Free geos may be given as None, NaN or pd.NA; they become pd.NA.

    Args:
        values: Sequence (list, array or Series) of group values

    Returns:
        Series of dtype 'Int64' with a fresh RangeIndex

    Raises:
        PreconditionError: If some value is not an integer or missing
    """
    try:
        if isinstance(values, pd.Series):
            return values.astype('Int64').reset_index(drop=True)
        return pd.Series(list(values), dtype='Int64')
    except (TypeError, ValueError) as err:
        raise PreconditionError(f"geo_group values must be integers or missing: {err}") from err


def validate_group_ratios(group_ratios: Sequence[int],
                          n_groups: Optional[int] = None) -> Tuple[int, ...]:
    """
    Check a vector of group ratios and return it as a tuple of ints.

    Args:
        group_ratios: Positive integer ratios, one per group
        n_groups: Expected number of groups, if known

    Returns:
        Tuple of ints

    Raises:
        PreconditionError: If the ratios are empty, non-integer, non-positive
            or do not match n_groups
    """
    ratios = list(np.ravel(np.asarray(group_ratios, dtype=object)))
    if len(ratios) == 0:
        raise PreconditionError("group_ratios must contain at least one ratio")

    if not all(_is_integer_valued(r) for r in ratios):
        raise PreconditionError(f"group_ratios must be integer-valued, got {ratios}")

    if any(r < 1 for r in ratios):
        raise PreconditionError(f"group_ratios must all be >= 1, got {ratios}")

    if n_groups is not None and len(ratios) != n_groups:
        raise PreconditionError(
            f"group_ratios must have length n_groups ({n_groups}), got {len(ratios)}"
        )

    return tuple(int(r) for r in ratios)


def generate_strata(geo_group, group_ratios: Sequence[int]) -> np.ndarray:
    """
    Generate stratum numbers along an ordered vector of geo groups.

    Every geo not fixed to group 0 is assignable. Assignable geos are
    numbered in consecutive blocks of ``sum(group_ratios)``, starting from 1;
    only the last block may be smaller. Excluded geos get stratum 0.

    For example, with geo groups ``NA, 0, NA, NA, NA, ...`` and ratios
    ``(2, 1)`` the strata are ``1, 0, 1, 1, 2, 2, 2, 3, ...``.

    Args:
        geo_group: Ordered group values (free, 0 or a group id), one per geo
        group_ratios: Positive integer ratios of the group sizes

    Returns:
        Integer array of the same length as geo_group
    """
    stratum_size = sum(validate_group_ratios(group_ratios))
    groups = as_geo_group(geo_group)

    assignable = (groups.fillna(-1) != EXCLUDED).to_numpy(dtype=bool)
    strata = np.zeros(len(groups), dtype=int)

    n_assignable = int(assignable.sum())
    if n_assignable >= 1:
        strata[assignable] = np.arange(n_assignable) // stratum_size + 1

    return strata


class GeoStrata:
    """
    Geos divided into strata for stratified randomization.

    The geos are ordered by their volume (or any other column) and divided
    into strata of size ``sum(group_ratios)``. The ``geo_group`` column fixes
    individual geos to groups: missing means the geo is free to be
    randomized, 0 excludes the geo from the scheme (stratum 0), and
    ``1..n_groups`` pins the geo to that group.

    The ratios do not have to be reduced: ``(4, 2)`` gives a 2:1 split with
    stratum size 6, while ``(2, 1)`` gives the same split with stratum size 3.
    """

    FIRST_COLUMNS = ['geo', 'stratum', 'geo_group', 'proportion', 'volume']

    def __init__(self, geos: pd.DataFrame, n_groups: int = 2,
                 group_ratios: Optional[Sequence[int]] = None,
                 geo_group: Optional[Union[Mapping, pd.Series]] = None,
                 sort_by: Optional[str] = 'volume', ascending: bool = False):
        """
        Initialize the strata.

        Args:
            geos: DataFrame with one row per geo (must have 'geo' column)
            n_groups: Number of groups, at least 2 and at most the number of geos
            group_ratios: Ratios of the group sizes. If None, all groups are equal.
            geo_group: Optional mapping geo -> group value used to fix geos
            sort_by: Column defining the geo ordering. If None, keeps row order.
            ascending: Sort direction for sort_by

        Raises:
            PreconditionError: If the inputs are malformed
            InvalidGroupIdError: If geo_group refers to groups > n_groups
        """
        if not isinstance(geos, pd.DataFrame):
            raise PreconditionError("geos must be a pandas DataFrame")

        if 'geo' not in geos.columns:
            raise PreconditionError("geos must contain 'geo' column")

        duplicated = geos.loc[geos['geo'].duplicated(), 'geo'].unique().tolist()
        if duplicated:
            raise PreconditionError(f"Duplicated geos: {duplicated}")

        n_geos = len(geos)
        if not _is_integer_valued(n_groups) or n_groups < 2:
            raise PreconditionError(f"n_groups must be an integer >= 2, got {n_groups!r}")
        n_groups = int(n_groups)

        if n_groups > n_geos:
            raise PreconditionError(
                f"n_groups ({n_groups}) must not exceed the number of geos ({n_geos})"
            )

        if group_ratios is None:
            group_ratios = (1,) * n_groups
        ratios = validate_group_ratios(group_ratios, n_groups=n_groups)

        if sum(ratios) > n_geos:
            raise PreconditionError(
                f"Stratum size sum(group_ratios) = {sum(ratios)} exceeds the number of geos ({n_geos})"
            )

        df = geos.drop(columns=['stratum', 'geo_group'], errors='ignore')
        if sort_by is not None:
            if sort_by not in df.columns:
                raise PreconditionError(f"geos must contain sort column '{sort_by}'")
            df = df.sort_values(sort_by, ascending=ascending, kind='mergesort')
        df = df.reset_index(drop=True)

        self.n_groups = n_groups
        self.group_ratios = ratios

        df['geo_group'] = pd.array(self._resolve_geo_group(df['geo'], geo_group), dtype='Int64')
        df['stratum'] = generate_strata(df['geo_group'], ratios)

        first_cols = [col for col in self.FIRST_COLUMNS if col in df.columns]
        other_cols = [col for col in df.columns if col not in first_cols]
        self.data = df[first_cols + other_cols]

    def _resolve_geo_group(self, geo_ids: pd.Series, geo_group) -> list:
        """Turn a geo -> group mapping into a list aligned with geo_ids."""
        if geo_group is None or len(geo_group) == 0:
            return [FREE] * len(geo_ids)

        fixes = dict(geo_group.items())
        known = set(geo_ids)
        unknown = [geo for geo in fixes if geo not in known]
        if unknown:
            raise PreconditionError(f"Unknown geos in geo_group: {unknown}")

        invalid = []
        for geo, value in fixes.items():
            if pd.isna(value):
                fixes[geo] = FREE
                continue
            if not _is_integer_valued(value):
                raise PreconditionError(f"Group of geo {geo!r} must be an integer, got {value!r}")
            fixes[geo] = int(value)
            if not 0 <= fixes[geo] <= self.n_groups:
                invalid.append(fixes[geo])

        if invalid:
            raise InvalidGroupIdError(invalid, self.n_groups)

        return [fixes.get(geo, FREE) for geo in geo_ids]

    @property
    def stratum_size(self) -> int:
        return sum(self.group_ratios)

    @property
    def n_geos(self) -> int:
        return len(self.data)

    @property
    def n_strata(self) -> int:
        """Number of non-zero strata."""
        if self.n_geos == 0:
            return 0
        return int(self.data['stratum'].max())

    @property
    def geo_group(self) -> pd.Series:
        """Group values indexed by geo."""
        return self.data.set_index('geo')['geo_group']

    def set_geo_group(self, geo_group: Union[Mapping, pd.Series]) -> 'GeoStrata':
        """
        Create new strata with some geos fixed (or released) to groups.

        Existing fixes are kept unless overridden. Strata are regenerated, so
        geos moved to or from group 0 change the stratum numbering.

        Args:
            geo_group: Mapping geo -> group value (missing releases the geo)

        Returns:
            New GeoStrata instance; this one is unchanged
        """
        fixes = dict(zip(self.data['geo'], self.data['geo_group']))
        fixes.update(dict(geo_group.items()))
        geos = self.data.drop(columns=['stratum', 'geo_group'])
        return GeoStrata(geos, n_groups=self.n_groups, group_ratios=self.group_ratios,
                         geo_group=fixes, sort_by=None)

    def iter_strata(self) -> Iterator[Tuple[int, pd.Series]]:
        """
        Iterate over the non-zero strata in increasing order.

        Yields:
            Tuples of (stratum id, geo_group Series of the geos in the stratum)
        """
        included = self.data[self.data['stratum'] != 0]
        for stratum_id, rows in included.groupby('stratum', sort=True):
            yield int(stratum_id), rows['geo_group'].reset_index(drop=True)

    def __len__(self) -> int:
        return self.n_geos

    def __repr__(self) -> str:
        return (f"GeoStrata(n_geos={self.n_geos}, n_groups={self.n_groups}, "
                f"group_ratios={self.group_ratios}, n_strata={self.n_strata})")
