"""
Configuration classes for stratified design pipeline.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Tuple

import pandas as pd


@dataclass
class StrataConfig:
    """
    Configuration for building and checking a stratified design.

    The group ratios define the stratum size; when left as None every group
    gets ratio 1, so the stratum size equals n_groups.
    """

    # Design parameters
    n_groups: int = 2
    group_ratios: Optional[Tuple[int, ...]] = None

    # Geo ordering
    sort_by: Optional[str] = 'volume'
    ascending: bool = False

    # Reporting parameters
    show_warnings: bool = True
    log_scale: bool = False

    def resolved_group_ratios(self) -> Tuple[int, ...]:
        """Group ratios with the equal-ratio default filled in."""
        if self.group_ratios is None:
            return (1,) * self.n_groups
        return tuple(self.group_ratios)

    def build(self, geos: pd.DataFrame, geo_group=None):
        """Build a GeoStrata object from geos using this configuration."""
        from stratification.strata import GeoStrata
        return GeoStrata(
            geos,
            n_groups=self.n_groups,
            group_ratios=self.resolved_group_ratios(),
            geo_group=geo_group,
            sort_by=self.sort_by,
            ascending=self.ascending
        )

    def update(self, **kwargs) -> 'StrataConfig':
        """
        Create a new config with updated parameters.

        Args:
            **kwargs: Parameters to update

        Returns:
            New StrataConfig instance with updated parameters
        """
        params = asdict(self)
        params.update(kwargs)
        return StrataConfig(**params)
