"""
Data generators for geo-experiment designs.
"""

import numpy as np
import pandas as pd
from typing import Optional
from dataclasses import dataclass


@dataclass
class GeoConfig:
    """Configuration for geo generation."""
    n_geos: int = 20
    seed: Optional[int] = None
    volume_mean: float = 10000
    volume_std: float = 3000
    min_volume: float = 100


class SimpleGeoGenerator:
    """
    Simple generator of synthetic geos.

    Generates a geo table with:
    - Unique geo identifiers
    - Normally distributed volumes (floored at min_volume)
    - The share of the total volume of each geo
    """

    def __init__(self, config: Optional[GeoConfig] = None):
        """
        Initialize the generator.

        Args:
            config: Configuration object. If None, uses defaults.
        """
        self.config = config or GeoConfig()

    def generate(self) -> pd.DataFrame:
        """
        Generate synthetic geos.

        Returns:
            DataFrame with columns ['geo', 'volume', 'proportion'], sorted
            by decreasing volume
        """
        if self.config.seed is not None:
            np.random.seed(self.config.seed)

        geo_ids = [f"geo_{i:03d}" for i in range(self.config.n_geos)]

        volume = np.random.normal(
            self.config.volume_mean,
            self.config.volume_std,
            self.config.n_geos
        )
        volume = np.maximum(volume, self.config.min_volume)

        geos = pd.DataFrame({
            'geo': geo_ids,
            'volume': volume,
            'proportion': volume / volume.sum()
        })

        return geos.sort_values('volume', ascending=False).reset_index(drop=True)
