"""
Tests for synthetic geo generation.
"""

import pandas as pd
import numpy as np

from data_simulation.generators import SimpleGeoGenerator, GeoConfig


class TestSimpleGeoGenerator:
    """Test cases for SimpleGeoGenerator."""

    def test_default_generation(self):
        """Test generation with default config."""
        geos = SimpleGeoGenerator().generate()

        assert list(geos.columns) == ['geo', 'volume', 'proportion']
        assert len(geos) == 20
        assert geos['geo'].is_unique

    def test_sorted_by_volume(self):
        """Test that geos come in decreasing volume."""
        geos = SimpleGeoGenerator(GeoConfig(n_geos=30, seed=1)).generate()

        assert geos['volume'].is_monotonic_decreasing

    def test_proportions(self):
        """Test that proportions are volume shares."""
        geos = SimpleGeoGenerator(GeoConfig(n_geos=15, seed=7)).generate()

        assert np.isclose(geos['proportion'].sum(), 1.0)
        assert (geos['volume'] >= 100).all()

    def test_reproducibility(self):
        """Test that same seed produces same geos."""
        config = GeoConfig(n_geos=12, seed=123)

        geos1 = SimpleGeoGenerator(config).generate()
        geos2 = SimpleGeoGenerator(config).generate()

        pd.testing.assert_frame_equal(geos1, geos2)
