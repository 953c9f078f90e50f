"""
Tests for pipeline module.
"""

import pytest
import pandas as pd
import numpy as np

from pipeline.config import StrataConfig
from pipeline.runner import StrataDesignRunner
from data_simulation.generators import GeoConfig
from stratification.strata import GeoStrata
from stratification.errors import CapacityExceededWarning


class TestStrataConfig:
    """Test cases for StrataConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        config = StrataConfig()

        assert config.n_groups == 2
        assert config.group_ratios is None
        assert config.sort_by == 'volume'
        assert config.resolved_group_ratios() == (1, 1)

    def test_config_update(self):
        """Test configuration update method."""
        config = StrataConfig()

        updated_config = config.update(n_groups=3, group_ratios=(2, 1, 1))

        # Original should be unchanged
        assert config.n_groups == 2
        assert config.group_ratios is None

        # Updated should have new values
        assert updated_config.n_groups == 3
        assert updated_config.resolved_group_ratios() == (2, 1, 1)
        assert updated_config.sort_by == 'volume'  # Unchanged value

    def test_build(self):
        """Test building GeoStrata from a config."""
        geos = pd.DataFrame({'geo': list('abcdef'), 'volume': np.arange(6, dtype=float)})
        config = StrataConfig(group_ratios=(2, 1), ascending=True)

        geostrata = config.build(geos, geo_group={'a': 0})

        assert isinstance(geostrata, GeoStrata)
        assert geostrata.stratum_size == 3
        assert geostrata.data['geo'].tolist() == list('abcdef')
        assert geostrata.data['stratum'].tolist() == [0, 1, 1, 1, 2, 2]


class TestStrataDesignRunner:
    """Test cases for StrataDesignRunner."""

    @pytest.fixture
    def sample_geos(self):
        """Sample geos with decreasing volume."""
        return pd.DataFrame({
            'geo': [f'geo_{i:03d}' for i in range(6)],
            'volume': [600.0, 500.0, 400.0, 300.0, 200.0, 100.0]
        })

    def test_initialization(self):
        """Test runner initialization."""
        runner = StrataDesignRunner()

        assert isinstance(runner.config, StrataConfig)

    def test_run(self, sample_geos):
        """Test a full run on a free design."""
        runner = StrataDesignRunner(StrataConfig(group_ratios=(2, 1)))

        results = runner.run(sample_geos)

        assert set(results.keys()) == {'geostrata', 'counts', 'summary', 'is_fixed'}
        np.testing.assert_allclose(results['counts'].to_numpy(), [3, 3])
        assert len(results['summary']) == 2
        assert results['is_fixed'] is False

    def test_run_fixed_design(self, sample_geos):
        """Test a run where every geo is fixed."""
        geo_group = dict(zip(sample_geos['geo'], [1, 2, 2, 1, 1, 2]))
        runner = StrataDesignRunner(StrataConfig(log_scale=True))

        results = runner.run(sample_geos, geo_group=geo_group)

        assert results['is_fixed'] is True
        assert (results['counts'] == 0).all()

    def test_run_warns_on_incompatible_strata(self, sample_geos):
        """Test that incompatible strata produce a warning."""
        runner = StrataDesignRunner()

        with pytest.warns(CapacityExceededWarning):
            results = runner.run(sample_geos, geo_group={'geo_000': 2, 'geo_001': 2})

        assert results['counts'].loc[1] == 0.0

    def test_run_simulated(self):
        """Test a run on synthetic geos."""
        runner = StrataDesignRunner(StrataConfig(n_groups=3))

        results = runner.run_simulated(GeoConfig(n_geos=10, seed=42))

        assert len(results['geos']) == 10
        assert results['geostrata'].n_strata == 4
        assert results['counts'].index.tolist() == [1, 2, 3, 4]

    def test_print_summary(self, sample_geos, capsys):
        """Test printed summary."""
        runner = StrataDesignRunner()
        results = runner.run(sample_geos)

        runner.print_summary(results)

        captured = capsys.readouterr()
        assert "Design: 6 geos, 2 groups" in captured.out
        assert "more than one possible assignment" in captured.out
