"""
Main runner for stratified geo-experiment designs.
"""

from typing import Any, Dict, Optional

import pandas as pd

from data_simulation.generators import GeoConfig, SimpleGeoGenerator
from stratification.counting import count_randomizations, is_fixed_randomization
from stratification.stratified_utils import summarize_strata, print_strata_summary
from .config import StrataConfig


class StrataDesignRunner:
    """
    High-level runner for building and checking stratified designs.

    This class goes from a table of geos to strata, per-stratum
    randomization counts and a verdict on whether the design is random at all.
    """

    def __init__(self, config: Optional[StrataConfig] = None):
        """
        Initialize the design runner.

        Args:
            config: Design configuration. If None, uses defaults.
        """
        self.config = config or StrataConfig()

    def run(self, geos: pd.DataFrame, geo_group=None) -> Dict[str, Any]:
        """
        Build the strata and count their randomizations.

        Args:
            geos: DataFrame with one row per geo
            geo_group: Optional mapping geo -> group value

        Returns:
            Dictionary with 'geostrata', 'counts', 'summary' and 'is_fixed'
        """
        geostrata = self.config.build(geos, geo_group=geo_group)

        counts = count_randomizations(
            geostrata,
            show_warnings=self.config.show_warnings,
            log_scale=self.config.log_scale
        )

        return {
            'geostrata': geostrata,
            'counts': counts,
            'summary': summarize_strata(geostrata),
            'is_fixed': is_fixed_randomization(geostrata)
        }

    def run_simulated(self, geo_config: Optional[GeoConfig] = None,
                      geo_group=None) -> Dict[str, Any]:
        """
        Run the design on synthetic geos.

        Args:
            geo_config: Configuration for the geo generator
            geo_group: Optional mapping geo -> group value

        Returns:
            Same dictionary as run(), plus 'geos'
        """
        geos = SimpleGeoGenerator(geo_config).generate()
        results = self.run(geos, geo_group=geo_group)
        results['geos'] = geos
        return results

    def print_summary(self, results: Dict[str, Any]):
        """
        Print a summary of design results.

        Args:
            results: Results dictionary from run()
        """
        geostrata = results['geostrata']
        print(f"Design: {geostrata.n_geos} geos, {geostrata.n_groups} groups, "
              f"ratios {geostrata.group_ratios} (stratum size {geostrata.stratum_size})")
        print_strata_summary(results['summary'])

        if results['is_fixed']:
            print("\n🔒 Randomization is fixed: only a single assignment is possible")
        else:
            print("\n🎲 Randomization has more than one possible assignment")
