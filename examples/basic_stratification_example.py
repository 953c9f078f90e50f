"""
Example usage of geo stratification.

This script demonstrates how to divide geos into strata, fix some geos to
groups, and check how much randomness is left in the design.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import warnings

from data_simulation.generators import SimpleGeoGenerator, GeoConfig
from pipeline import StrataDesignRunner, StrataConfig
from stratification import GeoStrata, count_randomizations, is_fixed_randomization


def example_basic_usage():
    """Basic usage example with two equal groups."""
    print("=== Basic Stratification ===")

    geos = SimpleGeoGenerator(GeoConfig(n_geos=12, seed=42)).generate()
    geostrata = GeoStrata(geos, n_groups=2)

    print(geostrata)
    print(geostrata.data.head(6))
    print("\nRandomizations per stratum:")
    print(count_randomizations(geostrata))

    return geostrata


def example_fixed_geos(geostrata):
    """Fix and exclude geos, then check the design."""
    print("\n=== Fixing Geos ===")

    first, second, third = geostrata.data['geo'].iloc[:3]
    updated = geostrata.set_geo_group({first: 1, second: 0, third: 2})

    print(updated.data.head(6))
    print(f"\nFixed randomization: {is_fixed_randomization(updated)}")

    return updated


def example_unequal_ratios():
    """Run a 2:1 design through the pipeline runner."""
    print("\n=== Unequal Ratios ===")

    runner = StrataDesignRunner(StrataConfig(group_ratios=(2, 1)))

    with warnings.catch_warnings():
        warnings.simplefilter('always')
        results = runner.run_simulated(GeoConfig(n_geos=9, seed=0))

    runner.print_summary(results)
    return results


if __name__ == "__main__":
    geostrata = example_basic_usage()
    example_fixed_geos(geostrata)
    example_unequal_ratios()
