"""
Stratum-level summaries for geo-experiment designs.
"""

import numpy as np
import pandas as pd

from .counting import count_randomizations_in_stratum, is_stratum_compatible_with_ratios
from .strata import GeoStrata


def summarize_strata(geostrata: GeoStrata) -> pd.DataFrame:
    """
    Summarize the composition and randomization count of every stratum.

    Args:
        geostrata: GeoStrata object

    Returns:
        DataFrame with one row per non-zero stratum and columns
        ['stratum', 'n_geos', 'n_free', 'n_fixed', 'compatible',
        'log_randomizations', 'randomizations']
    """
    rows = []
    for stratum_id, geo_group in geostrata.iter_strata():
        n_free = int(geo_group.isna().sum())
        log_count = count_randomizations_in_stratum(
            geo_group, geostrata.group_ratios, log_scale=True
        )
        rows.append({
            'stratum': stratum_id,
            'n_geos': len(geo_group),
            'n_free': n_free,
            'n_fixed': len(geo_group) - n_free,
            'compatible': is_stratum_compatible_with_ratios(geo_group, geostrata.group_ratios),
            'log_randomizations': log_count,
            'randomizations': float(np.exp(log_count))
        })

    columns = ['stratum', 'n_geos', 'n_free', 'n_fixed', 'compatible',
               'log_randomizations', 'randomizations']
    return pd.DataFrame(rows, columns=columns)


def print_strata_summary(summary_df: pd.DataFrame):
    """
    Print a summary of the strata.

    Args:
        summary_df: DataFrame from summarize_strata()
    """
    print("🔍 Strata Summary:")
    print("=" * 50)

    if len(summary_df) == 0:
        print("\n  No strata: every geo is excluded")
        return

    n_incompatible = int((~summary_df['compatible']).sum())
    n_forced = int((summary_df['log_randomizations'] == 0).sum())
    print(f"\n📊 {len(summary_df)} strata, {int(summary_df['n_geos'].sum())} geos "
          f"({int(summary_df['n_fixed'].sum())} fixed)")

    for _, row in summary_df.iterrows():
        stratum_id = int(row['stratum'])
        if not row['compatible']:
            print(f"  ⚠️ Stratum {stratum_id}: over capacity, no valid randomization")
            continue
        status = "🔒" if row['log_randomizations'] == 0 else "✅"
        print(f"  {status} Stratum {stratum_id}: {int(row['n_free'])}/{int(row['n_geos'])} free, "
              f"log(randomizations) = {row['log_randomizations']:.3f}")

    if n_incompatible > 0:
        print(f"\n⚠️ {n_incompatible} strata are not compatible with the group ratios")
    print(f"\n📝 Note: {n_forced} strata have a single possible outcome (🔒)")
