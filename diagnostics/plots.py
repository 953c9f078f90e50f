"""
Plotting and visualization functions for stratified designs.
"""

import matplotlib.pyplot as plt
import seaborn as sns
import pandas as pd
import numpy as np
from typing import Optional, Tuple

from stratification.strata import GeoStrata


class DiagnosticPlotter:
    """
    Utility class for creating diagnostic plots for stratified designs.
    """

    def __init__(self, style: str = 'whitegrid', figsize: Tuple[int, int] = (10, 6)):
        """
        Initialize the plotter.

        Args:
            style: Seaborn style to use
            figsize: Default figure size
        """
        sns.set_style(style)
        self.default_figsize = figsize

    def plot_strata_randomizations(self, summary_df: pd.DataFrame,
                                   figsize: Optional[Tuple[int, int]] = None) -> plt.Figure:
        """
        Plot the log number of randomizations of each stratum.

        Strata that are not compatible with the group ratios are drawn as
        red markers at zero.

        Args:
            summary_df: DataFrame from summarize_strata()
            figsize: Figure size override

        Returns:
            Matplotlib figure
        """
        if len(summary_df) == 0:
            raise ValueError("No strata found to plot")

        figsize = figsize or self.default_figsize
        fig, ax = plt.subplots(figsize=figsize)

        compatible = summary_df['compatible'].to_numpy(dtype=bool)
        heights = np.where(compatible, summary_df['log_randomizations'], 0.0)
        colors = np.where(heights > 0, 'steelblue', 'grey')

        ax.bar(summary_df['stratum'], heights, color=colors)
        if (~compatible).any():
            ax.scatter(summary_df.loc[~compatible, 'stratum'],
                       np.zeros((~compatible).sum()),
                       color='red', marker='x', s=80, label='Over capacity', zorder=3)
            ax.legend()

        ax.set_xlabel('Stratum')
        ax.set_ylabel('log(randomizations)')
        ax.set_title('Randomizations per Stratum')

        plt.tight_layout()
        return fig

    def plot_strata_volume(self, geostrata: GeoStrata, volume_col: str = 'volume',
                           figsize: Optional[Tuple[int, int]] = None) -> plt.Figure:
        """
        Plot geo volumes by stratum, marking fixed and excluded geos.

        Args:
            geostrata: GeoStrata object
            volume_col: Column with the geo volume
            figsize: Figure size override

        Returns:
            Matplotlib figure
        """
        if volume_col not in geostrata.data.columns:
            raise ValueError(f"geostrata must contain '{volume_col}' column")

        df = geostrata.data[['stratum', 'geo_group', volume_col]].copy()
        df['status'] = [
            'free' if pd.isna(g) else ('excluded' if g == 0 else f'group {g}')
            for g in df['geo_group']
        ]

        figsize = figsize or self.default_figsize
        fig, ax = plt.subplots(figsize=figsize)

        sns.stripplot(data=df, x='stratum', y=volume_col, hue='status', ax=ax)
        ax.set_xlabel('Stratum (0 = excluded)')
        ax.set_ylabel(volume_col.capitalize())
        ax.set_title(f'{volume_col.capitalize()} by Stratum')

        plt.tight_layout()
        return fig
