"""
Unit tests for the univariate charts
"""

import unittest

import numpy as np

import config
from eda_utils import (
    plot_quality_bar,
    plot_histogram,
    plot_attribute_histograms,
    plot_summary_report,
)
from tests.wine_fixtures import make_wine_table


class TestUnivariatePlots(unittest.TestCase):
    """Test figure structure"""

    @classmethod
    def setUpClass(cls):
        cls.df = make_wine_table(n=250, seed=20)

    def test_quality_bar_covers_every_score(self):
        fig = plot_quality_bar(self.df)

        q = self.df[config.QUALITY_COL]
        self.assertEqual(list(fig.data[0].x), list(range(q.min(), q.max() + 1)))
        self.assertEqual(sum(fig.data[0].y), len(self.df))

    def test_histogram_counts_every_wine(self):
        fig = plot_histogram(self.df, 'alcohol', bins=20)

        self.assertEqual(len(fig.data[0].y), 20)
        self.assertEqual(int(np.sum(fig.data[0].y)), len(self.df))

    def test_histogram_reference_lines(self):
        fig = plot_histogram(self.df, 'alcohol')

        names = [trace.name for trace in fig.data[1:]]
        self.assertTrue(any(name.startswith('median') for name in names))
        self.assertTrue(any(name.startswith('mean') for name in names))
        median_trace = [t for t in fig.data[1:] if t.name.startswith('median')][0]
        self.assertAlmostEqual(median_trace.x[0], self.df['alcohol'].median())

    def test_histogram_log_scale(self):
        fig = plot_histogram(self.df, 'residual_sugar', log_x=True)

        self.assertEqual(fig.layout.xaxis.type, 'log')
        self.assertIn('log10', fig.layout.title.text)

    def test_histogram_trimmed(self):
        fig = plot_histogram(self.df, 'chlorides', trim_quantile=0.9)

        self.assertLess(int(np.sum(fig.data[0].y)), len(self.df))

    def test_attribute_grid(self):
        fig = plot_attribute_histograms(self.df)

        self.assertEqual(len(fig.data), len(config.ATTRIBUTES))

    def test_summary_report_has_panels(self):
        fig = plot_summary_report(self.df['alcohol'], 'alcohol')

        self.assertGreater(len(fig.data), 2)


if __name__ == '__main__':
    unittest.main()
