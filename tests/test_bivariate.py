"""
Unit tests for the pairwise statistics and charts
"""

import unittest

import numpy as np

import config
from utils import with_derived_columns
from bivariate_utils import (
    compute_correlation_matrix,
    compute_covariance_matrix,
    get_correlation_summary,
    correlations_with,
    grouped_statistics,
    create_scatter_plot,
    create_quality_boxplot,
    create_pairs_plot,
    create_correlation_heatmap,
)
from tests.wine_fixtures import make_wine_table

COLUMNS = config.ATTRIBUTES + [config.QUALITY_COL]


class TestBivariateStatistics(unittest.TestCase):
    """Test correlations and grouped statistics"""

    @classmethod
    def setUpClass(cls):
        cls.df = make_wine_table(n=300, seed=30)

    def test_correlation_matrix_matches_pandas(self):
        corr, pvals = compute_correlation_matrix(self.df[COLUMNS])

        expected = self.df[COLUMNS].corr()
        np.testing.assert_allclose(corr.values, expected.values, atol=1e-10)
        np.testing.assert_allclose(np.diag(corr.values), 1.0)
        np.testing.assert_allclose(corr.values, corr.values.T)
        self.assertTrue(((pvals.values >= 0) & (pvals.values <= 1)).all())

    def test_spearman(self):
        corr, _ = compute_correlation_matrix(self.df[['alcohol', 'density']], method='spearman')

        expected = self.df['alcohol'].corr(self.df['density'], method='spearman')
        self.assertAlmostEqual(corr.loc['alcohol', 'density'], expected)

    def test_unknown_method(self):
        with self.assertRaises(ValueError):
            compute_correlation_matrix(self.df[['alcohol', 'density']], method='cosine')

    def test_density_falls_with_alcohol(self):
        corr, _ = compute_correlation_matrix(self.df[COLUMNS])

        self.assertLess(corr.loc['density', 'alcohol'], -0.5)

    def test_covariance_matrix(self):
        cov = compute_covariance_matrix(self.df[['alcohol', 'pH']])

        self.assertAlmostEqual(cov.loc['alcohol', 'pH'], self.df['alcohol'].cov(self.df['pH']))

    def test_correlation_summary_sorted(self):
        corr, pvals = compute_correlation_matrix(self.df[COLUMNS])
        summary = get_correlation_summary(corr, pvals)

        n = len(COLUMNS)
        self.assertEqual(len(summary), n * (n - 1) // 2)
        abs_r = summary['Correlation'].abs().values
        self.assertTrue(np.all(abs_r[:-1] >= abs_r[1:]))

    def test_correlations_with_quality(self):
        result = correlations_with(self.df)

        self.assertEqual(set(result['variable']), set(config.ATTRIBUTES))
        self.assertEqual(result.iloc[0]['variable'], 'alcohol')
        self.assertAlmostEqual(
            result.set_index('variable').loc['alcohol', 'r'],
            self.df['alcohol'].corr(self.df[config.QUALITY_COL]),
        )

    def test_grouped_statistics(self):
        grouped = grouped_statistics(self.df, 'alcohol')

        expected = self.df.groupby(config.QUALITY_COL)['alcohol'].median()
        self.assertEqual(list(grouped.index), list(expected.index))
        np.testing.assert_allclose(grouped['median'].values, expected.round(4).values)
        self.assertEqual(grouped['count'].sum(), len(self.df))


class TestBivariatePlots(unittest.TestCase):
    """Test figure structure"""

    @classmethod
    def setUpClass(cls):
        cls.df = with_derived_columns(make_wine_table(n=200, seed=31))

    def test_scatter_with_trendline(self):
        fig = create_scatter_plot(self.df, 'alcohol', 'density', trendline=True)

        self.assertEqual(len(fig.data), 2)
        self.assertTrue(fig.data[1].name.startswith('linear fit'))

    def test_scatter_colored_by_grade(self):
        fig = create_scatter_plot(self.df, 'alcohol', 'density', color_by=config.GRADE_COL)

        self.assertEqual([t.name for t in fig.data], ['low', 'medium', 'high'])
        self.assertEqual(sum(len(t.x) for t in fig.data), len(self.df))

    def test_scatter_colored_by_continuous_attribute(self):
        fig = create_scatter_plot(self.df, 'alcohol', 'density', color_by='residual_sugar')

        self.assertEqual(len(fig.data), 1)
        self.assertEqual(len(fig.data[0].marker.color), len(self.df))

    def test_scatter_jitter_is_bounded(self):
        fig = create_scatter_plot(self.df, config.QUALITY_COL, 'alcohol', jitter=0.3)

        offsets = np.asarray(fig.data[0].x) - self.df[config.QUALITY_COL].values
        self.assertTrue(np.all(np.abs(offsets) <= 0.3))

    def test_quality_boxplot(self):
        fig = create_quality_boxplot(self.df, 'alcohol')

        expected = [str(q) for q in sorted(self.df[config.QUALITY_COL].unique())]
        self.assertEqual([t.name for t in fig.data], expected)

    def test_boxplot_by_grade(self):
        fig = create_quality_boxplot(self.df, 'alcohol', by=config.GRADE_COL)

        self.assertEqual([t.name for t in fig.data], ['low', 'medium', 'high'])

    def test_pairs_plot_needs_two_variables(self):
        with self.assertRaises(ValueError):
            create_pairs_plot(self.df, ['alcohol'])

    def test_heatmap_annotations(self):
        corr, pvals = compute_correlation_matrix(self.df[['alcohol', 'density', 'pH']])
        fig = create_correlation_heatmap(corr, pvals)

        self.assertEqual(len(fig.layout.annotations), 9)


if __name__ == '__main__':
    unittest.main()
