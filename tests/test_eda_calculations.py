"""
Unit tests for the univariate statistics

Statistics are checked against values recomputed directly with pandas.
"""

import unittest
import warnings

import numpy as np
import pandas as pd
from scipy import stats

import config
from utils import with_derived_columns
from eda_utils import (
    dataset_overview,
    summary_table,
    quality_distribution,
    grade_distribution,
    trim_upper_quantile,
    outlier_counts,
    anderson_darling_test,
    ci_for_mean,
    descriptive_statistics,
    run_eda_for_all_columns,
)
from tests.wine_fixtures import make_wine_table


class TestDatasetLevel(unittest.TestCase):
    """Test overview, summary table and distributions"""

    @classmethod
    def setUpClass(cls):
        cls.df = make_wine_table(n=400, seed=10)

    def test_overview(self):
        overview = dataset_overview(self.df)

        self.assertEqual(overview['n_rows'], 400)
        self.assertEqual(overview['n_attributes'], len(config.ATTRIBUTES))
        self.assertEqual(overview['quality_min'], self.df[config.QUALITY_COL].min())
        self.assertEqual(overview['quality_max'], self.df[config.QUALITY_COL].max())
        self.assertEqual(overview['n_duplicated_measurements'], 0)

    def test_overview_counts_repeated_measurements(self):
        repeated = pd.concat([self.df, self.df.iloc[:3]], ignore_index=True)
        repeated[config.ID_COL] = np.arange(1, len(repeated) + 1)

        self.assertEqual(dataset_overview(repeated)['n_duplicated_measurements'], 3)

    def test_summary_table_matches_pandas(self):
        table = summary_table(self.df)

        self.assertEqual(list(table.index), config.ATTRIBUTES + [config.QUALITY_COL])
        self.assertEqual(list(table.columns), ['Min', '1st Qu.', 'Median', 'Mean', '3rd Qu.', 'Max'])
        for col in ['alcohol', 'density', 'residual_sugar']:
            self.assertAlmostEqual(table.loc[col, 'Median'], round(self.df[col].median(), 4))
            self.assertAlmostEqual(table.loc[col, 'Mean'], round(self.df[col].mean(), 4))
            self.assertAlmostEqual(table.loc[col, '1st Qu.'], round(self.df[col].quantile(0.25), 4))

    def test_quality_distribution(self):
        dist = quality_distribution(self.df)

        self.assertEqual(dist['count'].sum(), len(self.df))
        self.assertAlmostEqual(dist['share'].sum(), 1.0, places=3)
        self.assertTrue(dist[config.QUALITY_COL].is_monotonic_increasing)
        expected = self.df[config.QUALITY_COL].value_counts()
        for _, row in dist.iterrows():
            self.assertEqual(row['count'], expected[row[config.QUALITY_COL]])

    def test_grade_distribution_keeps_empty_grades(self):
        only_low = self.df.copy()
        only_low[config.QUALITY_COL] = 5

        dist = grade_distribution(with_derived_columns(only_low))

        self.assertEqual(list(dist[config.GRADE_COL]), ['low', 'medium', 'high'])
        self.assertEqual(list(dist['count']), [len(self.df), 0, 0])

    def test_trim_upper_quantile(self):
        trimmed = trim_upper_quantile(self.df, 'chlorides', 0.9)

        self.assertLess(len(trimmed), len(self.df))
        self.assertLessEqual(trimmed['chlorides'].max(), self.df['chlorides'].quantile(0.9))

        with self.assertRaises(ValueError):
            trim_upper_quantile(self.df, 'chlorides', 1.5)

    def test_outlier_counts(self):
        counts = outlier_counts(self.df, columns=['residual_sugar'])

        s = self.df['residual_sugar']
        q1, q3 = s.quantile(0.25), s.quantile(0.75)
        upper = q3 + 1.5 * (q3 - q1)
        self.assertEqual(counts.loc['residual_sugar', 'n_high'], int((s > upper).sum()))
        self.assertEqual(
            counts.loc['residual_sugar', 'n_outliers'],
            counts.loc['residual_sugar', 'n_low'] + counts.loc['residual_sugar', 'n_high'],
        )


class TestPerVariableStatistics(unittest.TestCase):
    """Test the Minitab-style statistics"""

    def test_anderson_darling_flags_skewed_data(self):
        rng = np.random.default_rng(0)
        result = anderson_darling_test(rng.exponential(1.0, 500))

        self.assertTrue(result['reject_h0'])
        self.assertEqual(result['p_label'], '<0.005')

    def test_anderson_darling_accepts_normal_quantiles(self):
        n = 400
        data = stats.norm.ppf((np.arange(1, n + 1) - 0.5) / n, loc=10.0, scale=2.0)

        result = anderson_darling_test(data)

        self.assertLess(result['statistic'], 0.2)
        self.assertGreater(result['p_value'], 0.5)
        self.assertFalse(result['reject_h0'])
        self.assertEqual(result['p_label'], f"{result['p_value']:.3f}")

    def test_anderson_darling_without_scipy_warnings(self):
        rng = np.random.default_rng(2)
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            anderson_darling_test(rng.normal(size=200))

    def test_anderson_darling_constant_data(self):
        with self.assertRaises(ValueError):
            anderson_darling_test(np.full(10, 3.0))

    def test_ci_for_mean_contains_mean(self):
        rng = np.random.default_rng(1)
        data = rng.normal(10.0, 2.0, 200)

        lower, upper = ci_for_mean(data, 0.95)

        self.assertLess(lower, data.mean())
        self.assertGreater(upper, data.mean())

    def test_descriptive_statistics(self):
        df = make_wine_table(n=150, seed=11)
        s = descriptive_statistics(df['alcohol'])

        self.assertEqual(s['n'], 150)
        self.assertAlmostEqual(s['mean'], round(df['alcohol'].mean(), 4))
        self.assertAlmostEqual(s['stdev'], round(df['alcohol'].std(ddof=1), 4))
        self.assertLessEqual(s['minimum'], s['q1'])
        self.assertLessEqual(s['q1'], s['median'])
        self.assertLessEqual(s['median'], s['q3'])

    def test_descriptive_statistics_needs_three_values(self):
        with self.assertRaises(ValueError):
            descriptive_statistics(pd.Series([1.0, np.nan, 2.0]))

    def test_run_eda_records_errors(self):
        df = pd.DataFrame({'alcohol': [9.0, 10.0, 11.0, 12.0], 'quality': [5, np.nan, np.nan, np.nan]})

        results = run_eda_for_all_columns(df)

        self.assertIn('mean', results['alcohol'])
        self.assertIn('error', results['quality'])


if __name__ == '__main__':
    unittest.main()
