"""
Unit tests for the Streamlit reading surface

Pages are run headless with streamlit's AppTest harness.
"""

import io
import unittest
from unittest import mock

from streamlit.testing.v1 import AppTest

import config
from eda_utils import eda_workspace
from bivariate_page import NUMERIC_COLUMNS
from bivariate_utils import compute_correlation_matrix, get_correlation_summary
from session_state_keys import SESSION_EDA_EXCEL, SESSION_EDA_STATS_CACHE, set_data
from utils import with_derived_columns
from tests.wine_fixtures import make_wine_table


def _home_app():
    import streamlit as st
    import homepage
    from session_state_keys import get_data, set_data
    from tests.wine_fixtures import make_wine_table

    if get_data(st.session_state) is None:
        set_data(st.session_state, make_wine_table(n=150, seed=82))
    homepage.show_home()


def _bivariate_app():
    import streamlit as st
    import bivariate_page
    from session_state_keys import get_data, set_data
    from tests.wine_fixtures import make_wine_table

    if get_data(st.session_state) is None:
        set_data(st.session_state, make_wine_table(n=150, seed=83))
    bivariate_page.show()


class TestSummaryStatisticsCache(unittest.TestCase):
    """Test that loading a new table drops the Summary Report cache"""

    def test_new_table_recomputes_statistics(self):
        session = {}
        first = make_wine_table(n=100, seed=80)
        second = make_wine_table(n=300, seed=81)
        second['alcohol'] = second['alcohol'] + 3.0

        with mock.patch.object(eda_workspace.st, 'session_state', session):
            set_data(session, first)
            before = eda_workspace._get_or_compute_stats(first, 'alcohol', 0.95, 'eda_wine')
            session.setdefault(SESSION_EDA_EXCEL, {})['eda_wine'] = io.BytesIO(b'old workbook')

            set_data(session, second)
            self.assertNotIn(SESSION_EDA_STATS_CACHE, session)
            self.assertNotIn(SESSION_EDA_EXCEL, session)

            after = eda_workspace._get_or_compute_stats(second, 'alcohol', 0.95, 'eda_wine')

        self.assertEqual(before['n'], 100)
        self.assertEqual(after['n'], 300)
        self.assertAlmostEqual(after['mean'], round(second['alcohol'].mean(), 4))

    def test_cache_reused_for_same_table(self):
        session = {}
        table = make_wine_table(n=60, seed=84)

        with mock.patch.object(eda_workspace.st, 'session_state', session):
            first = eda_workspace._get_or_compute_stats(table, 'pH', 0.95, 'eda_wine')
            second = eda_workspace._get_or_compute_stats(table, 'pH', 0.95, 'eda_wine')

        self.assertIs(first, second)


class TestHomePage(unittest.TestCase):
    """Test the Home page"""

    def test_overview_chapter_rendered(self):
        at = AppTest.from_function(_home_app, default_timeout=120)
        at.run()

        self.assertFalse(at.exception)
        markdown = [m.value for m in at.markdown]
        self.assertIn("### The Dataset", markdown)
        self.assertTrue(any("This report explores a dataset of" in m for m in markdown))
        self.assertTrue(any(len(df.value) == len(config.ATTRIBUTES) + 1 for df in at.dataframe))


class TestBivariatePage(unittest.TestCase):
    """Test the correlation ranking buttons"""

    def setUp(self):
        data = with_derived_columns(make_wine_table(n=150, seed=83))
        corr, pvals = compute_correlation_matrix(data[NUMERIC_COLUMNS])
        self.ranking = get_correlation_summary(corr, pvals).head(10).reset_index(drop=True)

    def _select_buttons(self, at):
        return [b for b in at.button if (b.key or '').startswith('select_pair_')]

    def test_select_buttons_update_scatter_variables(self):
        at = AppTest.from_function(_bivariate_app, default_timeout=120)
        at.run()
        self.assertFalse(at.exception)
        self.assertEqual(len(self._select_buttons(at)), len(self.ranking))

        # A second selection must still reach the selectboxes
        for position in (len(self.ranking) - 1, len(self.ranking) - 2):
            self._select_buttons(at)[position].click().run()

            row = self.ranking.iloc[position]
            self.assertEqual(at.selectbox(key='bi_x_var').value, row['Variable 1'])
            self.assertEqual(at.selectbox(key='bi_y_var').value, row['Variable 2'])


if __name__ == '__main__':
    unittest.main()
