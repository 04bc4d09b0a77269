"""
Unit tests for the wine table loaders

Both published layouts, the table invariants and the derived columns.
"""

import io
import os
import tempfile
import unittest

import numpy as np
import pandas as pd

import config
from utils import (
    normalize_column_name,
    load_wine_csv,
    validate_wine_data,
    load_wine_data,
    assign_quality_grade,
    with_derived_columns,
)
from tests.wine_fixtures import UCI_HEADERS, make_wine_table, write_semicolon_csv, write_comma_csv


class TestNormalizeColumnName(unittest.TestCase):
    """Test header normalization"""

    def test_published_spellings(self):
        for name in ['fixed acidity', 'fixed.acidity', 'Fixed Acidity', ' "fixed acidity" ']:
            self.assertEqual(normalize_column_name(name), 'fixed_acidity')

    def test_ph_keeps_case(self):
        self.assertEqual(normalize_column_name('pH'), 'pH')
        self.assertEqual(normalize_column_name('PH'), 'pH')


class TestLoadWineCsv(unittest.TestCase):
    """Test reading both file layouts"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.table = make_wine_table(n=120, seed=1)

    def tearDown(self):
        self.tmpdir.cleanup()

    def _path(self, name):
        return os.path.join(self.tmpdir.name, name)

    def test_semicolon_layout_gets_synthetic_identifier(self):
        path = self._path('white.csv')
        write_semicolon_csv(self.table, path)

        df = load_wine_csv(path)

        self.assertEqual(list(df.columns), [config.ID_COL] + config.ATTRIBUTES + [config.QUALITY_COL])
        self.assertEqual(df[config.ID_COL].tolist(), list(range(1, 121)))
        self.assertTrue(pd.api.types.is_integer_dtype(df[config.QUALITY_COL]))

    def test_comma_layout_keeps_identifier(self):
        shuffled = self.table.sample(frac=1.0, random_state=3)
        path = self._path('white_with_id.csv')
        write_comma_csv(shuffled, path)

        df = load_wine_csv(path)

        self.assertEqual(df[config.ID_COL].tolist(), shuffled[config.ID_COL].tolist())
        np.testing.assert_allclose(df['alcohol'].values, shuffled['alcohol'].values)

    def test_file_like_source(self):
        buf = io.StringIO()
        write_semicolon_csv(self.table, buf)
        buf.seek(0)

        df = load_wine_csv(buf)

        self.assertEqual(len(df), 120)

    def test_r_style_identifier_header(self):
        shuffled = self.table.sample(frac=1.0, random_state=4)
        path = self._path('white_x.csv')
        write_comma_csv(shuffled, path, index_label='X')

        df = load_wine_csv(path)

        self.assertNotIn('x', df.columns)
        self.assertEqual(df[config.ID_COL].tolist(), shuffled[config.ID_COL].tolist())

    def test_latin1_file_falls_back_from_utf8(self):
        path = self._path('white_latin1.csv')
        out = self.table.drop(columns=[config.ID_COL]).rename(columns=UCI_HEADERS)
        out['région'] = 'Mâcon'
        out.to_csv(path, sep=';', index=False, encoding='latin-1')
        with open(path, 'rb') as fh:
            with self.assertRaises(UnicodeDecodeError):
                fh.read().decode('utf-8')

        df = load_wine_csv(path)

        self.assertEqual(list(df.columns), [config.ID_COL] + config.ATTRIBUTES + [config.QUALITY_COL])
        self.assertEqual(len(df), 120)
        np.testing.assert_allclose(df['alcohol'].values, self.table['alcohol'].values)

    def test_unparseable_file(self):
        path = self._path('bad.csv')
        with open(path, 'w') as fh:
            fh.write("a,b,c\n1,2,3\n")

        with self.assertRaises(ValueError):
            load_wine_csv(path)


class TestValidateWineData(unittest.TestCase):
    """Test the table invariants"""

    def setUp(self):
        self.table = make_wine_table(n=50, seed=2)

    def test_valid_table_returned_unchanged(self):
        self.assertIs(validate_wine_data(self.table), self.table)

    def test_missing_column(self):
        with self.assertRaisesRegex(ValueError, 'chlorides'):
            validate_wine_data(self.table.drop(columns=['chlorides']))

    def test_missing_values(self):
        broken = self.table.copy()
        broken.loc[3, 'alcohol'] = np.nan
        with self.assertRaisesRegex(ValueError, 'alcohol'):
            validate_wine_data(broken)

    def test_non_numeric_attribute(self):
        broken = self.table.copy()
        broken['sulphates'] = broken['sulphates'].astype(str)
        broken.loc[2, 'sulphates'] = 'n/a'
        with self.assertRaisesRegex(ValueError, 'Non-numeric.*sulphates'):
            validate_wine_data(broken)

    def test_non_numeric_attribute_in_file(self):
        table = self.table.copy()
        table['chlorides'] = table['chlorides'].astype(object)
        table.loc[4, 'chlorides'] = 'trace'
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'white.csv')
            write_semicolon_csv(table, path)
            with self.assertRaisesRegex(ValueError, 'chlorides'):
                load_wine_data(path)

    def test_duplicate_identifier(self):
        broken = self.table.copy()
        broken.loc[1, config.ID_COL] = broken.loc[0, config.ID_COL]
        with self.assertRaises(ValueError):
            validate_wine_data(broken)

    def test_fractional_quality(self):
        broken = self.table.copy()
        broken[config.QUALITY_COL] = broken[config.QUALITY_COL].astype(float)
        broken.loc[0, config.QUALITY_COL] = 5.5
        with self.assertRaisesRegex(ValueError, 'integer'):
            validate_wine_data(broken)

    def test_quality_out_of_range(self):
        broken = self.table.copy()
        broken.loc[0, config.QUALITY_COL] = 11
        with self.assertRaises(ValueError):
            validate_wine_data(broken)


class TestLoadWineData(unittest.TestCase):
    """Test the one-time read"""

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_wine_data('/nonexistent/wine.csv')

    def test_round_trip_of_values(self):
        table = make_wine_table(n=80, seed=4)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'white.csv')
            write_semicolon_csv(table, path)
            df = load_wine_data(path)

        pd.testing.assert_frame_equal(df, table, check_dtype=False)


class TestDerivedColumns(unittest.TestCase):
    """Test quality grades and derived attributes"""

    def test_grade_boundaries(self):
        quality = pd.Series([3, 5, 6, 7, 9])
        grades = assign_quality_grade(quality)
        self.assertEqual(list(grades), ['low', 'low', 'medium', 'high', 'high'])
        self.assertIsInstance(grades, pd.Series)
        self.assertTrue(grades.cat.ordered)
        self.assertEqual(grades.name, config.GRADE_COL)
        self.assertTrue(grades.index.equals(quality.index))

    def test_with_derived_columns_does_not_modify_input(self):
        table = make_wine_table(n=40, seed=5)
        before = table.copy()

        derived = with_derived_columns(table)

        pd.testing.assert_frame_equal(table, before)
        self.assertIn(config.GRADE_COL, derived.columns)
        np.testing.assert_allclose(
            derived['bound_sulfur_dioxide'],
            table['total_sulfur_dioxide'] - table['free_sulfur_dioxide'],
        )
        np.testing.assert_allclose(
            derived['log10_residual_sugar'], np.log10(table['residual_sugar']),
        )


if __name__ == '__main__':
    unittest.main()
