"""
Unit tests for the report narrative, the HTML export and the CLI
"""

import os
import tempfile
import unittest

import pandas as pd

import config
import build_report
from report_utils import (
    CHAPTERS,
    build_report_sections,
    sections_for_chapter,
    chapter_title,
    render_html_report,
    write_html_report,
)
from tests.wine_fixtures import make_wine_table, write_semicolon_csv


class TestReportSections(unittest.TestCase):
    """Test the narrative sections"""

    @classmethod
    def setUpClass(cls):
        cls.df = make_wine_table(n=400, seed=60)
        cls.sections = build_report_sections(cls.df)

    def test_section_structure(self):
        chapter_ids = [c for c, _ in CHAPTERS]
        for section in self.sections:
            self.assertEqual(
                set(section), {'id', 'chapter', 'title', 'paragraphs', 'figure', 'table'}
            )
            self.assertIn(section['chapter'], chapter_ids)
            self.assertTrue(section['paragraphs'])

        ids = [s['id'] for s in self.sections]
        self.assertEqual(len(ids), len(set(ids)))

    def test_chapters_in_reading_order(self):
        order = [c for c, _ in CHAPTERS]
        positions = [order.index(s['chapter']) for s in self.sections]
        self.assertEqual(positions, sorted(positions))
        self.assertEqual(set(s['chapter'] for s in self.sections), set(order))

    def test_one_histogram_per_attribute(self):
        univariate = sections_for_chapter(self.sections, 'univariate')
        ids = {s['id'] for s in univariate}
        for col in config.ATTRIBUTES:
            self.assertIn(f"univariate-{col}", ids)

    def test_prose_quotes_computed_numbers(self):
        overview = sections_for_chapter(self.sections, 'overview')[0]
        text = ' '.join(overview['paragraphs'])
        self.assertIn(f"{len(self.df):,}", text)
        self.assertIn(str(self.df[config.QUALITY_COL].max()), text)

        density_alcohol = [s for s in self.sections if s['id'] == 'bivariate-density-alcohol'][0]
        r = self.df['density'].corr(self.df['alcohol'])
        self.assertIn(f"{r:+.2f}", density_alcohol['paragraphs'][0])

    def test_input_not_modified(self):
        self.assertNotIn(config.GRADE_COL, self.df.columns)

    def test_unknown_chapter(self):
        with self.assertRaises(ValueError):
            sections_for_chapter(self.sections, 'appendix')

    def test_chapter_titles(self):
        self.assertEqual(chapter_title('overview'), dict(CHAPTERS)['overview'])
        with self.assertRaises(KeyError):
            chapter_title('appendix')


class TestHtmlReport(unittest.TestCase):
    """Test the static HTML document"""

    @classmethod
    def setUpClass(cls):
        cls.sections = build_report_sections(make_wine_table(n=200, seed=61))

    def test_document_contents(self):
        html = render_html_report(self.sections, title="Test <Report>")

        self.assertIn("<title>Test &lt;Report&gt;</title>", html)
        for chapter_id, heading in CHAPTERS:
            self.assertIn(f'id="{chapter_id}"', html)
            self.assertIn(heading, html)
        for section in self.sections:
            self.assertIn(f'href="#{section["id"]}"', html)
        self.assertRegex(html, r'<table[^>]*class="[^"]*\bdata-table\b[^"]*"')
        self.assertIn('<sub>2</sub>', html)

    def test_plotlyjs_linked_once(self):
        html = render_html_report(self.sections, include_plotlyjs='cdn')

        self.assertEqual(html.count('cdn.plot.ly'), 1)

    def test_invalid_plotlyjs_mode(self):
        with self.assertRaises(ValueError):
            render_html_report(self.sections, include_plotlyjs='inline')

    def test_write_creates_directories(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = write_html_report(self.sections, os.path.join(tmp, 'nested', 'report.html'))

            self.assertTrue(path.exists())
            self.assertIn('<!DOCTYPE html>', path.read_text(encoding='utf-8'))


class TestBuildReportCli(unittest.TestCase):
    """Test the command-line entry point"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.data_path = os.path.join(self.tmpdir.name, 'white.csv')
        write_semicolon_csv(make_wine_table(n=150, seed=62), self.data_path)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_writes_report_and_workbook(self):
        output = os.path.join(self.tmpdir.name, 'out', 'report.html')
        excel = os.path.join(self.tmpdir.name, 'out', 'stats.xlsx')

        code = build_report.main(['--data', self.data_path, '--output', output, '--excel', excel])

        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(output))
        sheets = pd.ExcelFile(excel).sheet_names
        self.assertEqual(sheets, ['Summary', 'Raw Data', 'Metadata'])

    def test_missing_input(self):
        code = build_report.main([
            '--data', os.path.join(self.tmpdir.name, 'missing.csv'),
            '--output', os.path.join(self.tmpdir.name, 'report.html'),
        ])

        self.assertEqual(code, 1)

    def test_malformed_input(self):
        bad = os.path.join(self.tmpdir.name, 'bad.csv')
        with open(bad, 'w') as fh:
            fh.write("colour;taste\nred;sweet\n")

        code = build_report.main(['--data', bad, '--output', os.path.join(self.tmpdir.name, 'r.html')])

        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
