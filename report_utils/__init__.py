"""
Report Utilities
Narrative sections and the static HTML export
"""

from .narrative import (
    CHAPTERS,
    build_report_sections,
    sections_for_chapter,
    chapter_title
)

from .html_report import (
    render_html_report,
    write_html_report
)

__all__ = [
    'CHAPTERS',
    'build_report_sections',
    'sections_for_chapter',
    'chapter_title',
    'render_html_report',
    'write_html_report'
]
