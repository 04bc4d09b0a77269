"""
Static HTML export of the report sections (jinja2 + plotly).
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

import config
from .narrative import CHAPTERS, chapter_title

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / 'templates'
TEMPLATE_NAME = 'report.html.j2'

# Accepted values for plotly's include_plotlyjs
_PLOTLYJS_MODES = ('cdn', True, False)


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(['html', 'xml', 'j2']),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_html_report(
    sections: List[Dict[str, Any]],
    title: str = config.REPORT_TITLE,
    include_plotlyjs: Union[str, bool] = 'cdn',
) -> str:
    """
    Render report sections into one self-contained HTML document.

    Parameters
    ----------
    sections : list of dict
        Output of ``build_report_sections``
    title : str
    include_plotlyjs : 'cdn', True or False
        'cdn' links plotly.js from the CDN, True embeds it once (offline
        document), False leaves it out

    Returns
    -------
    str
    """
    if include_plotlyjs not in _PLOTLYJS_MODES:
        raise ValueError(f"include_plotlyjs must be one of {_PLOTLYJS_MODES}, got {include_plotlyjs!r}")

    chapters = []
    plotlyjs_pending = include_plotlyjs
    for chapter_id, _ in CHAPTERS:
        rendered = []
        for section in sections:
            if section['chapter'] != chapter_id:
                continue
            figure_html = None
            if section.get('figure') is not None:
                # plotly.js goes in with the first figure only
                figure_html = section['figure'].to_html(
                    full_html=False,
                    include_plotlyjs=plotlyjs_pending,
                    config={'responsive': True},
                )
                plotlyjs_pending = False
            table_html = None
            if section.get('table') is not None:
                table_html = section['table'].to_html(
                    classes='data-table', border=0, float_format=lambda v: f"{v:.4g}",
                )
            rendered.append({
                'id': section['id'],
                'title': section['title'],
                'paragraphs': section['paragraphs'],
                'figure_html': figure_html,
                'table_html': table_html,
            })
        if rendered:
            chapters.append({'id': chapter_id, 'title': chapter_title(chapter_id), 'sections': rendered})

    template = _environment().get_template(TEMPLATE_NAME)
    html = template.render(
        title=title,
        chapters=chapters,
        generated=datetime.now().strftime('%Y-%m-%d %H:%M'),
    )
    logger.debug("Rendered %d chapters into %d characters of HTML", len(chapters), len(html))
    return html


def write_html_report(
    sections: List[Dict[str, Any]],
    output_path: Union[str, Path],
    title: str = config.REPORT_TITLE,
    include_plotlyjs: Union[str, bool] = 'cdn',
) -> Path:
    """Render and write the report; parent directories are created. Returns the path."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        render_html_report(sections, title=title, include_plotlyjs=include_plotlyjs),
        encoding='utf-8',
    )
    logger.info("Report written to %s", output_path)
    return output_path
