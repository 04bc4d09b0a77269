"""
Report Narrative
================

Builds the report as an ordered list of sections. Every statistic and chart
is computed from the table handed in, and the commentary quotes those
numbers, so the prose always matches the data it sits next to.

A section is a plain dict::

    {
        "id":         "bivariate-density-alcohol",
        "chapter":    "bivariate",
        "title":      "Density and Alcohol",
        "paragraphs": ["...", "..."],     # may contain <b>, <i>, <sub>
        "figure":     go.Figure or None,
        "table":      pd.DataFrame or None,
    }

Both the Streamlit pages and the static HTML document render these dicts.
"""

import logging
from typing import Any, Dict, List, Optional

import pandas as pd
import plotly.graph_objects as go

import config
from utils.data_loaders import with_derived_columns
from eda_utils.eda_calculations import (
    dataset_overview,
    summary_table,
    quality_distribution,
    grade_distribution,
    outlier_counts,
    descriptive_statistics,
)
from eda_utils.eda_plots import plot_quality_bar, plot_histogram
from bivariate_utils.statistics import (
    compute_correlation_matrix,
    get_correlation_summary,
    correlations_with,
    grouped_statistics,
)
from bivariate_utils.plotting import (
    create_scatter_plot,
    create_quality_boxplot,
    create_correlation_heatmap,
)
from multivariate_utils.plotting import (
    create_grade_scatter,
    create_scatter_3d,
    create_grade_facets,
    create_grade_density,
)
from model_utils.quality_model import fit_nested_models
from model_utils.group_tests import compare_grades

logger = logging.getLogger(__name__)

CHAPTERS = [
    ('overview',     'Dataset Overview'),
    ('univariate',   'Univariate Analysis'),
    ('bivariate',    'Bivariate Analysis'),
    ('multivariate', 'Multivariate Analysis'),
    ('final',        'Final Plots and Summary'),
    ('reflection',   'Reflection'),
]

# What each attribute measures, in the tasting-lab vocabulary
ATTRIBUTE_NOTES = {
    'fixed_acidity': (
        "Fixed acidity is the non-volatile acid content, mostly tartaric acid, "
        "which does not evaporate readily."
    ),
    'volatile_acidity': (
        "Volatile acidity is the acetic acid content; at high levels it gives "
        "an unpleasant, vinegar taste."
    ),
    'citric_acid': (
        "Citric acid is found in small quantities and can add freshness and "
        "flavor to wines."
    ),
    'residual_sugar': (
        "Residual sugar is the sugar remaining after fermentation stops. Wines "
        "above 45 g/dm³ are considered sweet."
    ),
    'chlorides': "Chlorides measure the amount of salt in the wine.",
    'free_sulfur_dioxide': (
        "Free sulfur dioxide is the free form of SO<sub>2</sub>; it prevents "
        "microbial growth and the oxidation of wine."
    ),
    'total_sulfur_dioxide': (
        "Total sulfur dioxide adds the bound forms of SO<sub>2</sub> to the free "
        "form. Above 50 mg/dm³ free SO<sub>2</sub> it becomes evident in nose and taste."
    ),
    'density': (
        "Density is close to that of water and depends on the alcohol and "
        "sugar content."
    ),
    'pH': (
        "pH describes how acidic or basic a wine is on a scale from 0 (very "
        "acidic) to 14 (very basic); most wines sit between 3 and 4."
    ),
    'sulphates': (
        "Sulphates are an additive that contributes to the sulfur dioxide "
        "level, acting as an antimicrobial and antioxidant."
    ),
    'alcohol': "Alcohol is the percent alcohol content of the wine.",
}

# Per-attribute histogram options: long tails are trimmed or log-scaled
HISTOGRAM_OPTIONS = {
    'volatile_acidity':    {'trim_quantile': config.TRIM_QUANTILE},
    'residual_sugar':      {'log_x': True},
    'chlorides':           {'trim_quantile': config.TRIM_QUANTILE},
    'free_sulfur_dioxide': {'trim_quantile': config.TRIM_QUANTILE},
}

BOXPLOT_ATTRIBUTES = ['alcohol', 'density', 'chlorides', 'volatile_acidity']

# Order in which predictors enter the nested linear models
MODEL_SEQUENCE = [
    'alcohol',
    'volatile_acidity',
    'residual_sugar',
    'density',
    'free_sulfur_dioxide',
    'pH',
    'sulphates',
]


# ──────────────────────────────────────────────
#  PUBLIC API
# ──────────────────────────────────────────────

def build_report_sections(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Compute every statistic and chart and interleave them with commentary.

    Parameters
    ----------
    df : pd.DataFrame
        Validated wine table (``utils.load_wine_data``). It is not modified.

    Returns
    -------
    list of dict
        Sections in reading order (see module docstring).
    """
    data = with_derived_columns(df)
    logger.info("Building report sections for %d wines", len(data))

    sections = []
    sections += _overview_sections(data)
    sections += _univariate_sections(data)
    sections += _bivariate_sections(data)
    sections += _multivariate_sections(data)
    sections += _final_sections(data)
    sections += _reflection_sections(data)

    logger.info("Built %d sections", len(sections))
    return sections


def sections_for_chapter(sections: List[Dict[str, Any]], chapter: str) -> List[Dict[str, Any]]:
    """Sections of one chapter, in reading order."""
    valid = [c for c, _ in CHAPTERS]
    if chapter not in valid:
        raise ValueError(f"Unknown chapter '{chapter}'. Expected one of: {', '.join(valid)}")
    return [s for s in sections if s['chapter'] == chapter]


def chapter_title(chapter: str) -> str:
    return dict(CHAPTERS)[chapter]


# ──────────────────────────────────────────────
#  CHAPTERS
# ──────────────────────────────────────────────

def _overview_sections(data: pd.DataFrame) -> List[Dict[str, Any]]:
    overview = dataset_overview(data[[config.ID_COL] + config.ATTRIBUTES + [config.QUALITY_COL]])

    paragraphs = [
        f"This report explores a dataset of <b>{overview['n_rows']:,}</b> white wines. "
        f"Each wine carries <b>{overview['n_attributes']}</b> physiochemical measurements "
        "and a quality score: the median of at least three ratings by wine experts on a "
        "scale from 0 (very bad) to 10 (excellent).",
        f"Observed quality scores run from <b>{overview['quality_min']}</b> to "
        f"<b>{overview['quality_max']}</b>, with a median of "
        f"<b>{overview['quality_median']:g}</b> and a mean of "
        f"<b>{overview['quality_mean']:.2f}</b>.",
        "The guiding question is which chemical properties influence the quality "
        "of white wines.",
    ]
    if overview['n_duplicated_measurements']:
        paragraphs.append(
            f"{overview['n_duplicated_measurements']:,} wines repeat another wine's "
            "measurements exactly. They keep their own identifiers and stay in the "
            "analysis, since separate samples can share identical lab results."
        )

    return [_section(
        'overview-dataset', 'overview', 'The Dataset',
        paragraphs,
        table=summary_table(data),
    )]


def _univariate_sections(data: pd.DataFrame) -> List[Dict[str, Any]]:
    sections = []

    dist = quality_distribution(data)
    modal = dist.loc[dist['count'].idxmax()]
    middle_share = dist.loc[dist[config.QUALITY_COL].between(5, 7), 'share'].sum()
    sections.append(_section(
        'univariate-quality', 'univariate', 'Quality',
        [
            f"The most common score is <b>{int(modal[config.QUALITY_COL])}</b>, given to "
            f"{int(modal['count']):,} wines ({modal['share']:.1%}). "
            f"Scores 5 to 7 cover <b>{middle_share:.1%}</b> of the dataset, so very good "
            "and very poor wines are rare.",
            "Quality is a discrete score, so in later charts it is jittered or treated "
            "as a grouping variable rather than a continuous axis.",
        ],
        figure=plot_quality_bar(data),
        table=dist,
    ))

    grades = grade_distribution(data)
    sections.append(_section(
        'univariate-grades', 'univariate', 'Quality Grades',
        [
            "To compare groups with enough wines in each, the scores are bucketed "
            "into three grades: <b>low</b> (5 and below), <b>medium</b> (6) and "
            "<b>high</b> (7 and above).",
            "; ".join(
                f"{row[config.GRADE_COL]}: {row['count']:,} wines ({row['share']:.1%})"
                for _, row in grades.iterrows()
            ) + ".",
        ],
        table=grades,
    ))

    outliers = outlier_counts(data)
    for col in config.ATTRIBUTES:
        s = descriptive_statistics(data[col])
        options = HISTOGRAM_OPTIONS.get(col, {})
        paragraphs = [
            ATTRIBUTE_NOTES[col],
            f"The median is <b>{s['median']:.4g}</b> with an interquartile range of "
            f"{s['q1']:.4g} to {s['q3']:.4g}; values span {s['minimum']:.4g} to "
            f"{s['maximum']:.4g}. The distribution is {_describe_skew(s['skewness'])} "
            f"(skewness {s['skewness']:.2f}), and {outliers.loc[col, 'n_outliers']:,} wines "
            f"({outliers.loc[col, 'share']:.1%}) fall outside the Tukey fences.",
        ]
        if options.get('log_x'):
            paragraphs.append(
                "The long right tail squeezes most wines into the first few bins, so "
                "the histogram is drawn on a log10 scale, which spreads out the bulk "
                "of the distribution."
            )
        if options.get('trim_quantile'):
            paragraphs.append(
                f"The top {100 * (1 - options['trim_quantile']):g}% of values are "
                "left out of the chart to keep the main body of the distribution visible."
            )
        sections.append(_section(
            f"univariate-{col}", 'univariate', _attribute_title(col),
            paragraphs,
            figure=plot_histogram(data, col, **options),
        ))

    worst = outliers['share'].idxmax()
    sections.append(_section(
        'univariate-outliers', 'univariate', 'Outliers',
        [
            "Counting wines beyond 1.5 interquartile ranges from the quartiles "
            f"shows where the tails are heaviest: <b>{worst.replace('_', ' ')}</b> has the "
            f"largest share of outliers ({outliers.loc[worst, 'share']:.1%}). The outliers "
            "are kept in the data; charts trim them only where noted.",
        ],
        table=outliers,
    ))

    return sections


def _bivariate_sections(data: pd.DataFrame) -> List[Dict[str, Any]]:
    sections = []
    columns = config.ATTRIBUTES + [config.QUALITY_COL]

    corr, pvals = compute_correlation_matrix(data[columns])
    with_quality = correlations_with(data)
    pairs = get_correlation_summary(
        corr.loc[config.ATTRIBUTES, config.ATTRIBUTES],
        pvals.loc[config.ATTRIBUTES, config.ATTRIBUTES],
    )
    top = with_quality.iloc[0]
    runners_up = ", ".join(
        f"{row['variable'].replace('_', ' ')} ({row['r']:+.2f})"
        for _, row in with_quality.iloc[1:3].iterrows()
    )
    strongest_pair = pairs.iloc[0]

    sections.append(_section(
        'bivariate-correlation', 'bivariate', 'Correlation Matrix',
        [
            "Pearson correlations between every pair of variables; an asterisk marks "
            "coefficients significant at the 5% level.",
            f"The strongest correlate of quality is <b>{top['variable'].replace('_', ' ')}</b> "
            f"(r = {top['r']:+.2f}), followed by {runners_up}. "
            f"Among the attributes themselves the strongest relationship is between "
            f"<b>{strongest_pair['Variable 1'].replace('_', ' ')}</b> and "
            f"<b>{strongest_pair['Variable 2'].replace('_', ' ')}</b> "
            f"(r = {strongest_pair['Correlation']:+.2f}).",
        ],
        figure=create_correlation_heatmap(corr, pvals, title="Correlation Matrix (Pearson)"),
    ))

    sections.append(_section(
        'bivariate-quality-correlates', 'bivariate', 'Correlations with Quality',
        [
            "Each attribute's correlation with quality, strongest first. None of "
            "the attributes comes close to determining quality on its own."
            if top['abs_r'] < 0.7 else
            "Each attribute's correlation with quality, strongest first.",
        ],
        table=with_quality.round(4),
    ))

    r_by_var = with_quality.set_index('variable')['r']
    for col in BOXPLOT_ATTRIBUTES:
        grouped = grouped_statistics(data, col)
        first_q, last_q = grouped.index[0], grouped.index[-1]
        trim = config.TRIM_QUANTILE if col in ('chlorides', 'volatile_acidity') else None
        paragraphs = [
            f"Median {col.replace('_', ' ')} is <b>{grouped.loc[first_q, 'median']:.4g}</b> "
            f"for quality {first_q} wines and <b>{grouped.loc[last_q, 'median']:.4g}</b> "
            f"for quality {last_q} wines (r with quality {r_by_var[col]:+.2f}). "
            "Diamonds mark the group means.",
        ]
        if trim:
            paragraphs.append(
                f"Values above the {trim:.0%} quantile are left out of the chart."
            )
        sections.append(_section(
            f"bivariate-box-{col}", 'bivariate',
            f"{col.replace('_', ' ').capitalize()} by Quality",
            paragraphs,
            figure=create_quality_boxplot(data, col, trim_quantile=trim),
            table=grouped,
        ))

    sections.append(_section(
        'bivariate-alcohol-quality', 'bivariate', 'Alcohol and Quality',
        [
            "Quality plotted against alcohol with the scores jittered horizontally "
            "to separate the overlapping wines. The least-squares line makes the "
            f"positive trend explicit (r = {r_by_var['alcohol']:+.2f}).",
        ],
        figure=create_scatter_plot(
            data, config.QUALITY_COL, 'alcohol', jitter=0.3, opacity=0.25, trendline=True,
            title="Alcohol by quality (jittered)",
        ),
    ))

    sections.append(_section(
        'bivariate-density-alcohol', 'bivariate', 'Density and Alcohol',
        [
            f"Density falls as alcohol rises (r = {corr.loc['density', 'alcohol']:+.2f}): "
            "ethanol is lighter than water, so stronger wines are less dense.",
        ],
        figure=create_scatter_plot(
            data, 'alcohol', 'density', trendline=True, trim_quantile=config.TRIM_QUANTILE,
        ),
    ))

    sections.append(_section(
        'bivariate-density-sugar', 'bivariate', 'Density and Residual Sugar',
        [
            f"Density rises with residual sugar (r = {corr.loc['density', 'residual_sugar']:+.2f}): "
            "dissolved sugar is heavier than water. Together with alcohol, sugar "
            "accounts for most of the variation in density.",
        ],
        figure=create_scatter_plot(
            data, 'residual_sugar', 'density', trendline=True, trim_quantile=config.TRIM_QUANTILE,
        ),
    ))

    pka = pd.DataFrame(
        [(acid, value) for acid, value in config.ACID_PKA1.items()],
        columns=['acid', 'pK_a1'],
    )
    sections.append(_section(
        'bivariate-ph-acidity', 'bivariate', 'pH and the Acids',
        [
            "pH should fall as acid content rises. The acids are not equally "
            "strong, though: a lower first dissociation constant pK<sub>a1</sub> means "
            "a stronger acid that releases more hydrogen ions at wine pH.",
            f"Tartaric acid, measured as fixed acidity, is the strongest of the wine acids "
            f"(pK<sub>a1</sub> {config.ACID_PKA1['tartaric']}) and shows the clearest link "
            f"to pH (r = {corr.loc['pH', 'fixed_acidity']:+.2f}). Citric acid "
            f"(pK<sub>a1</sub> {config.ACID_PKA1['citric']}) follows with "
            f"r = {corr.loc['pH', 'citric_acid']:+.2f}, while acetic acid, the volatile "
            f"acidity (pK<sub>a1</sub> {config.ACID_PKA1['acetic']}), is weak and present "
            f"in small amounts (r = {corr.loc['pH', 'volatile_acidity']:+.2f}).",
        ],
        figure=create_scatter_plot(data, 'fixed_acidity', 'pH', trendline=True),
        table=pka,
    ))

    sections.append(_alcohol_grade_test_section(data))
    return sections


def _multivariate_sections(data: pd.DataFrame) -> List[Dict[str, Any]]:
    sections = []
    grades = list(config.QUALITY_GRADES.keys())

    sections.append(_section(
        'multivariate-density-alcohol', 'multivariate', 'Density, Alcohol and Quality',
        [
            "Coloring the density and alcohol scatter by grade shows the high grade "
            "wines concentrated at high alcohol and low density, with one "
            "least-squares line per grade.",
            _grade_medians_sentence(data, 'alcohol', grades),
        ],
        figure=create_grade_scatter(
            data, 'alcohol', 'density', trim_quantile=config.TRIM_QUANTILE,
        ),
    ))

    sections.append(_section(
        'multivariate-density-sugar', 'multivariate', 'Density, Residual Sugar and Quality',
        [
            "For a given residual sugar, higher grade wines tend to be less dense, "
            "which is the alcohol effect seen from another angle.",
            _grade_medians_sentence(data, 'density', grades),
        ],
        figure=create_grade_scatter(
            data, 'residual_sugar', 'density', trim_quantile=config.TRIM_QUANTILE,
        ),
    ))

    sections.append(_section(
        'multivariate-alcohol-chlorides', 'multivariate', 'Alcohol and Chlorides per Grade',
        [
            "One panel per grade with shared axes. Saltier wines tend to carry "
            f"less alcohol (r = {data['alcohol'].corr(data['chlorides']):+.2f}).",
            _grade_medians_sentence(data, 'chlorides', grades),
        ],
        figure=create_grade_facets(
            data, 'alcohol', 'chlorides', trim_quantile=config.TRIM_QUANTILE,
        ),
    ))

    sections.append(_section(
        'multivariate-alcohol-density-by-grade', 'multivariate', 'Alcohol Distribution per Grade',
        [
            "Normalized histograms of alcohol for each grade; the high grade "
            "distribution sits to the right of the others.",
        ],
        figure=create_grade_density(data, 'alcohol'),
    ))

    sections.append(_section(
        'multivariate-3d', 'multivariate', 'Alcohol, Residual Sugar and Density in 3-D',
        [
            "Density is almost fully determined by alcohol and residual sugar, so the "
            "wines lie close to a surface in this space. Rotate the chart to view it "
            "edge-on.",
        ],
        figure=create_scatter_3d(
            data, 'alcohol', 'residual_sugar', 'density',
            trim_quantile=config.TRIM_QUANTILE,
        ),
    ))

    models = fit_nested_models(data, MODEL_SEQUENCE)
    first, last = models.iloc[0], models.iloc[-1]
    sections.append(_section(
        'multivariate-linear-models', 'multivariate', 'Linear Models of Quality',
        [
            "A sequence of nested least-squares models, each adding one attribute "
            "to the previous one.",
            f"Alcohol alone explains R² = <b>{first['r_squared']:.3f}</b> of the variance "
            f"in quality; with all {len(MODEL_SEQUENCE)} attributes R² reaches "
            f"<b>{last['r_squared']:.3f}</b> (residual standard error "
            f"{last['residual_se']:.3f} quality points). Most of the variation in the "
            "experts' scores is not captured by a linear combination of these "
            "measurements." if last['r_squared'] < 0.5 else
            f"Alcohol alone explains R² = <b>{first['r_squared']:.3f}</b> of the variance "
            f"in quality; with all {len(MODEL_SEQUENCE)} attributes R² reaches "
            f"<b>{last['r_squared']:.3f}</b>.",
        ],
        table=models,
    ))

    return sections


def _final_sections(data: pd.DataFrame) -> List[Dict[str, Any]]:
    dist = quality_distribution(data)
    alcohol_by_q = grouped_statistics(data, 'alcohol')
    r_alcohol = data['alcohol'].corr(data[config.QUALITY_COL])

    return [
        _section(
            'final-quality', 'final', 'Plot One: Quality Scores',
            [
                f"Most wines are rated average: {dist['share'].max():.1%} share the most "
                "common score and the extremes of the scale are sparsely populated. Any "
                "model of quality is therefore trained mostly on middle-of-the-road wines.",
            ],
            figure=plot_quality_bar(data, title="Quality of White Wines"),
        ),
        _section(
            'final-alcohol', 'final', 'Plot Two: Alcohol by Quality',
            [
                "Alcohol is the single attribute most associated with quality "
                f"(r = {r_alcohol:+.2f}). The median alcohol of the best rated wines "
                f"({alcohol_by_q['median'].iloc[-1]:.2f}%) is well above that of the "
                f"lowest rated ({alcohol_by_q['median'].iloc[0]:.2f}%).",
            ],
            figure=create_quality_boxplot(
                data, 'alcohol', show_points=True,
                title="Alcohol Content by Quality Score",
            ),
        ),
        _section(
            'final-density-alcohol', 'final', 'Plot Three: Density, Alcohol and Grade',
            [
                "Density and alcohol are tightly and negatively related, and the high "
                "grade wines cluster at the high alcohol, low density end. Density "
                "carries much of the same information as alcohol, which is why it "
                "adds little once alcohol is in a model.",
            ],
            figure=create_grade_scatter(
                data, 'alcohol', 'density', trim_quantile=config.TRIM_QUANTILE,
                title="Density vs Alcohol by Quality Grade",
            ),
        ),
    ]


def _reflection_sections(data: pd.DataFrame) -> List[Dict[str, Any]]:
    with_quality = correlations_with(data)
    top = with_quality.iloc[0]

    return [_section(
        'reflection', 'reflection', 'Reflection',
        [
            f"The analysis started from {len(data):,} wines and {len(config.ATTRIBUTES)} "
            "measurements, looking first at each variable alone, then in pairs, then "
            f"with quality as a grouping dimension. {top['variable'].replace('_', ' ').capitalize()} "
            f"stood out as the clearest signal (r = {top['r']:+.2f}), and density turned "
            "out to be largely a by-product of alcohol and residual sugar.",
            "The main difficulty is the target itself. Quality is a discrete, "
            "subjective score concentrated on a few middle values, so differences "
            "between groups are modest and the extremes rest on few wines. The "
            "linear models confirm that chemistry alone explains only part of the "
            "ratings.",
            "Further work could bring in attributes the dataset lacks, such as grape "
            "variety, vintage or price, compare these findings with red wines, or fit "
            "models that treat quality as an ordered category.",
        ],
    )]


# ──────────────────────────────────────────────
#  HELPERS
# ──────────────────────────────────────────────

def _section(
    section_id: str,
    chapter: str,
    title: str,
    paragraphs: List[str],
    figure: Optional[go.Figure] = None,
    table: Optional[pd.DataFrame] = None,
) -> Dict[str, Any]:
    return {
        'id': section_id,
        'chapter': chapter,
        'title': title,
        'paragraphs': paragraphs,
        'figure': figure,
        'table': table,
    }


def _attribute_title(column: str) -> str:
    return column if column == 'pH' else column.replace('_', ' ').capitalize()


def _describe_skew(skewness: float) -> str:
    if skewness > 1:
        return "strongly right-skewed"
    if skewness > 0.5:
        return "moderately right-skewed"
    if skewness < -1:
        return "strongly left-skewed"
    if skewness < -0.5:
        return "moderately left-skewed"
    return "roughly symmetric"


def _grade_medians_sentence(data: pd.DataFrame, column: str, grades: List[str]) -> str:
    medians = grouped_statistics(data, column, by=config.GRADE_COL)['median']
    parts = [f"{g} {medians[g]:.4g}" for g in grades if g in medians.index]
    return f"Median {column.replace('_', ' ')} by grade: " + ", ".join(parts) + "."


def _alcohol_grade_test_section(data: pd.DataFrame) -> Dict[str, Any]:
    """Welch test of alcohol, high grade vs the rest."""
    title = 'Alcohol in High Grade Wines'
    try:
        result = compare_grades(data, 'alcohol')
    except ValueError as e:
        logger.warning("Skipping alcohol grade comparison: %s", e)
        return _section(
            'bivariate-alcohol-test', 'bivariate', title,
            [f"The grade comparison could not be computed: {e}."],
        )

    diff = result['difference']
    test = result['test']
    table = pd.DataFrame(result['descriptive']).T.round(4)
    return _section(
        'bivariate-alcohol-test', 'bivariate', title,
        [
            "A Welch two-sample t-test compares the alcohol content of high grade "
            "wines with all the others, without assuming equal variances.",
            f"High grade wines carry <b>{diff['estimate']:+.2f}</b> percentage points of "
            f"alcohol on average ({diff['confidence']:.0f}% CI {diff['ci_lower']:.2f} to "
            f"{diff['ci_upper']:.2f}; t = {test['t_value']:.2f}, "
            f"p = {test['p_value']:.2g}). {result['conclusion']}.",
        ],
        table=table,
    )
