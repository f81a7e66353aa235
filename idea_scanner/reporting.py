"""Report generation: human-readable text and JSON formats.

Both take a normalized analysis record of any schema. The text report is
meant for the terminal or for pasting into a document; the JSON report is
the versioned export of a single analysis.
"""

import textwrap

from .models import (
    LegacyAnalysis,
    HorizontalAnalysis,
    ComprehensiveAnalysis,
    format_timestamp,
    utc_now,
)


REPORT_VERSION = '2.0'
WIDTH = 65


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------

def _wrap(label: str, value: str) -> list[str]:
    """Label + value wrapped to the report width."""
    prefix = f'{label}: '
    return textwrap.wrap(str(value), width=WIDTH, initial_indent=prefix,
                         subsequent_indent=' ' * len(prefix)) or [prefix.rstrip()]


def _bullets(title: str, items: list) -> list[str]:
    if not items:
        return []
    lines = [title, '-' * len(title)]
    for item in items:
        lines += textwrap.wrap(str(item), width=WIDTH, initial_indent='  - ',
                               subsequent_indent='    ')
    lines.append('')
    return lines


def _section_header(record) -> list[str]:
    """Build the report header lines."""
    return [
        '=' * WIDTH,
        '              SAAS IDEA ANALYSIS REPORT',
        '=' * WIDTH,
        f'Analysis ID: {record.id}',
        f'Date: {record.timestamp}',
        f'Score: {record.rating}/100',
        '',
        *_wrap('Idea', record.source_text),
        '',
    ]


# ---------------------------------------------------------------------------
# Per-schema sections
# ---------------------------------------------------------------------------

def _sections_legacy(record: LegacyAnalysis) -> list[str]:
    lines = [f'Validity: {record.validity}', '']
    lines += _bullets('ISSUES', record.issues)
    lines += _bullets('RECOMMENDATIONS', record.recommendations)
    return lines


def _sections_horizontal(record: HorizontalAnalysis) -> list[str]:
    lines = []
    lines += _wrap('Target Audience', record.target_audience)
    lines += _wrap('Problems Solved', record.problems_solved)
    lines += _wrap('Proposed Solution', record.proposed_solution)
    lines += _wrap('Competitors', ', '.join(record.competitors))
    lines += _wrap('Scalability', record.scalability)
    lines += _wrap('Revenue Model', record.revenue_model)
    lines += [f'Innovation Level: {record.innovation_level}', '']
    return lines


def _sections_comprehensive(record: ComprehensiveAnalysis) -> list[str]:
    lines = [
        f'Verdict: {record.verdict}',
        f'Confidence: {record.confidence_level}',
        f'Input Quality: {record.input_quality_score}/100',
        f'Overall Risk: {record.overall_risk_level}',
        f'Innovation Level: {record.innovation_level}',
        '',
    ]
    lines += _wrap('Summary', record.summary)
    lines.append('')

    lines += ['OVERVIEW', '-' * 8]
    lines += _wrap('Target Audience', record.target_audience)
    lines += _wrap('Problems Solved', record.problems_solved)
    lines += _wrap('Proposed Solution', record.proposed_solution)
    lines += _wrap('Competitors', ', '.join(record.competitors))
    lines += _wrap('Scalability', record.scalability)
    lines += _wrap('Profit Model', record.profit_model)
    lines.append('')

    m = record.market
    lines += [
        'MARKET', '-' * 6,
        f'TAM: {m.tam}   SAM: {m.sam}   SOM: {m.som}',
        f'Growth: {m.growth}',
        '',
    ]
    lines += _bullets('Trends', m.trends)

    t = record.technical
    lines += ['TECHNICAL', '-' * 9]
    lines += _wrap('Architecture', t.architecture_complexity)
    lines += _wrap('Implementation', t.implementation_complexity)
    lines += _wrap('Timeline', t.development_timeline)
    lines += _wrap('Team', t.resource_requirements)
    lines.append('')

    f = record.financials
    lines += ['FINANCIALS', '-' * 10]
    lines += _wrap('Development Cost', f.development_cost)
    lines += _wrap('Funding', f.funding_requirements)
    lines += _wrap('Break-even', f.break_even_timeline)
    for year, value in f.revenue_projections.items():
        lines.append(f'  {year}: {value}')
    lines.append('')

    lines += ['RISKS', '-' * 5]
    for risk in record.risks:
        lines += textwrap.wrap(
            f'[{risk.category}] {risk.risk} (probability {risk.probability}, '
            f'impact {risk.impact})',
            width=WIDTH, initial_indent='  - ', subsequent_indent='    ',
        )
    lines.append('')

    lines += _bullets('OPPORTUNITIES', record.opportunities)
    lines += _bullets('IMMEDIATE ACTIONS', record.recommendations.immediate)
    lines += _bullets('SHORT TERM', record.recommendations.short_term)
    lines += _bullets('LONG TERM', record.recommendations.long_term)

    stage = record.stage
    ready = 'yes' if stage.ready_for_next_stage else 'no'
    lines += [f'Stage: {stage.current_stage} (ready for next stage: {ready})', '']
    lines += _bullets('MILESTONES', stage.milestones)
    return lines


_SECTIONS = {
    LegacyAnalysis: _sections_legacy,
    HorizontalAnalysis: _sections_horizontal,
    ComprehensiveAnalysis: _sections_comprehensive,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate_report(record) -> str:
    """Generate the human-readable analysis report."""
    try:
        sections = _SECTIONS[type(record)]
    except KeyError:
        raise TypeError(f'cannot report on {type(record).__name__}')
    lines: list[str] = []
    lines += _section_header(record)
    lines += sections(record)
    lines.append('=' * WIDTH)
    return '\n'.join(lines)


def generate_json_report(record) -> dict:
    """Generate a JSON report for programmatic use."""
    return {
        'version': REPORT_VERSION,
        'exportDate': format_timestamp(utc_now()),
        'analysis': record.to_dict(),
    }
