"""Tests for report generation functions."""

import json

import pytest

from idea_scanner import generate_json_report, generate_report


@pytest.fixture
def comprehensive_record(generator, healthcare_idea):
    """A generated comprehensive analysis."""
    return generator.generate(healthcare_idea, 'comprehensive')


class TestGenerateReport:
    """Tests for generate_report function."""

    def test_report_has_header(self, make_record):
        record = make_record(1)
        report = generate_report(record)

        assert 'SAAS IDEA ANALYSIS REPORT' in report
        assert f'Analysis ID: {record.id}' in report
        assert f'Date: {record.timestamp}' in report
        assert f'Score: {record.overall_score}/100' in report

    def test_horizontal_sections(self, make_record):
        report = generate_report(make_record(1))

        assert 'Target Audience: Healthcare providers' in report
        assert 'Competitors: Salesforce, HubSpot, Pipedrive' in report
        assert 'Innovation Level: Medium' in report

    def test_legacy_sections(self, generator):
        record = generator.generate('A bookkeeping tool for freelancers', 'legacy')
        report = generate_report(record)

        assert f'Validity: {record.validity}' in report
        assert 'ISSUES' in report
        assert 'RECOMMENDATIONS' in report
        assert record.issues[0][:20] in report

    def test_comprehensive_sections(self, comprehensive_record):
        report = generate_report(comprehensive_record)

        for heading in ('OVERVIEW', 'MARKET', 'TECHNICAL', 'FINANCIALS', 'RISKS',
                        'OPPORTUNITIES', 'IMMEDIATE ACTIONS', 'MILESTONES'):
            assert heading in report
        assert f'Verdict: {comprehensive_record.verdict}' in report
        assert f'TAM: {comprehensive_record.market.tam}' in report
        assert 'year1:' in report

    def test_lines_wrapped(self, make_record):
        record = make_record(1, original_idea='word ' * 60)
        report = generate_report(record)

        assert all(len(line) <= 65 for line in report.splitlines())

    def test_unknown_type_raises(self):
        with pytest.raises(TypeError):
            generate_report({'id': 'x'})


class TestGenerateJsonReport:
    """Tests for generate_json_report function."""

    def test_json_structure(self, make_record):
        record = make_record(1)
        result = generate_json_report(record)

        assert result['version'] == '2.0'
        assert result['exportDate'].endswith('Z')
        assert result['analysis'] == record.to_dict()

    def test_json_serializable(self, comprehensive_record):
        """Result should be JSON serializable."""
        result = generate_json_report(comprehensive_record)
        parsed = json.loads(json.dumps(result, ensure_ascii=False))

        assert parsed['analysis']['schema'] == 'comprehensive'
        assert parsed['analysis']['overallRating'] == comprehensive_record.overall_rating
