"""Tests for idea_scanner.validation - rule checks and quality scoring."""

import pytest

from idea_scanner import (
    InputQualityValidator,
    check_business_completeness,
    check_content_quality,
    check_min_length,
    confidence_from_quality,
    length_status,
    split_sentences,
)
from idea_scanner.validation import clarity_metric, mean_sentence_length


class TestMinLength:
    """Tests for the min-length rule."""

    def test_short_input_fails_with_zero_score(self):
        """Inputs under 50 characters score 0."""
        result = check_min_length('test123')
        assert result.rule_id == 'min-length'
        assert result.is_valid is False
        assert result.score == 0
        assert result.severity == 'error'
        assert len(result.suggestions) == 3

    def test_long_but_few_words_scores_25(self):
        """50+ characters but fewer than 20 words."""
        text = 'Supercalifragilistic expialidocious platform for everyone'
        assert len(text) >= 50
        result = check_min_length(text)
        assert result.is_valid is False
        assert result.score == 25

    def test_enough_words_scores_word_count(self, healthcare_idea):
        """Valid inputs score their word count, capped at 100."""
        result = check_min_length(healthcare_idea)
        assert result.is_valid is True
        assert result.score == 80
        assert '80 words' in result.message

    def test_score_capped_at_100(self):
        """Very long inputs score at most 100."""
        result = check_min_length('word ' * 150)
        assert result.score == 100

    def test_non_string_raises(self):
        """Non-string input is rejected."""
        with pytest.raises(TypeError):
            check_min_length(None)


class TestContentQuality:
    """Tests for the content-quality rule."""

    @pytest.mark.parametrize('text', [
        'Lorem Ipsum dolor sit amet for a platform',
        'This is just a TEST of the platform',
        'An EXAMPLE business idea',
        'TBD - will decide later',
        'Demo app',
    ])
    def test_placeholder_text_scores_10(self, text):
        """Any placeholder token, in any case, fails the rule."""
        result = check_content_quality(text)
        assert result.is_valid is False
        assert result.score == 10
        assert result.confidence == 0.95

    def test_rich_business_text_scores_high(self, healthcare_idea):
        """Five keyword hits and moderate sentences score 100."""
        result = check_content_quality(healthcare_idea)
        assert result.is_valid is True
        assert result.score == 100
        assert result.suggestions == []

    def test_no_keywords_single_word(self):
        """No keywords and no sentence structure averages to 25."""
        result = check_content_quality('hello')
        assert result.score == 25
        assert result.is_valid is False

    def test_no_sentences_uses_neutral_structure(self):
        """Text without any sentence content gets structure 50."""
        result = check_content_quality('...')
        assert result.score == 25


class TestBusinessCompleteness:
    """Tests for the business-completeness rule."""

    def test_all_aspects_covered(self, healthcare_idea):
        result = check_business_completeness(healthcare_idea)
        assert result.score == 100
        assert result.is_valid is True
        assert result.suggestions == []
        assert result.message == 'Business completeness: 100%. Covers 5/5 key aspects.'

    def test_missing_aspects_listed(self):
        """Missing aspects are named in the first suggestion."""
        result = check_business_completeness('A platform for customers')
        # solution (platform) and target (customer) covered
        assert result.score == 40
        assert result.is_valid is False
        assert 'problem' in result.suggestions[0]
        assert 'business' in result.suggestions[0]

    def test_sixty_percent_is_valid(self):
        result = check_business_completeness('A platform for customers with subscription pricing')
        assert result.score == 60
        assert result.is_valid is True


class TestValidator:
    """Tests for InputQualityValidator."""

    def test_every_rule_runs(self):
        """All three rules report even when the first fails."""
        results = InputQualityValidator().validate('test123')
        assert [r.rule_id for r in results] == [
            'min-length', 'content-quality', 'business-completeness',
        ]

    def test_quality_score_is_mean_of_rules(self, healthcare_idea):
        validator = InputQualityValidator()
        results = validator.validate(healthcare_idea)
        expected = sum(r.score for r in results) / 3
        assert validator.quality_score(healthcare_idea) == pytest.approx(expected)

    def test_short_placeholder_input_scores_low(self):
        """Placeholder and too-short input scores under 30."""
        assert InputQualityValidator().quality_score('test123') < 30

    def test_quality_score_with_record_blends_metrics(self, generator, healthcare_idea):
        """With a comprehensive record the score averages in the metrics."""
        validator = InputQualityValidator()
        record = generator.generate(healthcare_idea, 'comprehensive')
        metrics = validator.quality_metrics(healthcare_idea, record)
        assert set(metrics) == {'clarity', 'completeness', 'accuracy', 'actionability'}
        weighted = (metrics['clarity'] * 0.25 + metrics['completeness'] * 0.30
                    + metrics['accuracy'] * 0.25 + metrics['actionability'] * 0.20)
        plain = validator.quality_score(healthcare_idea)
        blended = validator.quality_score(healthcare_idea, record)
        assert blended == pytest.approx((plain + weighted) / 2)

    def test_no_rules_scores_zero(self):
        assert InputQualityValidator(rules=()).quality_score('anything') == 0.0

    def test_summarize_collects_issues(self):
        summary = InputQualityValidator().summarize('test123')
        assert summary['isValid'] is False
        assert len(summary['issues']) == 3
        assert isinstance(summary['score'], int)
        assert len(summary['suggestions']) == len(set(summary['suggestions']))

    def test_summarize_valid_input(self, healthcare_idea):
        summary = InputQualityValidator().summarize(healthcare_idea)
        assert summary['isValid'] is True
        assert summary['issues'] == []

    def test_non_string_raises(self):
        with pytest.raises(TypeError):
            InputQualityValidator().validate(42)


class TestHelpers:
    """Tests for sentence and label helpers."""

    def test_split_sentences_drops_empties(self):
        assert split_sentences('One. Two!! Three?') == ['One', 'Two', 'Three']
        assert split_sentences('...') == []

    def test_mean_sentence_length_empty(self):
        assert mean_sentence_length('') == 0.0

    def test_clarity_zero_without_sentences(self, generator):
        record = generator.generate('x', 'comprehensive')
        assert clarity_metric('', record) == 0.0

    @pytest.mark.parametrize('length,label', [
        (10, 'Too short'),
        (50, 'Good length'),
        (300, 'Good length'),
        (301, 'Almost long'),
        (500, 'Almost long'),
        (501, 'Too long'),
    ])
    def test_length_status(self, length, label):
        assert length_status('a' * length) == label

    @pytest.mark.parametrize('score,label', [
        (95, 'Very High'),
        (80, 'High'),
        (65, 'Medium'),
        (45, 'Low'),
        (10, 'Very Low'),
    ])
    def test_confidence_from_quality(self, score, label):
        assert confidence_from_quality(score) == label
