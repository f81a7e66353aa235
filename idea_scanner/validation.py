"""Input quality validation and scoring.

Each rule is a plain function taking the raw idea text and returning one
ValidationResult. The validator runs every rule unconditionally; callers
average the scores explicitly via ``quality_score``.
"""

import re

from .models import ValidationResult, ComprehensiveAnalysis
from .patterns import (
    PLACEHOLDER_TOKENS,
    VALIDATION_BUSINESS_KEYWORDS,
    BUSINESS_ASPECTS,
    ACTION_WORDS,
    count_hits,
)


MAX_INPUT_CHARACTERS = 500

_SENTENCE_SPLIT = re.compile(r'[.!?]+')


def _require_text(text) -> str:
    if not isinstance(text, str):
        raise TypeError(f'idea text must be a string, not {type(text).__name__}')
    return text


def split_sentences(text: str) -> list:
    """Sentences split on terminal punctuation, empties dropped."""
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def mean_sentence_length(text: str) -> float:
    """Mean words per sentence, 0 when there are no sentences."""
    sentences = split_sentences(text)
    if not sentences:
        return 0.0
    return sum(len(s.split()) for s in sentences) / len(sentences)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def check_min_length(text: str) -> ValidationResult:
    """Minimum length: 50 characters and 20 words."""
    stripped = _require_text(text).strip()
    char_count = len(stripped)
    word_count = len(stripped.split())

    if char_count < 50:
        return ValidationResult(
            rule_id='min-length',
            is_valid=False,
            score=0,
            message='Input too short. Please provide at least 50 characters.',
            confidence=1.0,
            severity='error',
            category='length',
            suggestions=[
                'Add more details about your target audience',
                "Describe the problem you're solving",
                'Explain your proposed solution',
            ],
        )
    if word_count < 20:
        return ValidationResult(
            rule_id='min-length',
            is_valid=False,
            score=25,
            message='Input lacks detail. Please provide at least 20 words for meaningful analysis.',
            confidence=0.9,
            severity='error',
            category='length',
            suggestions=[
                'Expand on the problem statement',
                'Include information about your target market',
                'Describe key features or benefits',
            ],
        )
    return ValidationResult(
        rule_id='min-length',
        is_valid=True,
        score=min(100, word_count),
        message=f'Good input length with {word_count} words.',
        confidence=0.8,
        severity='error',
        category='length',
    )


def check_content_quality(text: str) -> ValidationResult:
    """Placeholder detection, business vocabulary and sentence structure."""
    lowered = _require_text(text).lower()

    if any(token in lowered for token in PLACEHOLDER_TOKENS):
        return ValidationResult(
            rule_id='content-quality',
            is_valid=False,
            score=10,
            message='Input appears to contain placeholder text. Please provide real content.',
            confidence=0.95,
            severity='warning',
            category='content',
            suggestions=[
                'Replace placeholder text with actual details',
                'Describe a real problem and solution',
                'Provide specific information about your idea',
            ],
        )

    keyword_score = min(100, count_hits(lowered, VALIDATION_BUSINESS_KEYWORDS) * 20)
    sentences = split_sentences(text)
    if sentences:
        avg = mean_sentence_length(text)
        structure_score = 100 if 5 < avg < 30 else 50
    else:
        structure_score = 50
    score = (keyword_score + structure_score) / 2

    if score >= 70:
        message = 'Good content quality detected.'
        suggestions = []
    else:
        message = 'Content could be more detailed and business-focused.'
        suggestions = [
            'Include more business-specific terminology',
            'Describe the problem and solution more clearly',
            'Add details about target customers and market',
        ]
    return ValidationResult(
        rule_id='content-quality',
        is_valid=score >= 40,
        score=score,
        message=message,
        confidence=0.7,
        severity='warning',
        category='content',
        suggestions=suggestions,
    )


def check_business_completeness(text: str) -> ValidationResult:
    """Coverage of the five business aspects."""
    lowered = _require_text(text).lower()
    covered = [name for name, keywords in BUSINESS_ASPECTS
               if any(k in lowered for k in keywords)]
    missing = [name for name, _ in BUSINESS_ASPECTS if name not in covered]
    score = len(covered) / len(BUSINESS_ASPECTS) * 100

    suggestions = []
    if missing:
        suggestions = [
            f"Consider adding information about: {', '.join(missing)}",
            "Describe the problem you're solving",
            'Explain your target audience',
            'Mention the value proposition',
        ]
    return ValidationResult(
        rule_id='business-completeness',
        is_valid=score >= 60,
        score=score,
        message=(f'Business completeness: {round(score)}%. '
                 f'Covers {len(covered)}/{len(BUSINESS_ASPECTS)} key aspects.'),
        confidence=0.8,
        severity='info',
        category='completeness',
        suggestions=suggestions,
    )


DEFAULT_RULES = (check_min_length, check_content_quality, check_business_completeness)


# ---------------------------------------------------------------------------
# Weighted quality metrics (need a generated comprehensive record)
# ---------------------------------------------------------------------------

def clarity_metric(text: str, record: ComprehensiveAnalysis) -> float:
    avg = mean_sentence_length(text)
    if not avg:
        return 0.0
    if 10 <= avg <= 25:
        return 100.0
    return max(0.0, 100 - abs(avg - 17.5) * 4)


def completeness_metric(text: str, record: ComprehensiveAnalysis) -> float:
    sections = (
        record.target_audience,
        record.market,
        record.problems_solved,
        record.proposed_solution,
        record.profit_model,
        record.competitors,
    )
    return sum(1 for s in sections if s) / len(sections) * 100


def accuracy_metric(text: str, record: ComprehensiveAnalysis) -> float:
    score = 100.0
    if record.overall_rating > 95:
        score -= 20
    if record.overall_rating < 10:
        score -= 20
    if record.verdict == 'Highly Viable' and record.overall_risk_level == 'High':
        score -= 30
    if record.verdict == 'Not Viable' and record.overall_risk_level == 'Low':
        score -= 30
    return max(0.0, score)


def actionability_metric(text: str, record: ComprehensiveAnalysis) -> float:
    items = record.recommendations.all_items()
    if not items:
        return 0.0
    actionable = [i for i in items if any(w in i.lower() for w in ACTION_WORDS)]
    return len(actionable) / len(items) * 100


QUALITY_METRICS = (
    ('clarity', 0.25, clarity_metric),
    ('completeness', 0.30, completeness_metric),
    ('accuracy', 0.25, accuracy_metric),
    ('actionability', 0.20, actionability_metric),
)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

def length_status(text: str, max_characters: int = MAX_INPUT_CHARACTERS) -> str:
    """Human label for the input length."""
    length = len(_require_text(text))
    if length < 50:
        return 'Too short'
    if length <= max_characters * 0.6:
        return 'Good length'
    if length <= max_characters:
        return 'Almost long'
    return 'Too long'


def confidence_from_quality(score: float) -> str:
    """Confidence label for a 0-100 quality score."""
    if score >= 90:
        return 'Very High'
    if score >= 75:
        return 'High'
    if score >= 60:
        return 'Medium'
    if score >= 40:
        return 'Low'
    return 'Very Low'


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class InputQualityValidator:
    """Runs the rule set against raw idea text."""

    def __init__(self, rules=DEFAULT_RULES, metrics=QUALITY_METRICS):
        self.rules = tuple(rules)
        self.metrics = tuple(metrics)

    def validate(self, text: str) -> list:
        """One result per rule, every rule always runs."""
        _require_text(text)
        return [rule(text) for rule in self.rules]

    def quality_metrics(self, text: str, record: ComprehensiveAnalysis) -> dict:
        """Unweighted metric scores keyed by metric name."""
        _require_text(text)
        return {name: calc(text, record) for name, _, calc in self.metrics}

    def quality_score(self, text: str, record: ComprehensiveAnalysis = None,
                      results: list = None) -> float:
        """Mean rule score, blended with the weighted metrics when a
        comprehensive record is supplied."""
        results = results if results is not None else self.validate(text)
        if not results:
            return 0.0
        validation_score = sum(r.score for r in results) / len(results)
        if record is None:
            return validation_score
        scores = self.quality_metrics(text, record)
        weighted = sum(scores[name] * weight for name, weight, _ in self.metrics)
        return (validation_score + weighted) / 2

    def summarize(self, text: str) -> dict:
        """Collapse the rule results into a pass/fail summary."""
        results = self.validate(text)
        suggestions = []
        for result in results:
            for suggestion in result.suggestions:
                if suggestion not in suggestions:
                    suggestions.append(suggestion)
        return {
            'isValid': all(r.is_valid for r in results),
            'score': round(self.quality_score(text, results=results)),
            'issues': [r.message for r in results if not r.is_valid],
            'suggestions': suggestions,
        }
