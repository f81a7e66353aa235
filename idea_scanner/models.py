"""Data classes used throughout the idea scanner.

Every analysis record variant, its nested sections, validation results and
history items live here so they can be imported cleanly by every other
module. Records serialise to camelCase dicts (the persisted/exported shape)
via ``to_dict()``.
"""

import math
import random
import time
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from typing import Optional


# ---------------------------------------------------------------------------
# Schema tags and score ranges
# ---------------------------------------------------------------------------

SCHEMA_LEGACY = 'legacy'
SCHEMA_HORIZONTAL = 'horizontal'
SCHEMA_COMPREHENSIVE = 'comprehensive'
SCHEMAS = (SCHEMA_LEGACY, SCHEMA_HORIZONTAL, SCHEMA_COMPREHENSIVE)

# Inclusive (min, max) for the headline score of each variant
SCORE_RANGES = {
    SCHEMA_LEGACY: (10, 95),
    SCHEMA_HORIZONTAL: (45, 95),
    SCHEMA_COMPREHENSIVE: (10, 95),
}

# Bounds shared by every variant, applied to stored history scores
HISTORY_SCORE_RANGE = (10, 95)

INNOVATION_LEVELS = ('Low', 'Medium', 'High')
RISK_LEVELS = ('Low', 'Medium', 'High')

_ID_ALPHABET = '0123456789abcdefghijklmnopqrstuvwxyz'


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f'{moment.microsecond // 1000:03d}Z'


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 string, returning None when it is not one.

    Naive values are treated as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def new_analysis_id(moment: Optional[datetime] = None,
                    rng: Optional[random.Random] = None) -> str:
    """Build an ``analysis_<epoch ms>_<9 base-36 chars>`` identifier."""
    rng = rng or random.Random()
    millis = int(moment.timestamp() * 1000) if moment else int(time.time() * 1000)
    suffix = ''.join(rng.choice(_ID_ALPHABET) for _ in range(9))
    return f'analysis_{millis}_{suffix}'


def camel_case(name: str) -> str:
    """snake_case -> camelCase."""
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def _serialise(value):
    if is_dataclass(value):
        return dataclass_to_dict(value)
    if isinstance(value, list):
        return [_serialise(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialise(v) for k, v in value.items()}
    return value


def dataclass_to_dict(obj) -> dict:
    """Serialise a dataclass (recursively) to a camelCase dict."""
    return {camel_case(f.name): _serialise(getattr(obj, f.name)) for f in fields(obj)}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@dataclass
class ValidationResult:
    """Outcome of a single input validation rule."""
    rule_id: str
    is_valid: bool
    score: float        # 0-100
    message: str
    confidence: float   # 0.0-1.0
    severity: str = 'info'     # error, warning, info
    category: str = ''         # length, content, completeness
    suggestions: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)


# ---------------------------------------------------------------------------
# Comprehensive sections
# ---------------------------------------------------------------------------

@dataclass
class MarketAnalysis:
    """Market sizing and landscape."""
    tam: str
    sam: str
    som: str
    growth: str
    trends: list = field(default_factory=list)
    barriers: list = field(default_factory=list)
    opportunities: list = field(default_factory=list)


@dataclass
class TechnicalAnalysis:
    """Build effort and architecture outlook."""
    architecture_complexity: str
    implementation_complexity: str
    development_timeline: str
    resource_requirements: str
    technology_stack: list = field(default_factory=list)
    technical_risks: list = field(default_factory=list)


@dataclass
class FinancialProjection:
    """Cost, funding and revenue estimates."""
    development_cost: str
    time_to_market: str
    break_even_timeline: str
    funding_requirements: str
    revenue_projections: dict = field(default_factory=dict)  # year1..year3 -> range
    key_financial_risks: list = field(default_factory=list)


@dataclass
class RiskItem:
    """A single risk with its likelihood, impact and mitigation."""
    category: str       # market, technical, business, competitive
    risk: str
    probability: str    # Low, Medium, High
    impact: str         # Low, Medium, High
    mitigation: str = ''


@dataclass
class Recommendations:
    """Recommendations grouped by horizon."""
    immediate: list = field(default_factory=list)
    short_term: list = field(default_factory=list)
    long_term: list = field(default_factory=list)
    critical_success_factors: list = field(default_factory=list)
    next_steps: list = field(default_factory=list)

    def all_items(self) -> list:
        """Every recommendation in horizon order."""
        return (self.immediate + self.short_term + self.long_term
                + self.critical_success_factors + self.next_steps)


@dataclass
class StageAssessment:
    """Where the idea sits on the startup lifecycle."""
    current_stage: str   # Idea, Concept, MVP, Early Traction
    ready_for_next_stage: bool
    recommendations: list = field(default_factory=list)
    milestones: list = field(default_factory=list)


# ---------------------------------------------------------------------------
# Analysis records (tagged variants)
# ---------------------------------------------------------------------------

@dataclass
class LegacyAnalysis:
    """Score + issues + recommendations record."""
    id: str
    timestamp: str
    input: str
    score: int
    validity: str       # Realistic, Promising, Weak, High-Risk
    issues: list
    recommendations: list
    language: str = 'en'

    schema = SCHEMA_LEGACY

    @property
    def source_text(self) -> str:
        return self.input

    @property
    def rating(self) -> int:
        return self.score

    def to_dict(self) -> dict:
        data = {'schema': self.schema}
        data.update(dataclass_to_dict(self))
        return data


@dataclass
class HorizontalAnalysis:
    """Single-row analysis shown in the horizontal results table."""
    id: str
    timestamp: str
    original_idea: str
    target_audience: str
    problems_solved: str
    proposed_solution: str
    competitors: list
    scalability: str
    revenue_model: str
    innovation_level: str
    overall_score: int
    language: str = 'en'

    schema = SCHEMA_HORIZONTAL

    @property
    def source_text(self) -> str:
        return self.original_idea

    @property
    def rating(self) -> int:
        return self.overall_score

    def to_dict(self) -> dict:
        data = {'schema': self.schema}
        data.update(dataclass_to_dict(self))
        return data


@dataclass
class ComprehensiveAnalysis:
    """Full analysis with market, technical, financial and risk sections."""
    id: str
    timestamp: str
    idea: str
    target_audience: str
    problems_solved: str
    proposed_solution: str
    competitors: list
    scalability: str
    profit_model: str
    innovation_level: str
    overall_rating: int
    verdict: str
    input_quality_score: int
    confidence_level: str
    summary: str
    market: MarketAnalysis
    technical: TechnicalAnalysis
    financials: FinancialProjection
    risks: list                     # List[RiskItem]
    opportunities: list
    recommendations: Recommendations
    stage: StageAssessment
    overall_risk_level: str
    language: str = 'en'

    schema = SCHEMA_COMPREHENSIVE

    @property
    def source_text(self) -> str:
        return self.idea

    @property
    def rating(self) -> int:
        return self.overall_rating

    def to_dict(self) -> dict:
        data = {'schema': self.schema}
        data.update(dataclass_to_dict(self))
        return data


RECORD_TYPES = {
    SCHEMA_LEGACY: LegacyAnalysis,
    SCHEMA_HORIZONTAL: HorizontalAnalysis,
    SCHEMA_COMPREHENSIVE: ComprehensiveAnalysis,
}


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

def clamp_history_score(score):
    """Score pulled into HISTORY_SCORE_RANGE."""
    low, high = HISTORY_SCORE_RANGE
    return max(low, min(high, score))


@dataclass
class AnalysisHistoryItem:
    """Persisted wrapper around a serialised analysis record."""
    id: str
    timestamp: str
    original_idea: str
    overall_score: float
    analysis_results: dict

    @classmethod
    def from_record(cls, record) -> 'AnalysisHistoryItem':
        return cls(
            id=record.id,
            timestamp=record.timestamp,
            original_idea=record.source_text,
            overall_score=clamp_history_score(record.rating),
            analysis_results=record.to_dict(),
        )

    @classmethod
    def from_dict(cls, data) -> Optional['AnalysisHistoryItem']:
        """Build an item from its stored shape, or None when malformed."""
        if not isinstance(data, dict):
            return None
        item_id = data.get('id')
        score = data.get('overallScore')
        results = data.get('analysisResults')
        if not isinstance(item_id, str) or not item_id:
            return None
        if parse_timestamp(data.get('timestamp')) is None:
            return None
        if not isinstance(data.get('originalIdea'), str):
            return None
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return None
        if isinstance(score, float) and not math.isfinite(score):
            return None
        if not isinstance(results, dict):
            return None
        return cls(
            id=item_id,
            timestamp=data['timestamp'],
            original_idea=data['originalIdea'],
            overall_score=clamp_history_score(score),
            analysis_results=results,
        )

    @property
    def moment(self) -> datetime:
        return parse_timestamp(self.timestamp)

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)
