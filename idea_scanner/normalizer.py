"""Upstream response normalization.

Turns whatever the analysis API returned (fenced JSON text, bare JSON text,
an already-decoded dict, or garbage) into one complete record of the
requested schema. Every field is decoded with an explicit type check and a
named default; anything that cannot be decoded at all falls back to the
heuristic generator. Nothing here raises for bad upstream content.
"""

import json
import logging
import math
import re
from dataclasses import fields

from .heuristics import (
    HeuristicAnalysisGenerator,
    verdict_for,
    validity_for,
    risk_level_for,
    summary_line,
)
from .models import (
    SCHEMA_LEGACY,
    SCHEMA_HORIZONTAL,
    SCHEMA_COMPREHENSIVE,
    SCORE_RANGES,
    LegacyAnalysis,
    HorizontalAnalysis,
    ComprehensiveAnalysis,
    RiskItem,
    camel_case,
    format_timestamp,
    new_analysis_id,
    parse_timestamp,
)
from .patterns import canonical_innovation_level, canonical_risk_level


log = logging.getLogger(__name__)


_FENCE = re.compile(r'```json\n?|\n?```')

HORIZONTAL_DEFAULTS = {
    'targetAudience': 'Small to medium businesses',
    'problemsSolved': 'Efficiency and productivity challenges',
    'proposedSolution': 'Automated workflow solution',
    'competitors': ['Generic competitors'],
    'scalability': 'Moderate scalability potential',
    'revenueModel': 'Subscription-based model',
    'innovationLevel': 'Medium',
    'overallScore': 70,
}

LEGACY_DEFAULTS = {
    'score': 75,
    'issues': ['No specific issues identified'],
    'recommendations': ['Focus on market validation'],
}

CONFIDENCE_LEVELS = ('Very High', 'High', 'Medium', 'Low', 'Very Low')
STAGES = ('Idea', 'Concept', 'MVP', 'Early Traction')
RISK_CATEGORIES = ('market', 'technical', 'business', 'competitive')


# ---------------------------------------------------------------------------
# Field decoders
# ---------------------------------------------------------------------------

def strip_fences(text: str) -> str:
    """Remove ```json / ``` markers around a payload."""
    return _FENCE.sub('', text).strip()


def decode_text(value, default: str) -> str:
    """Non-blank string or the default."""
    if isinstance(value, str) and value.strip():
        return value
    return default


def decode_list(value, default: list) -> list:
    """List of non-blank strings; scalars are wrapped, empties replaced."""
    if value is None:
        return list(default)
    if not isinstance(value, list):
        value = [value]
    items = []
    for entry in value:
        if entry is None or isinstance(entry, (dict, list)):
            continue
        text = str(entry)
        if text.strip():
            items.append(text)
    return items or list(default)


def decode_number(value):
    """Finite numeric value from a number or numeric string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        raw = value
    elif isinstance(value, str):
        raw = value.strip().rstrip('%')
    else:
        return None
    try:
        number = float(raw)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def decode_score(value, default: int, bounds: tuple) -> int:
    """Integer score clamped into bounds; default when not numeric."""
    number = decode_number(value)
    if number is None:
        number = default
    low, high = bounds
    return int(max(low, min(high, round(number))))


def _first(payload: dict, *keys):
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _coerce_like(value, current):
    """Decode ``value`` to the type of the baseline ``current`` value."""
    if isinstance(current, bool):
        return value if isinstance(value, bool) else current
    if isinstance(current, str):
        return decode_text(value, current)
    if isinstance(current, list):
        return decode_list(value, current)
    if isinstance(current, dict):
        if isinstance(value, dict) and value:
            return {str(k): str(v) for k, v in value.items()}
        return dict(current)
    return current


def overlay_section(baseline, payload):
    """Copy of a section dataclass with every well-typed payload field applied."""
    if not isinstance(payload, dict):
        return baseline
    values = {}
    for f in fields(baseline):
        values[f.name] = _coerce_like(payload.get(camel_case(f.name)), getattr(baseline, f.name))
    return type(baseline)(**values)


def decode_risks(value, default: list) -> list:
    if not isinstance(value, list):
        return default
    risks = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        text = entry.get('risk')
        if not isinstance(text, str) or not text.strip():
            continue
        category = entry.get('category')
        risks.append(RiskItem(
            category=category if category in RISK_CATEGORIES else 'market',
            risk=text,
            probability=canonical_risk_level(entry.get('probability')),
            impact=canonical_risk_level(entry.get('impact')),
            mitigation=decode_text(entry.get('mitigation'), ''),
        ))
    return risks or default


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

class ResponseNormalizer:
    """Maps raw API output onto a single record schema."""

    def __init__(self, generator: HeuristicAnalysisGenerator = None):
        self.generator = generator or HeuristicAnalysisGenerator()

    def decode(self, raw):
        """Parsed JSON object from raw API output, or None when unusable."""
        if isinstance(raw, dict):
            return raw
        if not isinstance(raw, str):
            log.warning('Unsupported analysis payload type: %s', type(raw).__name__)
            return None
        try:
            payload = json.loads(strip_fences(raw))
        except ValueError as exc:
            log.warning('Could not parse analysis response: %s', exc)
            return None
        if not isinstance(payload, dict):
            log.warning('Analysis response is not a JSON object')
            return None
        return payload

    def normalize(self, raw, fallback_input: str, schema: str = SCHEMA_HORIZONTAL):
        """Complete record of ``schema`` built from ``raw``."""
        if schema not in SCORE_RANGES:
            raise ValueError(f'unknown schema: {schema}')
        payload = self.decode(raw)
        if payload is None:
            log.warning('Falling back to heuristic %s analysis', schema)
            return self.generator.generate(fallback_input, schema)

        if schema == SCHEMA_LEGACY:
            return self._legacy(payload, fallback_input)
        if schema == SCHEMA_HORIZONTAL:
            return self._horizontal(payload, fallback_input)
        return self._comprehensive(payload, fallback_input)

    def _identity(self, payload: dict) -> tuple:
        """Payload id/timestamp when valid, fresh ones otherwise."""
        record_id = payload.get('id')
        timestamp = payload.get('timestamp')
        moment = None
        if not isinstance(record_id, str) or not record_id.strip():
            moment = self.generator.clock()
            record_id = new_analysis_id(moment, self.generator.rng)
        if parse_timestamp(timestamp) is None:
            timestamp = format_timestamp(moment or self.generator.clock())
        return record_id, timestamp

    @staticmethod
    def _idea(payload: dict, key: str, fallback_input: str) -> str:
        value = payload.get(key)
        return value if isinstance(value, str) and value else fallback_input

    @staticmethod
    def _language(payload: dict) -> str:
        return decode_text(payload.get('language'), 'en')

    def _legacy(self, payload: dict, fallback_input: str) -> LegacyAnalysis:
        record_id, timestamp = self._identity(payload)
        score = decode_score(payload.get('score'), LEGACY_DEFAULTS['score'],
                             SCORE_RANGES[SCHEMA_LEGACY])
        return LegacyAnalysis(
            id=record_id,
            timestamp=timestamp,
            input=self._idea(payload, 'input', fallback_input),
            score=score,
            validity=validity_for(score),
            issues=decode_list(payload.get('issues'), LEGACY_DEFAULTS['issues']),
            recommendations=decode_list(payload.get('recommendations'),
                                        LEGACY_DEFAULTS['recommendations']),
            language=self._language(payload),
        )

    def _horizontal(self, payload: dict, fallback_input: str) -> HorizontalAnalysis:
        record_id, timestamp = self._identity(payload)
        d = HORIZONTAL_DEFAULTS
        level = payload.get('innovationLevel')
        return HorizontalAnalysis(
            id=record_id,
            timestamp=timestamp,
            original_idea=self._idea(payload, 'originalIdea', fallback_input),
            target_audience=decode_text(payload.get('targetAudience'), d['targetAudience']),
            problems_solved=decode_text(payload.get('problemsSolved'), d['problemsSolved']),
            proposed_solution=decode_text(payload.get('proposedSolution'), d['proposedSolution']),
            competitors=decode_list(payload.get('competitors'), d['competitors']),
            scalability=decode_text(payload.get('scalability'), d['scalability']),
            revenue_model=decode_text(_first(payload, 'revenueModel', 'profitModel'),
                                      d['revenueModel']),
            innovation_level=(canonical_innovation_level(level) if level is not None
                              else d['innovationLevel']),
            overall_score=decode_score(payload.get('overallScore'), d['overallScore'],
                                       SCORE_RANGES[SCHEMA_HORIZONTAL]),
            language=self._language(payload),
        )

    def _comprehensive(self, payload: dict, fallback_input: str) -> ComprehensiveAnalysis:
        base = self.generator.generate(fallback_input, SCHEMA_COMPREHENSIVE)
        record_id, timestamp = self._identity(payload)

        score = decode_score(
            _first(payload, 'overallRating', 'overallViabilityScore', 'overallScore'),
            base.overall_rating,
            SCORE_RANGES[SCHEMA_COMPREHENSIVE],
        )
        level = payload.get('innovationLevel')
        level = canonical_innovation_level(level) if level is not None else base.innovation_level
        verdict = verdict_for(score)

        quality = decode_number(payload.get('inputQualityScore'))
        quality = base.input_quality_score if quality is None else int(max(0, min(100, round(quality))))

        confidence = payload.get('confidenceLevel')
        if confidence not in CONFIDENCE_LEVELS:
            confidence = base.confidence_level

        stage = overlay_section(base.stage, payload.get('stage'))
        if stage.current_stage not in STAGES:
            stage.current_stage = base.stage.current_stage

        return ComprehensiveAnalysis(
            id=record_id,
            timestamp=timestamp,
            idea=self._idea(payload, 'idea', fallback_input),
            target_audience=decode_text(payload.get('targetAudience'), base.target_audience),
            problems_solved=decode_text(payload.get('problemsSolved'), base.problems_solved),
            proposed_solution=decode_text(payload.get('proposedSolution'), base.proposed_solution),
            competitors=decode_list(payload.get('competitors'), base.competitors),
            scalability=decode_text(payload.get('scalability'), base.scalability),
            profit_model=decode_text(_first(payload, 'profitModel', 'revenueModel'),
                                     base.profit_model),
            innovation_level=level,
            overall_rating=score,
            verdict=verdict,
            input_quality_score=quality,
            confidence_level=confidence,
            summary=decode_text(payload.get('summary'), summary_line(verdict, level, score)),
            market=overlay_section(base.market, payload.get('market')),
            technical=overlay_section(base.technical, payload.get('technical')),
            financials=overlay_section(base.financials, payload.get('financials')),
            risks=decode_risks(payload.get('risks'), base.risks),
            opportunities=decode_list(payload.get('opportunities'), base.opportunities),
            recommendations=overlay_section(base.recommendations, payload.get('recommendations')),
            stage=stage,
            overall_risk_level=risk_level_for(score),
            language=self._language(payload),
        )
