"""End-to-end analysis of one idea.

validate -> (API call -> normalize) or heuristic -> save to history.
Collaborators are passed in explicitly; when no client is given the
heuristic generator produces the record.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .client import AnalysisClientError
from .heuristics import HeuristicAnalysisGenerator
from .models import SCHEMA_HORIZONTAL, SCHEMA_COMPREHENSIVE
from .normalizer import ResponseNormalizer
from .prompts import build_prompt
from .validation import InputQualityValidator


log = logging.getLogger(__name__)


SOURCE_API = 'api'
SOURCE_HEURISTIC = 'heuristic'
SOURCE_FALLBACK = 'fallback'


@dataclass
class AnalysisOutcome:
    """Result of one pipeline run."""
    record: object
    source: str                 # api, heuristic, fallback
    validation: list = field(default_factory=list)  # List[ValidationResult]
    quality_score: float = 0.0
    saved: bool = False

    def to_dict(self) -> dict:
        return {
            'analysis': self.record.to_dict(),
            'source': self.source,
            'validation': [r.to_dict() for r in self.validation],
            'qualityScore': round(self.quality_score, 1),
            'saved': self.saved,
        }


def run_analysis(
    idea: str,
    schema: str = SCHEMA_HORIZONTAL,
    client=None,
    store=None,
    generator: Optional[HeuristicAnalysisGenerator] = None,
    normalizer: Optional[ResponseNormalizer] = None,
    validator: Optional[InputQualityValidator] = None,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> AnalysisOutcome:
    """Analyse ``idea`` and optionally persist it.

    ``client`` is anything with ``analyze(prompt) -> str`` that raises
    AnalysisClientError on failure. ``store`` is an AnalysisHistoryStore.
    """
    if not isinstance(idea, str):
        raise TypeError(f'idea text must be a string, not {type(idea).__name__}')
    if not idea.strip():
        raise ValueError('idea text is empty')

    def progress(message: str) -> None:
        log.info(message)
        if progress_callback:
            progress_callback(message)

    generator = generator or HeuristicAnalysisGenerator()
    normalizer = normalizer or ResponseNormalizer(generator)
    validator = validator or InputQualityValidator()

    progress('Validating input')
    results = validator.validate(idea)
    for result in results:
        if not result.is_valid:
            log.warning('Input check %s: %s', result.rule_id, result.message)

    record = None
    source = SOURCE_HEURISTIC
    if client is not None:
        progress('Requesting analysis')
        try:
            raw = client.analyze(build_prompt(idea, schema))
        except AnalysisClientError as exc:
            log.warning('Analysis API failed, using heuristic analysis: %s', exc)
            source = SOURCE_FALLBACK
        else:
            progress('Normalizing response')
            payload = normalizer.decode(raw)
            if payload is None:
                source = SOURCE_FALLBACK
            else:
                source = SOURCE_API
                record = normalizer.normalize(payload, idea, schema)

    if record is None:
        progress('Generating heuristic analysis')
        record = generator.generate(idea, schema)

    if schema == SCHEMA_COMPREHENSIVE:
        quality = validator.quality_score(idea, record, results=results)
    else:
        quality = validator.quality_score(idea, results=results)

    saved = False
    if store is not None:
        progress('Saving to history')
        saved = store.save(record)
        if not saved:
            log.warning('Analysis %s was not saved to history', record.id)

    progress('Done')
    return AnalysisOutcome(
        record=record,
        source=source,
        validation=results,
        quality_score=quality,
        saved=saved,
    )
