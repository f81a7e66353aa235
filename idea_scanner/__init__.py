"""SaaS Idea Scanner – core package.

Re-exports all public symbols so consumers can do:
    from idea_scanner import run_analysis, AnalysisHistoryStore
or continue using the top-level module:
    from saas_idea_scanner import run_analysis, AnalysisHistoryStore
"""

# Models
from .models import (  # noqa: F401
    SCHEMA_LEGACY,
    SCHEMA_HORIZONTAL,
    SCHEMA_COMPREHENSIVE,
    SCHEMAS,
    SCORE_RANGES,
    HISTORY_SCORE_RANGE,
    INNOVATION_LEVELS,
    ValidationResult,
    MarketAnalysis,
    TechnicalAnalysis,
    FinancialProjection,
    RiskItem,
    Recommendations,
    StageAssessment,
    LegacyAnalysis,
    HorizontalAnalysis,
    ComprehensiveAnalysis,
    AnalysisHistoryItem,
    new_analysis_id,
    format_timestamp,
    parse_timestamp,
    camel_case,
)

# Keyword tables and label mappings
from .patterns import (  # noqa: F401
    PLACEHOLDER_TOKENS,
    INNOVATIVE_KEYWORDS,
    canonical_innovation_level,
    canonical_risk_level,
)

# Validation
from .validation import (  # noqa: F401
    InputQualityValidator,
    check_min_length,
    check_content_quality,
    check_business_completeness,
    split_sentences,
    length_status,
    confidence_from_quality,
)

# Heuristic generation
from .heuristics import (  # noqa: F401
    MODE_SINGLE,
    MODE_COMPREHENSIVE,
    HeuristicAnalysisGenerator,
    content_quality,
    innovation_level,
    verdict_for,
    validity_for,
)

# Normalization
from .normalizer import ResponseNormalizer  # noqa: F401

# Storage
from .backends import (  # noqa: F401
    StorageError,
    StorageQuotaError,
    MemoryBackend,
    SqliteBackend,
    CookieBackend,
    session_cookie_size,
)
from .history import (  # noqa: F401
    AnalysisHistoryStore,
    cookie_history_store,
    local_history_store,
    get_cookie_consent,
    set_cookie_consent,
    COOKIE_MAX_ITEMS,
    LOCAL_MAX_ITEMS,
)

# API client and prompts
from .client import GeminiClient, ClientConfig, AnalysisClientError  # noqa: F401
from .prompts import build_prompt  # noqa: F401

# Pipeline
from .pipeline import run_analysis, AnalysisOutcome  # noqa: F401

# Reporting
from .reporting import generate_report, generate_json_report  # noqa: F401
