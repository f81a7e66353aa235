"""Heuristic (no-network) analysis generation.

Produces a plausible analysis record from the idea text alone. Used when no
LLM API key is configured and as the fallback whenever the upstream response
cannot be used.

Scoring is keyword-driven; the only randomness is the +/-5 score
perturbation and the pool selections, both drawn from the injected
``random.Random`` so a seeded generator is fully reproducible.
"""

import logging
import random

from .models import (
    SCHEMA_LEGACY,
    SCHEMA_HORIZONTAL,
    SCHEMA_COMPREHENSIVE,
    SCORE_RANGES,
    LegacyAnalysis,
    HorizontalAnalysis,
    ComprehensiveAnalysis,
    MarketAnalysis,
    TechnicalAnalysis,
    FinancialProjection,
    RiskItem,
    Recommendations,
    StageAssessment,
    format_timestamp,
    new_analysis_id,
    utc_now,
)
from .patterns import (
    QUALITY_BUSINESS_KEYWORDS,
    SPECIFICITY_TERMS,
    INNOVATIVE_KEYWORDS,
    B2B_TERMS,
    B2C_TERMS,
    TECH_TERMS,
    FINTECH_TERMS,
    AI_TERMS,
    AUTOMATION_TERMS,
    MVP_TERMS,
    CUSTOMER_TERMS,
    REVENUE_TERMS,
    TARGET_AUDIENCES,
    PROBLEMS_SOLVED,
    PROPOSED_SOLUTIONS,
    COMPETITOR_SETS,
    SCALABILITY_OPTIONS,
    REVENUE_MODELS,
    LEGACY_ISSUES,
    LEGACY_RECOMMENDATIONS,
    count_hits,
    has_any,
)
from .validation import split_sentences, confidence_from_quality


log = logging.getLogger(__name__)


MODE_SINGLE = 'single'
MODE_COMPREHENSIVE = 'comprehensive'

MODE_FLOORS = {MODE_SINGLE: 45, MODE_COMPREHENSIVE: 10}
SCORE_CEILING = 95

DEFAULT_MODES = {
    SCHEMA_LEGACY: MODE_COMPREHENSIVE,
    SCHEMA_HORIZONTAL: MODE_SINGLE,
    SCHEMA_COMPREHENSIVE: MODE_COMPREHENSIVE,
}


def clamp(value, low, high):
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def content_quality(text: str) -> int:
    """0-100 score for how much usable detail the text carries."""
    lowered = text.lower()
    words = len(text.split())
    sentences = len(split_sentences(text))

    score = 0
    if words >= 50:
        score += 25
    elif words >= 20:
        score += 15
    else:
        score += 5

    score += min(30, count_hits(lowered, QUALITY_BUSINESS_KEYWORDS) * 5)

    if sentences >= 3:
        score += 20
    elif sentences >= 2:
        score += 10

    score += min(25, count_hits(lowered, SPECIFICITY_TERMS) * 5)
    return clamp(score, 0, 100)


def base_score(quality: float) -> float:
    return clamp(60 + quality * 0.3, 30, 95)


def innovation_level(text: str) -> str:
    """High for 3+ innovative keyword hits, Medium for 1+, else Low."""
    hits = count_hits(text.lower(), INNOVATIVE_KEYWORDS)
    if hits >= 3:
        return 'High'
    if hits >= 1:
        return 'Medium'
    return 'Low'


def verdict_for(score: float) -> str:
    if score >= 85:
        return 'Highly Viable'
    if score >= 70:
        return 'Viable'
    if score >= 55:
        return 'Potentially Viable'
    if score >= 35:
        return 'Risky'
    return 'Not Viable'


def validity_for(score: float) -> str:
    if score >= 85:
        return 'Realistic'
    if score >= 55:
        return 'Promising'
    if score >= 35:
        return 'Weak'
    return 'High-Risk'


def risk_level_for(score: float) -> str:
    if score >= 80:
        return 'Low'
    if score >= 60:
        return 'Medium'
    return 'High'


def summary_line(verdict: str, level: str, score: int) -> str:
    return (f'{verdict} SaaS concept with {level.lower()} innovation '
            f'potential and an overall rating of {score}/100.')


def detect_context(text: str) -> dict:
    """Keyword flags that steer the templated sections."""
    lowered = text.lower()
    return {
        'b2b': has_any(lowered, B2B_TERMS),
        'b2c': has_any(lowered, B2C_TERMS),
        'tech': has_any(lowered, TECH_TERMS),
        'fintech': has_any(lowered, FINTECH_TERMS),
        'ai': has_any(lowered, AI_TERMS),
        'automation': has_any(lowered, AUTOMATION_TERMS),
        'mvp': has_any(lowered, MVP_TERMS),
        'customers': has_any(lowered, CUSTOMER_TERMS),
        'revenue': has_any(lowered, REVENUE_TERMS),
    }


# ---------------------------------------------------------------------------
# Comprehensive sections
# ---------------------------------------------------------------------------

def market_analysis(ctx: dict) -> MarketAnalysis:
    if ctx['fintech']:
        tam, sam, som = '$500B - $1.2T', '$50B - $120B', '$500M - $2B'
    elif ctx['tech'] and ctx['b2b']:
        tam, sam, som = '$200B - $500B', '$20B - $50B', '$200M - $1B'
    elif ctx['b2b']:
        tam, sam, som = '$100B - $300B', '$10B - $30B', '$100M - $500M'
    else:
        tam, sam, som = '$50B - $150B', '$5B - $15B', '$50M - $200M'

    if ctx['fintech']:
        growth = '15-25% CAGR'
    elif ctx['tech']:
        growth = '12-20% CAGR'
    else:
        growth = '8-15% CAGR'

    return MarketAnalysis(
        tam=tam,
        sam=sam,
        som=som,
        growth=growth,
        trends=[
            'Increasing digital transformation adoption',
            'Growing demand for automation and efficiency',
            'Shift towards cloud-based solutions',
            'Rising importance of data-driven decision making',
            'Integration and interoperability becoming critical',
        ],
        barriers=[
            'Established competitor presence and market share',
            'Customer acquisition costs in competitive landscape',
            'Integration complexity with existing systems',
            'Regulatory compliance and security requirements',
            'Need for significant initial investment and resources',
        ],
        opportunities=[
            'Underserved market segments with specific needs',
            'Emerging technology trends creating new possibilities',
            'Increasing willingness to adopt new solutions',
            'Potential for strategic partnerships and integrations',
            'Growing market size and expansion opportunities',
        ],
    )


def technical_analysis(ctx: dict) -> TechnicalAnalysis:
    if ctx['ai']:
        architecture = 'Very Complex'
        timeline = '12-18 months for MVP, 24-36 months for full platform'
        resources = '8-12 person development team including ML engineers'
    elif ctx['tech']:
        architecture = 'Complex'
        timeline = '8-12 months for MVP, 18-24 months for full platform'
        resources = '6-8 person development team with specialized skills'
    else:
        architecture = 'Moderate'
        timeline = '6-9 months for MVP, 12-18 months for full platform'
        resources = '4-6 person development team with full-stack capabilities'

    if ctx['tech']:
        implementation = 'High'
    elif ctx['automation']:
        implementation = 'Medium'
    else:
        implementation = 'Low'

    return TechnicalAnalysis(
        architecture_complexity=architecture,
        implementation_complexity=implementation,
        development_timeline=timeline,
        resource_requirements=resources,
        technology_stack=[
            'Frontend: React.js with TypeScript, Next.js for SSR/SSG',
            'Backend: Node.js with Express/Fastify, or Python with FastAPI',
            'Database: PostgreSQL for relational data, Redis for caching',
            'Cloud: AWS/Azure/GCP with containerized deployment (Docker/Kubernetes)',
            ('AI/ML: TensorFlow/PyTorch, cloud ML services' if ctx['ai']
             else 'Analytics: Data processing and visualization tools'),
            'Monitoring: Application performance monitoring and logging solutions',
        ],
        technical_risks=[
            'Scalability challenges with increasing user load and data volume',
            'Integration complexity with diverse third-party systems',
            'Data security and privacy compliance requirements',
            ('AI model accuracy and bias concerns' if ctx['ai']
             else 'Performance optimization under high load'),
            'Technology stack obsolescence and maintenance overhead',
        ],
    )


def financial_projection(ctx: dict) -> FinancialProjection:
    if ctx['b2b']:
        return FinancialProjection(
            development_cost='$500K - $1.5M for MVP development and initial launch',
            time_to_market='12-18 months for MVP, 24-36 months for full platform',
            break_even_timeline='18-24 months post-launch with proper execution',
            funding_requirements='$2M - $5M for development, launch, and initial scaling',
            revenue_projections={
                'year1': '$100K - $500K ARR',
                'year2': '$1M - $3M ARR',
                'year3': '$5M - $15M ARR',
            },
            key_financial_risks=list(_FINANCIAL_RISKS),
        )
    return FinancialProjection(
        development_cost='$200K - $500K for MVP development and initial launch',
        time_to_market='6-12 months for MVP, 18-24 months for full platform',
        break_even_timeline='12-18 months post-launch with effective marketing',
        funding_requirements='$500K - $2M for development, launch, and initial scaling',
        revenue_projections={
            'year1': '$50K - $200K ARR',
            'year2': '$500K - $1.5M ARR',
            'year3': '$2M - $8M ARR',
        },
        key_financial_risks=list(_FINANCIAL_RISKS),
    )


_FINANCIAL_RISKS = (
    'Higher than expected customer acquisition costs',
    'Longer sales cycles and slower revenue ramp',
    'Increased development costs and timeline delays',
    'Competitive pricing pressure affecting margins',
    'Economic downturns impacting customer spending',
)

# (category, risk, probability, impact, mitigation)
_RISK_TEMPLATES = (
    ('market', 'Market saturation and intense competition from established players',
     'Medium', 'High', 'Focus on differentiation and niche market segments initially'),
    ('market', 'Economic downturn affecting customer spending on new solutions',
     'Medium', 'Medium', 'Develop flexible pricing models and demonstrate clear ROI'),
    ('market', 'Changing market demands and customer preferences',
     'Medium', 'Medium', 'Maintain close customer feedback loops and agile development'),
    ('technical', 'Scalability challenges with rapid user growth',
     'Medium', 'High', 'Design cloud-native architecture with auto-scaling capabilities'),
    ('technical', 'Security vulnerabilities and data breaches',
     'Low', 'High', 'Implement comprehensive security measures and regular audits'),
    ('technical', 'Integration complexity with third-party systems',
     'High', 'Medium', 'Develop robust API framework and partnership strategies'),
    ('business', 'Difficulty in customer acquisition and retention',
     'Medium', 'High', 'Invest in customer success programs and referral incentives'),
    ('business', 'Key team member departure affecting development',
     'Medium', 'Medium', 'Implement knowledge sharing and succession planning'),
    ('business', 'Funding challenges for continued growth',
     'Medium', 'High', 'Maintain multiple funding options and achieve profitability milestones'),
    ('competitive', 'Established competitors launching similar features',
     'High', 'Medium', 'Maintain innovation pace and build strong customer relationships'),
    ('competitive', 'New entrants with superior technology or funding',
     'Medium', 'Medium', 'Focus on execution excellence and customer satisfaction'),
    ('competitive', 'Price wars reducing market profitability',
     'Low', 'High', 'Emphasize value over price and build switching costs'),
)


def risk_items() -> list:
    return [RiskItem(*template) for template in _RISK_TEMPLATES]


def competitive_advantages(ctx: dict) -> list:
    return [
        'Superior user experience and interface design',
        'More comprehensive feature set and integration capabilities',
        ('Advanced technology and AI capabilities' if ctx['tech']
         else 'Streamlined workflow and automation features'),
        'Better pricing model and value proposition',
        'Stronger focus on customer success and support',
    ]


_RECOMMENDATION_TIERS = {
    'high': {
        'immediate': [
            'Conduct detailed customer interviews to validate problem-solution fit',
            'Develop detailed technical architecture and development roadmap',
            'Secure initial funding or bootstrap resources for MVP development',
            'Assemble core development team with necessary technical expertise',
            'Create comprehensive competitive analysis and market positioning strategy',
        ],
        'short_term': [
            'Develop and launch MVP with core features to early adopters',
            'Implement customer feedback loops and iterative development process',
            'Build strategic partnerships and integration relationships',
            'Establish go-to-market strategy and initial customer acquisition channels',
            'Secure Series A funding for scaling operations and team expansion',
        ],
        'long_term': [
            'Scale operations and expand to adjacent market segments',
            'Develop advanced features and AI/automation capabilities',
            'Consider international expansion and localization strategies',
            'Build ecosystem of partners and integrations for platform growth',
            'Evaluate strategic exit opportunities or continued growth investment',
        ],
    },
    'medium': {
        'immediate': [
            'Refine and validate the core value proposition with target customers',
            'Conduct thorough market research to better understand competitive landscape',
            'Develop more detailed business model and pricing strategy',
            'Create technical feasibility study and resource requirements assessment',
            'Build initial prototype or proof of concept to test core assumptions',
        ],
        'short_term': [
            'Build and test MVP with limited feature set and target audience',
            'Validate pricing model and unit economics with real customers',
            'Develop customer acquisition strategy and test marketing channels',
            'Refine product-market fit based on user feedback and usage data',
            'Prepare for potential funding rounds or revenue-based financing',
        ],
        'long_term': [
            'Achieve sustainable growth and market position in core segment',
            'Expand feature set and target additional customer segments',
            'Build operational excellence and customer success capabilities',
            'Consider strategic partnerships or acquisition opportunities',
            'Develop long-term competitive moats and market leadership',
        ],
    },
    'low': {
        'immediate': [
            'Revisit and refine the core problem statement and target market',
            'Conduct extensive customer discovery to validate market need',
            'Simplify the solution approach and focus on core value proposition',
            'Assess personal/team capabilities and resource availability',
            'Consider pivoting or significantly modifying the approach',
        ],
        'short_term': [
            'Focus on problem validation and solution refinement',
            'Build minimal viable solution to test core hypotheses',
            'Develop clearer differentiation strategy and competitive positioning',
            'Assess market timing and consider alternative approaches',
            'Build foundational capabilities and team before major investment',
        ],
        'long_term': [
            'Achieve product-market fit and sustainable business model',
            'Build stable customer base and predictable revenue streams',
            'Develop operational capabilities and team expertise',
            'Reassess market opportunity and strategic direction',
            'Consider alternative business models or market approaches',
        ],
    },
}


def recommendations_for(score: float) -> Recommendations:
    """Recommendations tiered by score: 75+ high, 55+ medium, else low."""
    if score >= 75:
        tier = _RECOMMENDATION_TIERS['high']
    elif score >= 55:
        tier = _RECOMMENDATION_TIERS['medium']
    else:
        tier = _RECOMMENDATION_TIERS['low']
    return Recommendations(
        immediate=list(tier['immediate']),
        short_term=list(tier['short_term']),
        long_term=list(tier['long_term']),
        critical_success_factors=[
            'Strong product-market fit with clear customer value proposition',
            'Excellent execution capabilities and team expertise',
            'Sufficient funding and resources for development and growth',
            'Effective customer acquisition and retention strategies',
            'Ability to adapt and iterate based on market feedback',
            'Strong competitive differentiation and barriers to entry',
        ],
        next_steps=[
            'Prioritize immediate recommendations based on available resources',
            'Create detailed project timeline with specific milestones and metrics',
            'Identify and address key risks and potential roadblocks',
            'Establish regular review and adjustment processes',
            'Build accountability mechanisms and progress tracking systems',
        ],
    )


def stage_assessment(ctx: dict, quality: float) -> StageAssessment:
    if ctx['revenue']:
        return StageAssessment(
            current_stage='Early Traction',
            ready_for_next_stage=quality >= 70,
            recommendations=[
                'Focus on optimizing unit economics and customer lifetime value',
                'Develop scalable customer acquisition and retention strategies',
                'Build operational processes for sustainable growth',
                'Prepare for Series A funding to accelerate growth',
            ],
            milestones=[
                'Achieve $100K+ ARR with positive unit economics',
                'Establish repeatable sales and marketing processes',
                'Build customer success and support capabilities',
                'Demonstrate market expansion potential',
            ],
        )
    if ctx['mvp'] and ctx['customers']:
        return StageAssessment(
            current_stage='MVP',
            ready_for_next_stage=quality >= 60,
            recommendations=[
                'Focus on achieving product-market fit with core features',
                'Implement robust customer feedback and iteration processes',
                'Validate pricing model and revenue generation approach',
                'Build foundational team and operational capabilities',
            ],
            milestones=[
                'Achieve strong product-market fit indicators',
                'Generate first revenue from paying customers',
                'Build core team and development processes',
                'Establish clear path to scalable growth',
            ],
        )
    if ctx['mvp'] or ctx['customers']:
        return StageAssessment(
            current_stage='Concept',
            ready_for_next_stage=quality >= 50,
            recommendations=[
                'Develop detailed technical specifications and architecture',
                'Create comprehensive business model and financial projections',
                'Build initial team and secure development resources',
                'Establish customer development and validation processes',
            ],
            milestones=[
                'Complete technical feasibility and architecture design',
                'Validate problem-solution fit with target customers',
                'Secure initial funding or resources for development',
                'Build core team with necessary expertise',
            ],
        )
    return StageAssessment(
        current_stage='Idea',
        ready_for_next_stage=quality >= 40,
        recommendations=[
            'Conduct extensive customer discovery and problem validation',
            'Develop clear value proposition and target market definition',
            'Create detailed competitive analysis and market research',
            'Assess personal capabilities and resource requirements',
        ],
        milestones=[
            'Validate significant market problem with target customers',
            'Define clear solution approach and value proposition',
            'Complete market and competitive analysis',
            'Develop business model and resource requirements',
        ],
    )


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class HeuristicAnalysisGenerator:
    """Builds analysis records from keyword heuristics.

    ``rng`` is the single source of randomness and ``clock`` returns the
    aware UTC datetime stamped on new records.
    """

    def __init__(self, rng: random.Random = None, clock=utc_now):
        self.rng = rng or random.Random()
        self.clock = clock

    def score(self, text: str, schema: str = SCHEMA_HORIZONTAL, mode: str = None) -> int:
        """Perturbed headline score, clamped to the mode and schema floor."""
        mode = mode or DEFAULT_MODES[schema]
        if mode not in MODE_FLOORS:
            raise ValueError(f'unknown score mode: {mode}')
        floor = max(MODE_FLOORS[mode], SCORE_RANGES[schema][0])
        raw = round(base_score(content_quality(text))) + self.rng.randint(-5, 5)
        return clamp(raw, floor, SCORE_CEILING)

    def generate(self, text: str, schema: str = SCHEMA_HORIZONTAL,
                 mode: str = None, language: str = 'en'):
        """Build a complete record of the requested schema."""
        if not isinstance(text, str):
            raise TypeError(f'idea text must be a string, not {type(text).__name__}')
        if schema not in DEFAULT_MODES:
            raise ValueError(f'unknown schema: {schema}')

        moment = self.clock()
        record_id = new_analysis_id(moment, self.rng)
        timestamp = format_timestamp(moment)
        score = self.score(text, schema, mode)
        log.debug('Heuristic %s analysis scored %d', schema, score)

        if schema == SCHEMA_LEGACY:
            return self._legacy(record_id, timestamp, text, score, language)
        if schema == SCHEMA_HORIZONTAL:
            return self._horizontal(record_id, timestamp, text, score, language)
        return self._comprehensive(record_id, timestamp, text, score, language)

    def _legacy(self, record_id, timestamp, text, score, language) -> LegacyAnalysis:
        count = max(2, min(5, (100 - score) // 15))
        return LegacyAnalysis(
            id=record_id,
            timestamp=timestamp,
            input=text,
            score=score,
            validity=validity_for(score),
            issues=self.rng.sample(LEGACY_ISSUES, count),
            recommendations=self.rng.sample(LEGACY_RECOMMENDATIONS, count),
            language=language,
        )

    def _pick_common(self) -> dict:
        return {
            'target_audience': self.rng.choice(TARGET_AUDIENCES),
            'problems_solved': self.rng.choice(PROBLEMS_SOLVED),
            'proposed_solution': self.rng.choice(PROPOSED_SOLUTIONS),
            'competitors': list(self.rng.choice(COMPETITOR_SETS)),
            'scalability': self.rng.choice(SCALABILITY_OPTIONS),
            'revenue': self.rng.choice(REVENUE_MODELS),
        }

    def _horizontal(self, record_id, timestamp, text, score, language) -> HorizontalAnalysis:
        picks = self._pick_common()
        return HorizontalAnalysis(
            id=record_id,
            timestamp=timestamp,
            original_idea=text,
            target_audience=picks['target_audience'],
            problems_solved=picks['problems_solved'],
            proposed_solution=picks['proposed_solution'],
            competitors=picks['competitors'],
            scalability=picks['scalability'],
            revenue_model=picks['revenue'],
            innovation_level=innovation_level(text),
            overall_score=score,
            language=language,
        )

    def _comprehensive(self, record_id, timestamp, text, score, language) -> ComprehensiveAnalysis:
        picks = self._pick_common()
        ctx = detect_context(text)
        quality = content_quality(text)
        level = innovation_level(text)
        verdict = verdict_for(score)
        return ComprehensiveAnalysis(
            id=record_id,
            timestamp=timestamp,
            idea=text,
            target_audience=picks['target_audience'],
            problems_solved=picks['problems_solved'],
            proposed_solution=picks['proposed_solution'],
            competitors=picks['competitors'],
            scalability=picks['scalability'],
            profit_model=picks['revenue'],
            innovation_level=level,
            overall_rating=score,
            verdict=verdict,
            input_quality_score=quality,
            confidence_level=confidence_from_quality(quality),
            summary=summary_line(verdict, level, score),
            market=market_analysis(ctx),
            technical=technical_analysis(ctx),
            financials=financial_projection(ctx),
            risks=risk_items(),
            opportunities=competitive_advantages(ctx),
            recommendations=recommendations_for(score),
            stage=stage_assessment(ctx, quality),
            overall_risk_level=risk_level_for(score),
            language=language,
        )
