"""Keyword tables, candidate pools and label mappings.

Every fixed list the validator, the heuristic generator and the normalizer
consult lives here, together with the small lookup functions that turn raw
labels into their canonical values.
"""

from .models import INNOVATION_LEVELS, RISK_LEVELS


# ---------------------------------------------------------------------------
# Input validation tables
# ---------------------------------------------------------------------------

PLACEHOLDER_TOKENS = (
    'lorem ipsum', 'test', 'example', 'placeholder', 'sample',
    'demo', 'xxx', 'tbd', 'todo',
)

VALIDATION_BUSINESS_KEYWORDS = (
    'problem', 'solution', 'customer', 'user', 'market', 'business',
    'revenue', 'profit', 'service', 'product', 'platform', 'application',
    'software', 'tool', 'system', 'efficiency', 'automation', 'management',
    'analytics', 'data', 'workflow',
)

# Aspect name -> keywords that count as covering it
BUSINESS_ASPECTS = (
    ('problem', ('problem', 'issue', 'challenge', 'pain', 'difficulty', 'struggle')),
    ('solution', ('solution', 'solve', 'fix', 'address', 'resolve', 'tool', 'platform', 'service')),
    ('target', ('customer', 'user', 'client', 'audience', 'market', 'segment', 'demographic')),
    ('value', ('benefit', 'value', 'advantage', 'improvement', 'efficiency', 'save', 'reduce', 'increase')),
    ('business', ('business', 'revenue', 'profit', 'monetize', 'pricing', 'subscription', 'model')),
)

ACTION_WORDS = (
    'create', 'develop', 'build', 'test', 'validate', 'research',
    'analyze', 'implement', 'launch', 'measure',
)


# ---------------------------------------------------------------------------
# Heuristic generator tables
# ---------------------------------------------------------------------------

QUALITY_BUSINESS_KEYWORDS = (
    'problem', 'solution', 'customer', 'market', 'revenue', 'business',
    'user', 'platform', 'service', 'efficiency', 'automation', 'analytics',
)

SPECIFICITY_TERMS = (
    'target', 'segment', 'demographic', 'pricing', 'subscription',
    'integration', 'api', 'dashboard', 'workflow', 'optimization',
)

# Matched as lowercase substrings, so short tokens hit inside longer words
INNOVATIVE_KEYWORDS = (
    'ai', 'ml', 'blockchain', 'iot', 'ar', 'vr',
    'automation', 'intelligent', 'smart', 'predictive',
)

B2B_TERMS = ('business', 'enterprise', 'company')
B2C_TERMS = ('consumer', 'personal', 'individual')
TECH_TERMS = ('ai', 'machine learning', 'automation')
FINTECH_TERMS = ('payment', 'financial', 'banking')
AI_TERMS = ('ai', 'machine learning', 'intelligent')
AUTOMATION_TERMS = ('automat', 'workflow')
MVP_TERMS = ('mvp', 'prototype', 'beta')
CUSTOMER_TERMS = ('customer', 'user', 'client')
REVENUE_TERMS = ('revenue', 'paying', 'subscription')


# ---------------------------------------------------------------------------
# Candidate pools (uniform random selection)
# ---------------------------------------------------------------------------

TARGET_AUDIENCES = (
    'Small to medium businesses (SMBs) in retail and e-commerce',
    'Enterprise software development teams',
    'Digital marketing agencies and consultants',
    'Healthcare providers and medical practices',
    'Educational institutions and online learning platforms',
    'Financial services and fintech companies',
    'Real estate professionals and property managers',
    'Manufacturing and supply chain companies',
    'Professional services firms (legal, accounting, consulting)',
    'Non-profit organizations and NGOs',
)

PROBLEMS_SOLVED = (
    'Inefficient manual processes leading to time waste and errors',
    'Lack of real-time data visibility and analytics',
    'Poor communication and collaboration between teams',
    'Difficulty in tracking and managing customer relationships',
    'Complex workflow management and task coordination',
    'Inadequate reporting and business intelligence capabilities',
    'Security vulnerabilities and compliance challenges',
    'Scalability issues with existing legacy systems',
    'High operational costs and resource inefficiencies',
    'Limited integration capabilities with existing tools',
)

PROPOSED_SOLUTIONS = (
    'Cloud-based automation platform with AI-powered workflow optimization',
    'Real-time dashboard with advanced analytics and predictive insights',
    'Integrated communication hub with project management capabilities',
    'Comprehensive CRM system with automated lead nurturing',
    'Intelligent task management with resource allocation optimization',
    'Self-service business intelligence platform with custom reporting',
    'Zero-trust security framework with automated compliance monitoring',
    'Microservices architecture enabling seamless scalability',
    'Cost optimization engine with automated resource management',
    'Universal API gateway with pre-built integrations',
)

COMPETITOR_SETS = (
    ('Salesforce', 'HubSpot', 'Pipedrive'),
    ('Microsoft Teams', 'Slack', 'Asana'),
    ('Tableau', 'Power BI', 'Looker'),
    ('AWS', 'Azure', 'Google Cloud'),
    ('Shopify', 'WooCommerce', 'BigCommerce'),
    ('Zoom', 'WebEx', 'Google Meet'),
    ('QuickBooks', 'Xero', 'FreshBooks'),
    ('Jira', 'Trello', 'Monday.com'),
    ('Mailchimp', 'Constant Contact', 'SendGrid'),
    ('Zendesk', 'Freshdesk', 'Intercom'),
)

SCALABILITY_OPTIONS = (
    'Horizontal scaling with microservices architecture and containerization',
    'Global expansion through multi-region cloud deployment',
    'Vertical market expansion with industry-specific modules',
    'API-first approach enabling third-party integrations and partnerships',
    'White-label solutions for reseller and partner channels',
    'Enterprise-grade features with advanced security and compliance',
    'Mobile-first design supporting iOS and Android platforms',
    'AI/ML capabilities for predictive analytics and automation',
    'Multi-tenant architecture supporting unlimited users',
    'Marketplace ecosystem for third-party plugins and extensions',
)

REVENUE_MODELS = (
    'Freemium model with premium features and advanced analytics',
    'Tiered subscription pricing based on usage and features',
    'Per-seat pricing with volume discounts for enterprises',
    'Usage-based pricing with pay-as-you-scale model',
    'Enterprise licensing with custom implementation services',
    'Marketplace commission model with transaction fees',
    'Professional services and consulting revenue streams',
    'White-label licensing to partners and resellers',
    'Data monetization through anonymized insights and benchmarks',
    'Hybrid model combining subscriptions with one-time setup fees',
)

LEGACY_ISSUES = (
    'Complex navigation structure may confuse users',
    'Too many required form fields could cause abandonment',
    'Lack of clear call-to-action buttons',
    'Insufficient visual hierarchy in content layout',
    'Missing feedback for user actions',
    'Poor mobile responsiveness detected',
    'Long loading times may impact user experience',
    'Unclear error messages and validation',
    'Inconsistent design patterns across pages',
    'Accessibility concerns for screen readers',
)

LEGACY_RECOMMENDATIONS = (
    'Simplify navigation with clear menu categories',
    'Reduce form fields to essential information only',
    'Add prominent, contrasting call-to-action buttons',
    'Implement clear visual hierarchy with proper spacing',
    'Provide immediate feedback for all user interactions',
    'Optimize layout for mobile-first design approach',
    'Implement progressive loading and performance optimization',
    'Write clear, actionable error messages',
    'Establish consistent design system and style guide',
    'Add ARIA labels and improve semantic HTML structure',
)


# ---------------------------------------------------------------------------
# Label mappings
# ---------------------------------------------------------------------------

# Every raw innovation label seen in stored or upstream data, lowercased
INNOVATION_LEVEL_ALIASES = {
    'low': 'Low',
    'medium': 'Medium',
    'moderate': 'Medium',
    'high': 'High',
    'منخفض': 'Low',
    'متوسط': 'Medium',
    'عالي': 'High',
    'مرتفع': 'High',
}
DEFAULT_INNOVATION_LEVEL = 'Medium'

RISK_LEVEL_ALIASES = {
    'low': 'Low',
    'medium': 'Medium',
    'high': 'High',
    'very high': 'High',
}


def canonical_innovation_level(value) -> str:
    """Map any raw innovation label to Low, Medium or High.

    Unknown values and non-strings map to Medium.
    """
    if isinstance(value, str):
        level = INNOVATION_LEVEL_ALIASES.get(value.strip().lower())
        if level in INNOVATION_LEVELS:
            return level
    return DEFAULT_INNOVATION_LEVEL


def canonical_risk_level(value, default: str = 'Medium') -> str:
    """Map a probability/impact label to Low, Medium or High."""
    if isinstance(value, str):
        level = RISK_LEVEL_ALIASES.get(value.strip().lower())
        if level in RISK_LEVELS:
            return level
    return default


def count_hits(text_lower: str, keywords) -> int:
    """Number of keywords appearing as substrings of already-lowered text."""
    return sum(1 for keyword in keywords if keyword in text_lower)


def has_any(text_lower: str, keywords) -> bool:
    return any(keyword in text_lower for keyword in keywords)
