"""Prompt templates sent to the analysis API.

One template per record schema. Each asks for a bare JSON object whose keys
match the record's serialised shape so the normalizer can decode it
directly. The idea text replaces the ``{SAAS_CONCEPT}`` placeholder.
"""

from .models import SCHEMA_LEGACY, SCHEMA_HORIZONTAL, SCHEMA_COMPREHENSIVE


PLACEHOLDER = '{SAAS_CONCEPT}'

_JSON_ONLY = (
    'Respond with a single JSON object and nothing else: no markdown, '
    'no code fences, no commentary.'
)

LEGACY_PROMPT = f"""You are a senior product strategist reviewing a SaaS idea.

SaaS idea:
\"\"\"{PLACEHOLDER}\"\"\"

Assess how realistic the idea is and list its most important weaknesses.

{_JSON_ONLY}
Use exactly these keys:
{{
  "score": <integer 10-95>,
  "issues": [<2-5 short strings describing problems>],
  "recommendations": [<2-5 short, actionable strings>]
}}
"""

HORIZONTAL_PROMPT = f"""You are a SaaS market analyst.

SaaS idea:
\"\"\"{PLACEHOLDER}\"\"\"

Summarise the idea along the dimensions below. Be specific to this idea.

{_JSON_ONLY}
Use exactly these keys:
{{
  "targetAudience": "<who buys and uses it>",
  "problemsSolved": "<the main problem it removes>",
  "proposedSolution": "<what the product does>",
  "competitors": ["<competitor>", "<competitor>", "<competitor>"],
  "scalability": "<how it grows>",
  "revenueModel": "<how it makes money>",
  "innovationLevel": "Low" | "Medium" | "High",
  "overallScore": <integer 45-95>
}}
"""

COMPREHENSIVE_PROMPT = f"""You are a venture analyst producing a full due-diligence
review of a SaaS idea.

SaaS idea:
\"\"\"{PLACEHOLDER}\"\"\"

Cover audience, market size, technical effort, finances, risks and next
steps. Probability and impact must each be "Low", "Medium" or "High".

{_JSON_ONLY}
Use exactly these keys:
{{
  "targetAudience": "<string>",
  "problemsSolved": "<string>",
  "proposedSolution": "<string>",
  "competitors": ["<string>"],
  "scalability": "<string>",
  "profitModel": "<string>",
  "innovationLevel": "Low" | "Medium" | "High",
  "overallRating": <integer 10-95>,
  "confidenceLevel": "Very High" | "High" | "Medium" | "Low" | "Very Low",
  "summary": "<two sentences>",
  "market": {{"tam": "<range>", "sam": "<range>", "som": "<range>", "growth": "<CAGR>",
             "trends": ["<string>"], "barriers": ["<string>"], "opportunities": ["<string>"]}},
  "technical": {{"architectureComplexity": "<string>", "implementationComplexity": "Low" | "Medium" | "High",
                "developmentTimeline": "<string>", "resourceRequirements": "<string>",
                "technologyStack": ["<string>"], "technicalRisks": ["<string>"]}},
  "financials": {{"developmentCost": "<range>", "timeToMarket": "<string>",
                 "breakEvenTimeline": "<string>", "fundingRequirements": "<range>",
                 "revenueProjections": {{"year1": "<ARR>", "year2": "<ARR>", "year3": "<ARR>"}},
                 "keyFinancialRisks": ["<string>"]}},
  "risks": [{{"category": "market" | "technical" | "business" | "competitive",
             "risk": "<string>", "probability": "<level>", "impact": "<level>",
             "mitigation": "<string>"}}],
  "opportunities": ["<string>"],
  "recommendations": {{"immediate": ["<string>"], "shortTerm": ["<string>"], "longTerm": ["<string>"],
                      "criticalSuccessFactors": ["<string>"], "nextSteps": ["<string>"]}},
  "stage": {{"currentStage": "Idea" | "Concept" | "MVP" | "Early Traction",
            "readyForNextStage": true | false,
            "recommendations": ["<string>"], "milestones": ["<string>"]}}
}}
"""

PROMPTS = {
    SCHEMA_LEGACY: LEGACY_PROMPT,
    SCHEMA_HORIZONTAL: HORIZONTAL_PROMPT,
    SCHEMA_COMPREHENSIVE: COMPREHENSIVE_PROMPT,
}


def build_prompt(idea: str, schema: str = SCHEMA_HORIZONTAL) -> str:
    """Template for ``schema`` with the idea substituted in."""
    try:
        template = PROMPTS[schema]
    except KeyError:
        raise ValueError(f'unknown schema: {schema}')
    return template.replace(PLACEHOLDER, idea.strip())
