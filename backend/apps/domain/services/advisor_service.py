# apps/domain/services/advisor_service.py

"""
Advisor Service - AI-assisted consulting answers

Wraps the LLM provider with the consultant prompt and a rule-based
fallback so that an answer is always produced.
"""

import logging
from typing import Optional

from apps.domain.models import Advice
from apps.domain.ports.llm import ILLMProvider
from apps.domain.prompts.template import PromptTemplate

logger = logging.getLogger(__name__)


FALLBACK_HEADER = "AI Consultant Analysis:\n\n"

FALLBACK_RULES = [
    (
        ("market", "sell", "customer"),
        "market_sales",
        "Based on your query about market/sales:\n"
        "1. Analyze your current customer acquisition cost (CAC).\n"
        "2. Segment your audience for personalized messaging.\n"
        "3. Consider a referral program to leverage existing happy customers.",
    ),
    (
        ("employee", "team", "culture"),
        "team_culture",
        "Regarding your team/culture query:\n"
        "1. Foster psychological safety to encourage innovation.\n"
        "2. Review your compensation packages against market rates.\n"
        "3. Invest in professional development opportunities.",
    ),
    (
        ("money", "profit", "cost"),
        "financial",
        "Financial Analysis:\n"
        "1. Audit your recurring subscriptions and cut unused tools.\n"
        "2. Negotiate better terms with key suppliers.\n"
        "3. Focus on increasing the Lifetime Value (LTV) of existing clients.",
    ),
]

GENERIC_FALLBACK = (
    "Based on your input, we recommend a SWOT analysis to identify internal "
    "strengths and external opportunities. Ensure your strategic goals are SMART "
    "(Specific, Measurable, Achievable, Relevant, Time-bound)."
)


def classify_question(description: str) -> str:
    """Keyword category of a question; first matching rule wins"""
    text = (description or "").lower()
    for keywords, category, _ in FALLBACK_RULES:
        if any(keyword in text for keyword in keywords):
            return category
    return "generic"


def generate_fallback_response(description: str) -> str:
    """
    Rule-based answer used when the LLM is unavailable

    Never raises.
    """
    text = (description or "").lower()
    for keywords, _, paragraph in FALLBACK_RULES:
        if any(keyword in text for keyword in keywords):
            return FALLBACK_HEADER + paragraph
    return FALLBACK_HEADER + GENERIC_FALLBACK


class AdvisorService:
    """
    Produces AI-assisted answers

    Responsibilities:
    - Build the consultant prompt
    - Call the LLM provider
    - Substitute the keyword fallback on any failure
    """

    def __init__(
        self,
        llm: Optional[ILLMProvider],
        prompt_template: PromptTemplate,
    ):
        """
        Initialize advisor

        Args:
            llm: LLM provider, or None when no API key is configured
            prompt_template: Prompt renderer
        """
        self._llm = llm
        self._prompt_template = prompt_template

    def advise(self, customer_name: str, question: str) -> Advice:
        """
        Answer a business question

        Args:
            customer_name: Customer to address
            question: Free-text question

        Returns:
            Advice with method "llm" or "fallback"; this method does not raise
        """
        logger.info(f"Generating advice for {customer_name!r}")

        if self._llm is None:
            logger.warning("No LLM provider configured, using fallback response")
            return self._fallback(question, reason="llm_not_configured")

        try:
            messages = self._prompt_template.build_messages(customer_name, question)
            content = self._llm.generate(messages)
        except Exception as e:
            logger.error(f"LLM generation failed, using fallback response: {e}")
            return self._fallback(question, reason=type(e).__name__)

        if not content or not content.strip():
            logger.warning("LLM returned empty content, using fallback response")
            return self._fallback(question, reason="empty_response")

        logger.info(f"Advice generated ({len(content)} chars)")
        return Advice(
            content=content,
            method="llm",
            metadata={"llm_model": getattr(self._llm, "model", "unknown")},
        )

    def _fallback(self, question: str, reason: str) -> Advice:
        return Advice(
            content=generate_fallback_response(question),
            method="fallback",
            metadata={"category": classify_question(question), "reason": reason},
        )
