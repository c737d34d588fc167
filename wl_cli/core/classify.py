"""Activity classification utilities."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from wl_cli.core.constants import (
    CATEGORIES,
    CATEGORY_RULES,
    DEFAULT_CATEGORY,
    KEYWORDS_FOR_FULL_CONFIDENCE,
    MIN_CONFIDENCE,
    SUGGESTION_CONFIDENCE_THRESHOLD,
)
from wl_cli.core.models import Category, ClassificationResult

logger = logging.getLogger(__name__)

Rules = Sequence[Tuple[str, Sequence[str]]]


def category_scores(activity: str, rules: Rules = CATEGORY_RULES) -> List[Tuple[str, int]]:
    """Count matching keywords per category, in rule priority order."""
    text = (activity or "").lower()
    return [
        (category, sum(1 for keyword in keywords if keyword in text))
        for category, keywords in rules
    ]


def classify(activity: str, rules: Rules = CATEGORY_RULES) -> ClassificationResult:
    """Classify activity text by keyword hits; ties go to the earlier category."""
    max_score = 0
    predicted = DEFAULT_CATEGORY
    scores = category_scores(activity, rules)
    for category, score in scores:
        if score > max_score:
            max_score = score
            predicted = category

    confidence = min(max_score / KEYWORDS_FOR_FULL_CONFIDENCE, 1.0) if max_score > 0 else MIN_CONFIDENCE
    logger.debug("Keyword scores for %r: %s", activity, dict(scores))
    return ClassificationResult(
        category=Category(predicted),
        confidence=max(confidence, MIN_CONFIDENCE),
    )


def classify_with_context(
    activity: str,
    subject: Optional[str] = None,
    duration: Optional[float] = None,
    rules: Rules = CATEGORY_RULES,
) -> ClassificationResult:
    """Classify activity, then adjust using session duration and subject name."""
    base = classify(activity, rules)
    category = base.category
    confidence = base.confidence

    # A zero or missing duration carries no context.
    if duration:
        if duration <= 1 and category is Category.LECTURE:
            # Short sessions are less likely to be full lectures.
            confidence *= 0.8
        elif duration >= 3 and category is Category.LAB:
            confidence *= 1.2

    if subject and "lab" in subject.lower() and category is Category.LECTURE:
        category = Category.LAB
        confidence *= 1.1

    return ClassificationResult(category=category, confidence=min(confidence, 1.0))


def resolve_category(
    activity: str,
    declared: Optional[str] = None,
    threshold: float = SUGGESTION_CONFIDENCE_THRESHOLD,
    rules: Rules = CATEGORY_RULES,
) -> str:
    """Pick the category to store: a confident classification wins over the declared one.

    A declared value outside the known categories is ignored.
    """
    result = classify(activity, rules)
    if result.confidence > threshold or declared not in CATEGORIES:
        return result.category.value
    return declared


def classification_rules_from_config(config: Dict[str, Any]) -> List[Tuple[str, List[str]]]:
    """Build rules from config if provided, otherwise defaults.

    Configured keyword lists replace the defaults for their category only;
    priority order always follows the default table.
    """
    configured = config.get("classification", {}).get("rules", {})
    defaults = [(category, list(keywords)) for category, keywords in CATEGORY_RULES]
    if not isinstance(configured, dict) or not configured:
        return defaults

    unknown = sorted(set(configured) - set(CATEGORIES))
    if unknown:
        logger.warning("Ignoring rules for unknown categories: %s", ", ".join(unknown))

    rules: List[Tuple[str, List[str]]] = []
    for category, keywords in defaults:
        value = configured.get(category)
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            keywords = [str(item).lower() for item in value]
        rules.append((category, keywords))
    return rules
