from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Tuple

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Evaluation Survey Results"
APP_VERSION = "0.1.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

# ---------------------------------------------------------------------------
# Response endpoint
#
# The endpoint returns a JSON array of flat records, one per respondent:
#   [{"clear-instructions": 4, "grading-scale": "5", ...}, ...]
# Leave it blank to get the "Configuration Error." status on the page.
# ---------------------------------------------------------------------------

RESPONSES_URL = os.getenv("LIKERT_RESPONSES_URL", "").strip()

FETCH_TIMEOUT_SECONDS = int(os.getenv("LIKERT_FETCH_TIMEOUT_SECONDS", "30").strip() or "30")

# ---------------------------------------------------------------------------
# Rendering / counting variants
#   LIKERT_CHART_LAYOUT:     "compact" (short titles, rotated labels) or "wide"
#   LIKERT_COERCION_POLICY:  "coerce" (numeric strings count) or "strict"
# ---------------------------------------------------------------------------

CHART_LAYOUT = os.getenv("LIKERT_CHART_LAYOUT", "compact").strip().lower() or "compact"
COERCION_POLICY = os.getenv("LIKERT_COERCION_POLICY", "coerce").strip().lower() or "coerce"

# ---------------------------------------------------------------------------
# Survey definition
# ---------------------------------------------------------------------------

LIKERT_CATEGORIES: Tuple[int, ...] = (1, 2, 3, 4, 5)

LIKERT_LABELS: Dict[int, str] = {
    1: "Strongly Disagree",
    2: "Disagree",
    3: "Neutral",
    4: "Agree",
    5: "Strongly Agree",
}


@dataclass(frozen=True)
class QuestionDescriptor:
    key: str
    title: str


# Chart order on the page follows this tuple.
QUESTIONS: Tuple[QuestionDescriptor, ...] = (
    QuestionDescriptor("clear-instructions", "Clear instructions before evaluating"),
    QuestionDescriptor("grading-scale", "Teacher provides a grading scale"),
    QuestionDescriptor("eval-content", "Evaluated purely on course content"),
    QuestionDescriptor("resources", "Additional resources to dig further"),
    QuestionDescriptor("practice", "Practicing what was taught"),
    QuestionDescriptor("limit-time", "Produce assignments in limited time"),
    QuestionDescriptor("feedback", "Personal feedback and annotations"),
    QuestionDescriptor("explanation", "Explanations provided after assignment"),
    QuestionDescriptor("correction", "Asked to correct mistakes after evaluation"),
    QuestionDescriptor("interaction", "Interact with other students"),
    QuestionDescriptor("group-work", "Work in groups"),
)
