from __future__ import annotations

from pydantic import BaseModel

# (inclusive lower bound, label, colour token), highest band first
_BANDS: tuple[tuple[int, str, str], ...] = (
    (80, "Excellent", "bg-green-500"),
    (60, "Good", "bg-yellow-500"),
    (40, "Fair", "bg-orange-500"),
    (0, "Poor", "bg-red-500"),
)

_CORRECTIVE_TIPS: tuple[str, ...] = (
    "Add more relevant keywords from the job description.",
    "Use standard section headings (Experience, Education, Skills).",
    "Remove any images, charts, or complex formatting.",
    "Ensure your work experience highlights relevant skills.",
    "Quantify your achievements with numbers and metrics.",
)

_TIPS: dict[str, tuple[str, ...]] = {
    "Excellent": (
        "Your resume is well-optimized for ATS systems.",
        "Continue to tailor keywords for specific job applications.",
    ),
    "Good": (
        "Consider adding more industry-specific keywords.",
        "Make sure your achievements are quantifiable.",
        "Check for any formatting inconsistencies.",
    ),
    "Fair": _CORRECTIVE_TIPS,
    "Poor": _CORRECTIVE_TIPS,
}


class ScoreClassification(BaseModel):
    label: str
    tips: list[str]


def _band(score: int) -> tuple[int, str, str]:
    for band in _BANDS:
        if score >= band[0]:
            return band
    return _BANDS[-1]


def get_score_description(score: int) -> str:
    return _band(score)[1]


def get_score_color_class(score: int) -> str:
    return _band(score)[2]


def get_score_recommendations(score: int) -> list[str]:
    return list(_TIPS[get_score_description(score)])


def classify_score(score: int) -> ScoreClassification:
    label = get_score_description(score)
    return ScoreClassification(label=label, tips=list(_TIPS[label]))
