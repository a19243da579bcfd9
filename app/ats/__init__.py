from .fingerprint import create_resume_content_hash, normalize_job_description
from .scoring import (
    ScoreClassification,
    classify_score,
    get_score_color_class,
    get_score_description,
    get_score_recommendations,
)
from .staleness import (
    ReAnalysisAdvice,
    has_content_changed_since_analysis,
    is_analysis_recent,
    should_suggest_re_analysis,
)

__all__ = [
    "create_resume_content_hash",
    "normalize_job_description",
    "has_content_changed_since_analysis",
    "is_analysis_recent",
    "should_suggest_re_analysis",
    "ReAnalysisAdvice",
    "ScoreClassification",
    "classify_score",
    "get_score_color_class",
    "get_score_description",
    "get_score_recommendations",
]
