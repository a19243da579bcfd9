from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from app.ai.types import AIClient, ChatMessage, LLMError
from app.integrations.supabase import SupabaseClient
from app.prompts.interview import (
    build_company_interviewer_prompt,
    build_company_questions_prompt,
    build_feedback_prompt,
    build_interviewer_prompt,
    build_prepared_questions_message,
    build_suggestions_prompt,
    conversation_messages,
    fallback_suggestions,
)
from app.schemas.interview import (
    AdvancedQuestionRequest,
    CompanyQuestionsRequest,
    CompanyQuestionsResponse,
    FeedbackRequest,
    InterviewFeedback,
    InterviewQuestionRequest,
    InterviewSession,
    PreparationSuggestion,
    PreparedQuestion,
    SaveSessionResponse,
)
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)

QUESTION_TEMPERATURE = 0.7
QUESTION_MAX_TOKENS = 500
GENERATION_TEMPERATURE = 0.7

IRRELEVANCE_KEYWORDS: tuple[str, ...] = (
    "pleasantries",
    "directly address",
    "on topic",
    "off topic",
    "irrelevant",
    "stay focused",
    "distract from",
    "unrelated",
)
SPECIFIC_EXAMPLE_MARKER = "For instance"

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")

_PADDING_IMPROVEMENTS: tuple[str, ...] = (
    "Consider providing more specific examples to illustrate technical concepts.",
    "Should focus on structured problem-solving",
)
_DEFAULT_STRENGTHS = ["Shows enthusiasm for the role", "Demonstrates basic technical knowledge"]
_DEFAULT_IMPROVEMENTS = ["Could provide more detailed examples", "Should focus on structured problem-solving"]
_DEFAULT_DETAILED_FEEDBACK = (
    "The interview shows potential but needs improvement in key areas. Consider practicing more technical "
    "questions and focusing on clear communication."
)
_DEFAULT_SCORE = 5


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_json_object(raw: str) -> dict[str, Any]:
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("expected a JSON object")
    return parsed


def upstream_error_message(exc: LLMError, default: str) -> str:
    if exc.status_code == 401:
        return "Authentication error: Invalid OpenAI API key"
    if exc.status_code == 429:
        return "OpenAI API rate limit exceeded. Please try again later."
    if exc.status_code >= 500:
        return "OpenAI service is currently unavailable. Please try again later."
    return str(exc) or default


async def generate_question(payload: InterviewQuestionRequest, *, ai: AIClient) -> str:
    system = build_interviewer_prompt(payload.job_role, payload.experience_level, payload.years_of_experience)
    messages = conversation_messages([system], payload.conversation_history)
    logger.info(
        "interview_question_requested level=%s turns=%s",
        payload.experience_level,
        len(payload.conversation_history),
    )
    return await ai.complete(messages, temperature=QUESTION_TEMPERATURE, max_tokens=QUESTION_MAX_TOKENS)


async def generate_advanced_question(payload: AdvancedQuestionRequest, *, ai: AIClient) -> str:
    system = [build_company_interviewer_prompt(payload.job_role, payload.company_name)]
    if payload.questions:
        system.append(build_prepared_questions_message(payload.questions))
    messages = conversation_messages(system, payload.conversation_history)
    logger.info(
        "advanced_question_requested prepared=%s turns=%s",
        len(payload.questions),
        len(payload.conversation_history),
    )
    return await ai.complete(messages, temperature=QUESTION_TEMPERATURE, max_tokens=QUESTION_MAX_TOKENS)


def _parse_questions(raw: str) -> list[PreparedQuestion]:
    try:
        parsed = _parse_json_object(raw)
    except ValueError as exc:
        logger.error("company_questions_parse_failed: %s", exc)
        raise ServiceError("Failed to parse questions from OpenAI API response", status_code=502) from exc

    questions: list[PreparedQuestion] = []
    for item in parsed.get("questions") or []:
        if not isinstance(item, dict):
            continue
        try:
            questions.append(PreparedQuestion.model_validate(item))
        except ValidationError:
            logger.warning("company_question_skipped keys=%s", sorted(item.keys()))
    return questions


def _parse_suggestions(raw: str) -> list[PreparationSuggestion]:
    parsed = _parse_json_object(raw)
    suggestions = parsed.get("suggestions") or []
    if not isinstance(suggestions, list):
        raise ValueError("suggestions must be a list")
    return [PreparationSuggestion.model_validate(item) for item in suggestions if isinstance(item, dict)]


async def generate_company_questions(
    payload: CompanyQuestionsRequest,
    *,
    ai: AIClient,
) -> CompanyQuestionsResponse:
    job_role = payload.job_role.strip()
    company_name = payload.company_name.strip()
    if not job_role or not company_name:
        raise ServiceError("Job role and company name are required", status_code=400)

    logger.info("company_questions_requested")
    try:
        raw_questions = await ai.complete(
            [ChatMessage(role="system", content=build_company_questions_prompt(job_role, company_name))],
            temperature=GENERATION_TEMPERATURE,
            json_mode=True,
        )
    except LLMError as exc:
        message = upstream_error_message(exc, "Unknown error occurred while generating questions")
        raise LLMError(message, code=exc.code, status_code=502) from exc
    questions = _parse_questions(raw_questions)

    try:
        raw_suggestions = await ai.complete(
            [ChatMessage(role="system", content=build_suggestions_prompt(job_role, company_name))],
            temperature=GENERATION_TEMPERATURE,
            json_mode=True,
        )
        suggestions = _parse_suggestions(raw_suggestions)
    except (LLMError, ValueError, ValidationError) as exc:
        logger.warning("company_suggestions_fallback: %s", exc)
        suggestions = [PreparationSuggestion(**item) for item in fallback_suggestions(job_role, company_name)]

    return CompanyQuestionsResponse(questions=questions, suggestions=suggestions)


def _mentions_irrelevance(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in IRRELEVANCE_KEYWORDS)


def filter_relevance_critiques(feedback: dict[str, Any]) -> dict[str, Any]:
    """Drop generic "stay on topic" critiques unless the detailed feedback backs them with an example."""
    improvements = feedback.get("improvements")
    if not isinstance(improvements, list):
        return feedback

    detailed = feedback.get("detailedFeedback")
    detailed = detailed if isinstance(detailed, str) else ""
    if SPECIFIC_EXAMPLE_MARKER in detailed and _mentions_irrelevance(detailed):
        return feedback

    kept = [item for item in improvements if not (isinstance(item, str) and _mentions_irrelevance(item))]
    for padding in _PADDING_IMPROVEMENTS:
        if len(kept) >= 2:
            break
        kept.append(padding)

    cleaned = dict(feedback, improvements=kept)
    if detailed:
        sentences = _SENTENCE_SPLIT.split(detailed)
        cleaned["detailedFeedback"] = " ".join(s for s in sentences if not _mentions_irrelevance(s))
    return cleaned


def _is_complete(feedback: dict[str, Any]) -> bool:
    return bool(
        feedback.get("overallScore")
        and feedback.get("technicalAccuracy")
        and feedback.get("communicationClarity")
        and feedback.get("confidence")
        and isinstance(feedback.get("strengths"), list)
        and isinstance(feedback.get("improvements"), list)
        and feedback.get("detailedFeedback")
    )


def repair_feedback(feedback: dict[str, Any]) -> dict[str, Any]:
    strengths = feedback.get("strengths")
    improvements = feedback.get("improvements")
    return {
        "overallScore": feedback.get("overallScore") or _DEFAULT_SCORE,
        "technicalAccuracy": feedback.get("technicalAccuracy") or _DEFAULT_SCORE,
        "communicationClarity": feedback.get("communicationClarity") or _DEFAULT_SCORE,
        "confidence": feedback.get("confidence") or _DEFAULT_SCORE,
        "strengths": strengths if isinstance(strengths, list) else list(_DEFAULT_STRENGTHS),
        "improvements": improvements if isinstance(improvements, list) else list(_DEFAULT_IMPROVEMENTS),
        "detailedFeedback": feedback.get("detailedFeedback") or _DEFAULT_DETAILED_FEEDBACK,
    }


async def generate_feedback(payload: FeedbackRequest, *, ai: AIClient) -> InterviewFeedback:
    if len(payload.conversation) < 2:
        raise ServiceError("Invalid conversation data. Need at least one question and answer.", status_code=400)

    system = build_feedback_prompt(payload.job_role, payload.company_name, payload.experience_level)
    messages = [ChatMessage(role="system", content=system)]
    messages.extend(ChatMessage(role=m.role, content=m.content) for m in payload.conversation)

    try:
        raw = await ai.complete(messages, temperature=GENERATION_TEMPERATURE, json_mode=True)
    except LLMError as exc:
        raise LLMError(f"OpenAI API error: {exc}", code=exc.code, status_code=502) from exc

    try:
        data = _parse_json_object(raw)
    except ValueError as exc:
        logger.error("interview_feedback_parse_failed: %s", exc)
        raise ServiceError("Failed to parse feedback data", status_code=502) from exc

    data = filter_relevance_critiques(data)
    if not _is_complete(data):
        logger.warning("interview_feedback_incomplete keys=%s", sorted(data.keys()))
        data = repair_feedback(data)

    try:
        feedback = InterviewFeedback.model_validate(data)
    except ValidationError as exc:
        logger.warning("interview_feedback_invalid: %s", exc.errors()[:3])
        feedback = InterviewFeedback.model_validate(repair_feedback({}))
    logger.info("interview_feedback_done overall=%s", feedback.overall_score)
    return feedback


async def save_session(
    session: InterviewSession,
    *,
    user_id: str,
    supabase: SupabaseClient,
) -> SaveSessionResponse:
    row = {
        "user_id": user_id,
        "job_role": session.job_role,
        "company_name": session.company_name,
        "questions": [q.model_dump(mode="json", by_alias=True) for q in session.questions],
        "suggestions": [s.model_dump(mode="json") for s in session.suggestions],
        "messages": [m.model_dump(mode="json") for m in session.messages],
        "start_time": (session.start_time or _utc_now()).isoformat(),
        "status": session.status or "active",
    }
    logger.info("interview_session_save user_id=%s status=%s", user_id, row["status"])
    inserted = await supabase.insert("advanced_interview_sessions", row)
    return SaveSessionResponse(success=True, session_id=str(inserted.get("id")))
