from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from app.ai.types import AIClient
from app.core.deps import get_ai, get_supabase
from app.core.errors import DomainError, to_http_exception
from app.core.rate_limit import rate_limit
from app.core.security import require_user
from app.integrations.supabase import AuthUser, SupabaseClient
from app.schemas.interview import (
    AdvancedQuestionRequest,
    CompanyQuestionsRequest,
    CompanyQuestionsResponse,
    FeedbackRequest,
    FeedbackResponse,
    InterviewQuestionRequest,
    InterviewQuestionResponse,
    SaveSessionRequest,
    SaveSessionResponse,
)
from app.services import interview_service

router = APIRouter()


@router.post("/interviews/question", response_model=InterviewQuestionResponse)
@rate_limit()
async def interview_question(
    request: Request,
    payload: InterviewQuestionRequest,
    ai: AIClient = Depends(get_ai),
):
    _ = request
    try:
        question = await interview_service.generate_question(payload, ai=ai)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return InterviewQuestionResponse(question=question)


@router.post("/interviews/advanced/question", response_model=InterviewQuestionResponse)
@rate_limit()
async def advanced_interview_question(
    request: Request,
    payload: AdvancedQuestionRequest,
    ai: AIClient = Depends(get_ai),
):
    _ = request
    try:
        question = await interview_service.generate_advanced_question(payload, ai=ai)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return InterviewQuestionResponse(question=question)


@router.post("/interviews/company-questions", response_model=CompanyQuestionsResponse)
@rate_limit()
async def company_questions(
    request: Request,
    payload: CompanyQuestionsRequest,
    ai: AIClient = Depends(get_ai),
):
    _ = request
    try:
        return await interview_service.generate_company_questions(payload, ai=ai)
    except DomainError as exc:
        raise to_http_exception(exc) from exc


@router.post("/interviews/feedback", response_model=FeedbackResponse)
@rate_limit()
async def interview_feedback(
    request: Request,
    payload: FeedbackRequest,
    ai: AIClient = Depends(get_ai),
):
    _ = request
    try:
        feedback = await interview_service.generate_feedback(payload, ai=ai)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return FeedbackResponse(feedback=feedback)


@router.post("/interviews/sessions", response_model=SaveSessionResponse)
async def save_interview_session(
    payload: SaveSessionRequest,
    user: AuthUser = Depends(require_user),
    supabase: SupabaseClient = Depends(get_supabase),
):
    try:
        return await interview_service.save_session(payload.session, user_id=user.id, supabase=supabase)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
