from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from app.ai.types import AIClient
from app.core.config import settings
from app.core.deps import get_ai, get_supabase
from app.core.errors import DomainError, to_http_exception
from app.core.rate_limit import rate_limit
from app.core.security import optional_user
from app.integrations.supabase import AuthUser, SupabaseClient
from app.parsing.extract import SUPPORTED_EXTENSIONS, extract_resume_text, file_extension
from app.schemas.resume import (
    CreateResumeRequest,
    EnhanceResumeRequest,
    EnhanceResumeResponse,
    ParsedResumeResponse,
    ParseResumeTextRequest,
    ResumeContent,
    ResumeRecord,
    TemporaryResume,
)
from app.services.resume_ai_service import enhance_resume_section, parse_resume_text
from app.services.resume_service import create_blank_resume, create_resume

router = APIRouter()

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB


@router.post("/resumes", response_model=ResumeRecord | TemporaryResume)
async def create_resume_endpoint(
    payload: CreateResumeRequest,
    user: AuthUser | None = Depends(optional_user),
    supabase: SupabaseClient = Depends(get_supabase),
):
    try:
        return await create_resume(
            payload,
            supabase=supabase,
            user_id=user.id if user else None,
            temp_ttl_hours=settings.temp_resume_ttl_hours,
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc


@router.get("/resumes/blank", response_model=ResumeContent, response_model_exclude_none=True)
async def blank_resume():
    return create_blank_resume()


async def _read_upload(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {MAX_UPLOAD_BYTES // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/resumes/parse", response_model=ParsedResumeResponse, response_model_exclude_none=True)
@rate_limit()
async def parse_resume_file(
    request: Request,
    file: UploadFile = File(...),
    job_description: str = Form(default="", alias="jobDescription"),
    ai: AIClient = Depends(get_ai),
):
    _ = request
    filename = file.filename or "resume"
    if file_extension(filename) not in SUPPORTED_EXTENSIONS | {"doc"}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported file format. Please upload a PDF or DOCX file.",
        )
    content = await _read_upload(file)
    try:
        text = extract_resume_text(filename, content)
        return await parse_resume_text(text, ai=ai, job_description=job_description)
    except DomainError as exc:
        raise to_http_exception(exc) from exc


@router.post("/resumes/parse-text", response_model=ParsedResumeResponse, response_model_exclude_none=True)
@rate_limit()
async def parse_resume_plain_text(
    request: Request,
    payload: ParseResumeTextRequest,
    ai: AIClient = Depends(get_ai),
):
    _ = request
    try:
        return await parse_resume_text(payload.resume_text, ai=ai, job_description=payload.job_description)
    except DomainError as exc:
        raise to_http_exception(exc) from exc


@router.post("/resumes/enhance", response_model=EnhanceResumeResponse)
@rate_limit()
async def enhance_resume(
    request: Request,
    payload: EnhanceResumeRequest,
    ai: AIClient = Depends(get_ai),
):
    _ = request
    try:
        return await enhance_resume_section(payload, ai=ai)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
