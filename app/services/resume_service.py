from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime, timedelta, timezone

from app.integrations.supabase import SupabaseClient
from app.schemas.resume import (
    ContactInfo,
    CreateResumeRequest,
    EducationEntry,
    ExperienceEntry,
    ResumeContent,
    ResumeDesign,
    ResumeRecord,
    TemporaryResume,
    dump_resume_content,
)
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_ID = "standard"
DEFAULT_SECTION_ORDER = [
    "contactInfo",
    "summary",
    "experience",
    "education",
    "skills",
    "certifications",
    "projects",
]

_TEMP_ID_ALPHABET = string.digits + string.ascii_lowercase


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_temp_resume_id(now: datetime | None = None) -> str:
    """``temp_<epoch ms>_<7 base36 chars>``."""
    now = now or _utc_now()
    millis = int(now.timestamp() * 1000)
    suffix = "".join(secrets.choice(_TEMP_ID_ALPHABET) for _ in range(7))
    return f"temp_{millis}_{suffix}"


def create_blank_resume() -> ResumeContent:
    return ResumeContent(
        contact_info=ContactInfo(name="", email="", phone="", location=""),
        summary="",
        experience=[
            ExperienceEntry(
                company="",
                position="",
                start_date="",
                end_date="",
                location="",
                description="",
                achievements=[""],
            )
        ],
        education=[
            EducationEntry(institution="", degree="", field="", start_date="", end_date="", location="")
        ],
        skills=[],
        certifications=[],
        projects=[],
        section_order=list(DEFAULT_SECTION_ORDER),
        design=ResumeDesign(
            accent_color="#2563eb",
            font_family="Inter, sans-serif",
            font_size="medium",
            spacing="normal",
            margins="normal",
        ),
    )


async def create_resume(
    payload: CreateResumeRequest,
    *,
    supabase: SupabaseClient,
    user_id: str | None,
    temp_ttl_hours: int = 24,
    now: datetime | None = None,
) -> ResumeRecord | TemporaryResume:
    """Persist a resume: a draft for signed-in users, an expiring temp row for anonymous callers."""
    if not payload.title.strip() or payload.content is None:
        raise ServiceError("Missing required fields", status_code=400)

    content = dump_resume_content(payload.content)
    if user_id:
        row = await supabase.insert(
            "user_resumes",
            {
                "user_id": user_id,
                "title": payload.title,
                "content": content,
                "job_description": payload.job_description or None,
                "original_text": payload.original_text or None,
                "template_id": payload.selected_template or DEFAULT_TEMPLATE_ID,
                "status": "draft",
                "ats_score": payload.ats_score or None,
            },
        )
        logger.info("resume_created user_id=%s resume_id=%s", user_id, row.get("id"))
        return ResumeRecord.model_validate(row)

    now = now or _utc_now()
    temp_id = new_temp_resume_id(now)
    await supabase.insert(
        "temp_resumes",
        {
            "id": temp_id,
            "title": payload.title,
            "content": content,
            "original_text": payload.original_text or None,
            "job_description": payload.job_description or None,
            "ats_score": payload.ats_score or None,
            "expires_at": (now + timedelta(hours=temp_ttl_hours)).isoformat(),
        },
    )
    logger.info("temp_resume_created resume_id=%s ttl_hours=%s", temp_id, temp_ttl_hours)
    return TemporaryResume(id=temp_id)
