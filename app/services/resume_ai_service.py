from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

from pydantic import ValidationError

from app.ai.types import AIClient, LLMError
from app.prompts.resume import PARSE_RESUME_FUNCTION, build_enhance_messages, build_parse_messages
from app.schemas.resume import (
    ENHANCE_SECTIONS,
    EnhanceResumeRequest,
    EnhanceResumeResponse,
    ParsedResumeResponse,
    ResumeContent,
)
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)

PARSE_TEMPERATURE = 0.7
ENHANCE_TEMPERATURE = 0.7

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_JSON_OBJECTS = re.compile(r"\{[\s\S]*?\}")

_ARRAY_SECTION_ERRORS = {
    "experience": "Experience data must be an array",
    "projects": "Projects data must be an array",
    "skills": "Skills data must be an array",
}


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float))]


def validate_experience_entries(entries: Any) -> list[dict[str, Any]]:
    if not isinstance(entries, list):
        return []
    validated = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        item = {
            "company": _text(entry.get("company")),
            "position": _text(entry.get("position")),
            "startDate": _text(entry.get("startDate")),
            "endDate": _text(entry.get("endDate")),
            "location": _text(entry.get("location")),
            "description": _text(entry.get("description")),
            "achievements": _strings(entry.get("achievements")),
        }
        if entry.get("current") is not None:
            item["current"] = bool(entry["current"])
        validated.append(item)
    return validated


def validate_project_entries(entries: Any) -> list[dict[str, Any]]:
    if not isinstance(entries, list):
        return []
    return [
        {
            "name": _text(entry.get("name")),
            "description": _text(entry.get("description")),
            "startDate": _text(entry.get("startDate")),
            "endDate": _text(entry.get("endDate")),
            "url": _text(entry.get("url")),
            "technologies": _strings(entry.get("technologies")),
            "achievements": _strings(entry.get("achievements")),
        }
        for entry in entries
        if isinstance(entry, dict)
    ]


def _dict_entries(value: Any) -> list[dict[str, Any]]:
    return [entry for entry in value if isinstance(entry, dict)] if isinstance(value, list) else []


def structured_resume(args: dict[str, Any]) -> ResumeContent:
    """Validate ``parse_resume`` arguments into resume content, dropping malformed entries."""
    contact = args.get("contactInfo") if isinstance(args.get("contactInfo"), dict) else {}
    payload = {
        "contactInfo": {key: value for key, value in contact.items() if isinstance(value, str)},
        "summary": _text(args.get("summary")),
        "experience": validate_experience_entries(args.get("experience")),
        "education": [
            {key: value for key, value in entry.items() if isinstance(value, str)}
            for entry in _dict_entries(args.get("education"))
        ],
        "skills": _strings(args.get("skills")),
        "certifications": [
            {key: value for key, value in entry.items() if isinstance(value, str)}
            for entry in _dict_entries(args.get("certifications"))
        ],
        "projects": validate_project_entries(args.get("projects")),
    }
    return ResumeContent.model_validate(payload)


async def parse_resume_text(
    resume_text: str,
    *,
    ai: AIClient,
    job_description: str = "",
) -> ParsedResumeResponse:
    if not resume_text.strip():
        raise ServiceError("Missing resume text content", status_code=400)

    logger.info("resume_parse_started chars=%s job_description=%s", len(resume_text), bool(job_description))
    messages = build_parse_messages(resume_text, job_description)
    try:
        args = await ai.call_function(messages, function=PARSE_RESUME_FUNCTION, temperature=PARSE_TEMPERATURE)
    except LLMError as exc:
        raise LLMError(f"OpenAI API error: {exc}", code=exc.code, status_code=exc.status_code) from exc

    try:
        parsed = structured_resume(args)
    except ValidationError as exc:
        logger.warning("resume_parse_invalid_arguments errors=%s", exc.error_count())
        raise ServiceError(
            "Failed to process resume data. The AI returned an invalid response format.",
            status_code=502,
        ) from exc
    return ParsedResumeResponse(parsed_resume=parsed, original_text=resume_text)


def _json_entries(raw: str) -> list[Any] | None:
    match = _JSON_ARRAY.search(raw)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return parsed

    entries = []
    for candidate in _JSON_OBJECTS.findall(raw):
        try:
            entries.append(json.loads(candidate))
        except ValueError:
            continue
    return entries or None


def _enhanced_entries(
    raw: str,
    original: list[Any],
    validator: Callable[[Any], list[dict[str, Any]]],
    section: str,
) -> list[dict[str, Any]]:
    entries = _json_entries(raw)
    if entries is None:
        logger.warning("resume_enhance_unparsed section=%s", section)
        return validator(original)
    return validator(entries)


def _enhanced_resume(raw: str, original: dict[str, Any]) -> dict[str, Any]:
    match = _JSON_OBJECT.search(raw)
    if not match:
        logger.warning("resume_enhance_unparsed section=all")
        return original
    try:
        enhanced = json.loads(match.group(0))
    except ValueError:
        logger.warning("resume_enhance_invalid_json section=all")
        return original
    if not isinstance(enhanced, dict) or not enhanced.get("contactInfo") or not enhanced.get("summary"):
        logger.warning("resume_enhance_missing_sections section=all")
        return original

    merged = {
        "contactInfo": enhanced.get("contactInfo") or original.get("contactInfo"),
        "summary": enhanced.get("summary") or original.get("summary") or "",
        "experience": (
            validate_experience_entries(enhanced["experience"])
            if enhanced.get("experience")
            else original.get("experience") or []
        ),
        "education": enhanced.get("education") or original.get("education") or [],
        "skills": enhanced.get("skills") or original.get("skills") or [],
        "certifications": enhanced.get("certifications") or original.get("certifications") or [],
        "projects": (
            validate_project_entries(enhanced["projects"])
            if enhanced.get("projects")
            else original.get("projects") or []
        ),
    }
    if "ats_analysis" in original:
        merged["ats_analysis"] = original["ats_analysis"]
    return merged


async def enhance_resume_section(payload: EnhanceResumeRequest, *, ai: AIClient) -> EnhanceResumeResponse:
    """Rewrite one resume section (or the whole resume for ``all``) with the LLM.

    Unparseable model output falls back to the submitted content.
    """
    section = payload.section_type
    content = payload.resume_content
    if content is None or content == "" or not section:
        raise ServiceError("Missing required parameters", status_code=400)
    if section not in ENHANCE_SECTIONS:
        raise ServiceError("Invalid section type", status_code=400)
    if section in _ARRAY_SECTION_ERRORS and not isinstance(content, list):
        raise ServiceError(_ARRAY_SECTION_ERRORS[section], status_code=400)
    if section == "all":
        if not payload.improvement_suggestions and not payload.missing_keywords:
            raise ServiceError("No improvement suggestions or missing keywords provided", status_code=400)
        if not isinstance(content, dict):
            raise ServiceError("Resume content must be an object", status_code=400)

    if section == "summary":
        content = _text(content)
    elif section == "experience":
        content = validate_experience_entries(content)
    elif section == "projects":
        content = validate_project_entries(content)

    messages = build_enhance_messages(
        section,
        content,
        job_description=payload.job_description or "",
        target_role=payload.target_role or "",
        improvement_suggestions=payload.improvement_suggestions,
        missing_keywords=payload.missing_keywords,
    )
    raw = await ai.complete(messages, temperature=ENHANCE_TEMPERATURE)

    if section == "summary":
        enhanced: Any = raw.strip()
    elif section == "skills":
        enhanced = [skill.strip() for skill in raw.split(",") if skill.strip()]
    elif section == "experience":
        enhanced = _enhanced_entries(raw, content, validate_experience_entries, section)
    elif section == "projects":
        enhanced = _enhanced_entries(raw, content, validate_project_entries, section)
    else:
        enhanced = _enhanced_resume(raw, content)

    logger.info("resume_enhance_done section=%s", section)
    return EnhanceResumeResponse(enhanced=enhanced)
