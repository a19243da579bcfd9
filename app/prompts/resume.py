from __future__ import annotations

import json
from typing import Any

from app.ai.types import ChatMessage

PARSE_SYSTEM_PROMPT = (
    "You are an expert at parsing and optimizing resume content into structured data. Extract the "
    "information from the provided resume text and organize it into sections. Focus on making the content "
    "ATS-friendly by using relevant keywords and standard formatting."
)

_PARSE_INSTRUCTIONS = (
    "Parse the following resume text into structured JSON format with the following sections: contactInfo "
    "(name, email, phone, location, linkedin, website, github), summary, experience (array of {company, "
    "position, startDate, endDate, location, description, achievements}), education (array of {institution, "
    "degree, field, startDate, endDate, location, gpa}), skills (array of strings), certifications (array of "
    "{name, issuer, date}), and projects (array of {name, description, startDate, endDate, technologies})."
)


def _string_props(*names: str) -> dict[str, Any]:
    return {name: {"type": "string"} for name in names}


_STRING_ARRAY = {"type": "array", "items": {"type": "string"}}

PARSE_RESUME_FUNCTION: dict[str, Any] = {
    "name": "parse_resume",
    "description": "Parse resume text into structured JSON",
    "parameters": {
        "type": "object",
        "properties": {
            "contactInfo": {
                "type": "object",
                "properties": _string_props("name", "email", "phone", "location", "linkedin", "website", "github"),
                "required": ["name", "email"],
            },
            "summary": {"type": "string"},
            "experience": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        **_string_props("company", "position", "startDate", "endDate", "location", "description"),
                        "achievements": _STRING_ARRAY,
                    },
                    "required": ["company", "position", "startDate", "description"],
                },
            },
            "education": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": _string_props(
                        "institution", "degree", "field", "startDate", "endDate", "location", "gpa"
                    ),
                    "required": ["institution", "degree", "startDate"],
                },
            },
            "skills": _STRING_ARRAY,
            "certifications": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": _string_props("name", "issuer", "date"),
                    "required": ["name"],
                },
            },
            "projects": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        **_string_props("name", "description", "startDate", "endDate"),
                        "technologies": _STRING_ARRAY,
                    },
                    "required": ["name", "description"],
                },
            },
        },
        "required": ["contactInfo", "experience", "education", "skills"],
    },
}


def build_parse_messages(resume_text: str, job_description: str = "") -> list[ChatMessage]:
    prompt = _PARSE_INSTRUCTIONS
    if job_description:
        prompt += f"\n\nOptimize the content to match this job description:\n{job_description}"
    prompt += f"\n\nResume text:\n{resume_text}"
    return [ChatMessage(role="system", content=PARSE_SYSTEM_PROMPT), ChatMessage(role="user", content=prompt)]


SECTION_SYSTEM_PROMPT = """You are an expert resume writer with 10+ years of experience helping professionals land their dream jobs. Your expertise includes:

WRITING PHILOSOPHY:
- Create content that passes ATS systems while remaining genuinely human and engaging
- Avoid corporate buzzwords and generic language that makes resumes sound robotic
- Focus on specific, measurable achievements that tell a compelling professional story
- Use natural, confident language that reflects how skilled professionals actually communicate

OUTPUT REQUIREMENTS:
- Return content in the exact format requested (JSON structure for arrays, plain text for summaries)
- Ensure all technical details and factual information remain accurate
- Write in a style that sounds authentic and professional, not artificially generated
- Balance ATS optimization with genuine human appeal

Your goal is to make the resume content more compelling and effective while maintaining its authenticity and professional credibility."""

FULL_RESUME_SYSTEM_PROMPT = (
    "You are an expert resume writer specializing in ATS optimization. Your task is to enhance an entire "
    "resume to improve its ATS compatibility by implementing specific suggestions and incorporating missing "
    "keywords. When returning the enhanced resume, ALWAYS maintain the exact same JSON structure as the "
    "original, with all the same fields and object structure. Return ONLY the complete JSON object with all "
    "sections of the resume enhanced according to the provided suggestions."
)

_AUTHENTICITY_NOTE = (
    "IMPORTANT: Your response should sound like it was written by the actual professional, not by AI. Avoid "
    "phrases that sound artificial or overly promotional. Focus on concrete, specific details that demonstrate "
    "real expertise and impact."
)

_SUMMARY_PROMPT = """Create a compelling professional summary that follows these specific guidelines:

WRITING STYLE:
- Write in first person (no "I" needed) with confident, active voice
- Use specific, concrete language rather than generic buzzwords
- Keep sentences concise but impactful (2-4 sentences total)

CONTENT REQUIREMENTS:
- Start with your current role or expertise area
- Highlight 2-3 specific, quantifiable achievements or skills
- Include relevant keywords naturally (no keyword stuffing)
- End with your career goal or value proposition

AVOID:
- Generic phrases like "results-driven," "team player," "go-getter"
- Vague statements without specifics
- Passive voice or weak language

Return only the summary text."""

_EXPERIENCE_PROMPT = """Enhance these work experience entries following these specific guidelines:

WRITING APPROACH:
- Use strong action verbs to start each bullet point
- Focus on achievements and outcomes, not just responsibilities
- Include specific metrics, percentages, or numbers when possible
- Write in past tense for completed roles, present tense for current role

CONTENT STRUCTURE:
- Company and position titles remain unchanged
- Improve job descriptions to be more compelling and specific
- Transform achievements into quantified results

ACHIEVEMENT FORMULA:
- Action verb + specific task + measurable result
- Example: "Implemented automated testing framework, reducing bug reports by 40%"

Return a JSON array of experience entries with the same fields."""

_PROJECTS_PROMPT = """Enhance these project descriptions following these specific guidelines:

PROJECT DESCRIPTION STRATEGY:
- Start with the project's purpose and your role
- Highlight technical challenges solved and methods used
- Quantify the impact or results whenever possible

TECHNICAL DETAILS:
- Mention specific technologies, frameworks, and tools used
- Include scale indicators (users, data volume, performance metrics)

AVOID:
- Generic statements like "built a web application"
- Lists of technologies without context

Return a JSON array of project entries with the same fields."""

_SKILLS_PROMPT = """Enhance and organize this skills list following these guidelines:

ORGANIZATION STRATEGY:
- Group similar skills together logically
- Prioritize the most relevant and in-demand skills first
- Use current, industry-standard terminology
- Remove outdated or less relevant skills

Return the skills as a single comma-separated list."""

_SECTION_PROMPTS = {
    "summary": _SUMMARY_PROMPT,
    "experience": _EXPERIENCE_PROMPT,
    "projects": _PROJECTS_PROMPT,
    "skills": _SKILLS_PROMPT,
}


def _job_focus(job_description: str) -> str:
    if not job_description:
        return ""
    return f"\n\nJOB-SPECIFIC FOCUS: Tailor the content to match this job description: {job_description}"


def build_full_resume_prompt(
    *,
    target_role: str = "",
    job_description: str = "",
    improvement_suggestions: list[str] | None = None,
    missing_keywords: list[str] | None = None,
) -> str:
    role_context = f" for a {target_role} position" if target_role else ""
    lines = [
        f"Enhance this entire resume to improve its ATS compatibility{role_context}. "
        "Follow these specific guidelines:",
        "",
        "ENHANCEMENT STRATEGY:",
        "- Integrate improvements naturally throughout the resume",
        "- Add missing keywords only where they fit organically",
        "- Preserve all factual information and dates",
        "",
        "SPECIFIC IMPROVEMENTS TO IMPLEMENT:",
    ]
    if improvement_suggestions:
        lines.append("PRIORITY CHANGES:")
        lines.extend(f"{index}. {item}" for index, item in enumerate(improvement_suggestions, start=1))
        lines.append("")
    if missing_keywords:
        lines.append("KEYWORDS TO INTEGRATE NATURALLY:")
        lines.extend(f"{index}. {item}" for index, item in enumerate(missing_keywords, start=1))
        lines.append("")
    if job_description:
        lines.extend([f"TARGET JOB CONTEXT: {job_description}", ""])
    lines.extend(
        [
            "CRITICAL REQUIREMENTS:",
            "- Return the EXACT same JSON structure as provided",
            "- Keep all existing sections and fields intact",
            "- Do not add skills or experiences that weren't there originally",
        ]
    )
    return "\n".join(lines)


def build_enhance_messages(
    section_type: str,
    content: Any,
    *,
    job_description: str = "",
    target_role: str = "",
    improvement_suggestions: list[str] | None = None,
    missing_keywords: list[str] | None = None,
) -> list[ChatMessage]:
    if section_type == "all":
        system = FULL_RESUME_SYSTEM_PROMPT
        prompt = build_full_resume_prompt(
            target_role=target_role,
            job_description=job_description,
            improvement_suggestions=improvement_suggestions,
            missing_keywords=missing_keywords,
        )
    else:
        system = SECTION_SYSTEM_PROMPT
        prompt = _SECTION_PROMPTS[section_type] + _job_focus(job_description)

    if section_type == "summary":
        rendered = str(content)
    elif section_type == "skills":
        rendered = ", ".join(str(skill) for skill in content)
    else:
        rendered = json.dumps(content, ensure_ascii=False)

    user = f"{prompt}\n\nCurrent content to enhance:\n{rendered}\n\n{_AUTHENTICITY_NOTE}"
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)]
