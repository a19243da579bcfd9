from __future__ import annotations

from typing import Any

from app.ai.types import ChatMessage
from app.schemas.resume import ResumeContent

ATS_OPTIMIZED_TEMPLATES = frozenset({"professional", "standard", "minimal", "executive", "technical", "modern"})

SYSTEM_PROMPT = (
    "You are an expert in ATS (Applicant Tracking System) analysis with deep knowledge of how modern "
    "ATS systems parse, rank, and filter resumes. Your expertise includes understanding keyword "
    "optimization, formatting best practices, industry standards, and how to maximize a resume's "
    "visibility and ranking in automated screening processes. Provide detailed, actionable feedback "
    "focused on practical improvements."
)

_CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    (
        "hard_skills",
        "HARD SKILLS MATCH",
        "0-40",
        "Evaluate technical skills, programming languages, tools, and software mentioned. "
        "Compare against job requirements if provided.",
    ),
    (
        "job_title",
        "JOB TITLE MATCH",
        "0-15",
        "Assess how well the candidate's current/target title aligns with the job posting and career progression.",
    ),
    (
        "soft_skills",
        "SOFT SKILLS MATCH",
        "0-15",
        "Evaluate interpersonal skills, leadership abilities, communication skills, teamwork, "
        "problem-solving mentioned in the resume.",
    ),
    (
        "achievements",
        "QUANTIFIED ACHIEVEMENTS",
        "0-10",
        "Check for measurable results, metrics, percentages, dollar amounts, timeframes, and specific accomplishments.",
    ),
    (
        "education",
        "EDUCATION & CERTIFICATIONS",
        "0-10",
        "Assess educational background, relevant degrees, certifications, training, and professional development.",
    ),
    (
        "formatting",
        "ATS FORMATTING",
        "0-5",
        "Evaluate technical formatting compatibility - section headings, bullet points, font consistency, "
        "no graphics/tables.",
    ),
    (
        "relevance",
        "OVERALL RELEVANCE",
        "0-5",
        "General alignment with job requirements, industry standards, and career level appropriateness.",
    ),
)


def is_ats_optimized_template(template_id: str | None) -> bool:
    return bool(template_id) and template_id in ATS_OPTIMIZED_TEMPLATES


def resume_to_text(content: ResumeContent) -> str:
    """Plain-text rendering of a resume, section by section, for the analysis prompt."""
    sections: list[str] = []

    contact = content.contact_info
    sections.append("CONTACT INFORMATION:")
    sections.append(f"Name: {contact.name or ''}")
    sections.append(f"Email: {contact.email or ''}")
    for label, value in (
        ("Phone", contact.phone),
        ("Location", contact.location),
        ("LinkedIn", contact.linkedin),
        ("Website", contact.website),
        ("GitHub", contact.github),
    ):
        if value:
            sections.append(f"{label}: {value}")

    if content.summary:
        sections.append("\nSUMMARY:")
        sections.append(content.summary)

    if content.experience:
        sections.append("\nEXPERIENCE:")
        for index, exp in enumerate(content.experience, start=1):
            sections.append(
                f"{index}. {exp.position} at {exp.company} ({exp.start_date} - {exp.end_date or 'Present'})"
            )
            if exp.location:
                sections.append(f"   Location: {exp.location}")
            if exp.description:
                sections.append(f"   {exp.description}")
            achievements = [a for a in exp.achievements if a.strip()]
            if achievements:
                sections.append("   Achievements:")
                sections.extend(f"   - {a}" for a in achievements)

    if content.education:
        sections.append("\nEDUCATION:")
        for index, edu in enumerate(content.education, start=1):
            field = f" in {edu.field}" if edu.field else ""
            sections.append(
                f"{index}. {edu.degree}{field} from {edu.institution} "
                f"({edu.start_date} - {edu.end_date or 'Present'})"
            )
            if edu.location:
                sections.append(f"   Location: {edu.location}")

    if content.skills:
        sections.append("\nSKILLS:")
        sections.append(", ".join(s for s in content.skills if s.strip()))

    if content.certifications:
        sections.append("\nCERTIFICATIONS:")
        for index, cert in enumerate(content.certifications, start=1):
            issuer = f" from {cert.issuer}" if cert.issuer else ""
            date = f" ({cert.date})" if cert.date else ""
            sections.append(f"{index}. {cert.name}{issuer}{date}")

    if content.projects:
        sections.append("\nPROJECTS:")
        for index, project in enumerate(content.projects, start=1):
            sections.append(f"{index}. {project.name}")
            if project.description:
                sections.append(f"   {project.description}")
            if project.technologies:
                sections.append(f"   Technologies: {', '.join(project.technologies)}")

    return "\n".join(sections)


def build_analysis_prompt(template_id: str | None, job_description: str) -> str:
    prompt = (
        "Analyze this resume for ATS compatibility across major Applicant Tracking Systems like Workday, "
        "Taleo, Lever, and Greenhouse. Provide a score from 0-100, where 100 is perfect ATS compatibility."
    )

    if is_ats_optimized_template(template_id):
        prompt += (
            f"\n\nIMPORTANT: This resume is being rendered using an ATS-optimized template ({template_id}) "
            "that provides:\n"
            "- Clean, professional formatting with proper section hierarchy\n"
            "- Standard ATS-friendly fonts and spacing\n"
            "- Consistent formatting that ATS systems can easily parse\n"
            "- Proper section headings and organization\n"
            "- No complex graphics or tables that confuse ATS systems\n"
            "- Optimal whitespace and layout for scanning\n\n"
            "Please account for these template formatting benefits in your analysis. "
            "The template automatically addresses many common formatting issues."
        )

    lines = [
        "",
        "",
        "**CRITICAL**: You MUST provide detailed assessment for ALL 7 categories below. Do not skip any category:",
        "",
    ]
    for index, (key, title, points, description) in enumerate(_CATEGORIES, start=1):
        lines.append(f"{index}. {title} ({points} points): {description}")
        lines.append(f"   - REQUIRED: Provide {key}_score, {key}_feedback, and {key}_tips")
        lines.append("")
    lines.extend(
        [
            "**MANDATORY REQUIREMENTS**:",
            "- You MUST provide a score, feedback, and 2-3 improvement tips for EVERY single category above",
            "- If a section seems perfect, still provide constructive feedback and tips for further enhancement",
            "- If information is missing for a category, provide feedback about what's missing and tips to add it",
            "- Do not leave any feedback or tips arrays empty",
            "",
            "Additionally, provide general formatting issues and overall improvement suggestions.",
        ]
    )
    prompt += "\n".join(lines)

    if job_description:
        prompt += (
            "\n\nAlso analyze how well this resume matches the provided job description:\n"
            "1. Identify exact keyword matches and semantic/similar concept matches\n"
            "2. Highlight critical skills, qualifications, or requirements missing from the resume\n"
            "3. Suggest specific content additions or modifications to better align with the job\n"
            "4. Evaluate whether the resume's emphasis matches the job's priorities\n"
            "5. Recommend which experiences should be expanded or condensed based on relevance\n"
            "6. Identify any industry-specific terms from the job description that should be incorporated"
        )
    return prompt


def build_analysis_messages(
    content: ResumeContent,
    job_description: str,
    template_id: str | None,
) -> list[ChatMessage]:
    user = f"{build_analysis_prompt(template_id, job_description)}\n\nResume:\n{resume_to_text(content)}"
    if job_description:
        user += f"\n\nJob Description:\n{job_description}"
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=user),
    ]


def _string_list(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _assessment_properties() -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for key, title, points, _ in _CATEGORIES:
        label = title.lower()
        properties[f"{key}_score"] = {"type": "integer", "description": f"Score for {label} ({points})"}
        properties[f"{key}_feedback"] = {
            "type": "string",
            "description": f"REQUIRED: Specific feedback about {label}",
        }
        properties[f"{key}_tips"] = _string_list(f"REQUIRED: 2-3 improvement tips for {label}")
    return properties


ATS_ANALYSIS_FUNCTION: dict[str, Any] = {
    "name": "provide_ats_analysis",
    "description": "Provide analysis of resume's ATS compatibility",
    "parameters": {
        "type": "object",
        "properties": {
            "score": {"type": "integer", "description": "ATS compatibility score from 0-100"},
            "feedback": {"type": "string", "description": "Detailed feedback on the resume's ATS compatibility"},
            "keyword_matches": _string_list("Keywords from the job description found in the resume"),
            "missing_keywords": _string_list("Important keywords from the job description missing in the resume"),
            "formatting_issues": _string_list("Any formatting issues that might affect ATS scanning"),
            "improvement_suggestions": _string_list(
                "Specific, actionable suggestions for improving ATS compatibility"
            ),
            "detailed_assessment": {
                "type": "object",
                "description": (
                    "REQUIRED: Detailed breakdown of assessment categories with specific feedback for ALL categories"
                ),
                "properties": _assessment_properties(),
                "required": [
                    f"{key}_{suffix}" for key, *_ in _CATEGORIES for suffix in ("score", "feedback", "tips")
                ],
            },
            "keyword_match_percentage": {
                "type": "integer",
                "description": "Percentage of important keywords matched (0-100)",
            },
        },
        "required": ["score", "feedback"],
    },
}
