from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ResumeSection = Literal[
    "contactInfo",
    "summary",
    "experience",
    "education",
    "skills",
    "certifications",
    "projects",
    "customSections",
]
ResumeStatus = Literal["draft", "final"]


class _CamelModel(BaseModel):
    # Stored resume JSON is camelCase and may carry keys this service does not model.
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ContactInfo(_CamelModel):
    name: str = ""
    email: str = ""
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    website: str | None = None
    github: str | None = None


class ExperienceEntry(_CamelModel):
    company: str = ""
    position: str = ""
    start_date: str = Field(default="", alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    current: bool | None = None
    location: str | None = None
    description: str = ""
    achievements: list[str] = Field(default_factory=list)


class EducationEntry(_CamelModel):
    institution: str = ""
    degree: str = ""
    field: str | None = None
    start_date: str = Field(default="", alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    current: bool | None = None
    location: str | None = None
    gpa: str | None = None
    achievements: list[str] | None = None


class CertificationEntry(_CamelModel):
    name: str = ""
    issuer: str | None = None
    date: str | None = None
    expiration: str | None = None
    id: str | None = None
    url: str | None = None


class ProjectEntry(_CamelModel):
    name: str = ""
    description: str = ""
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    url: str | None = None
    technologies: list[str] | None = None
    achievements: list[str] | None = None


class CustomSectionItem(_CamelModel):
    title: str | None = None
    subtitle: str | None = None
    date: str | None = None
    description: str | None = None
    bullets: list[str] | None = None


class CustomSection(_CamelModel):
    title: str = ""
    items: list[CustomSectionItem] = Field(default_factory=list)


class ResumeDesign(_CamelModel):
    accent_color: str | None = Field(default=None, alias="accentColor")
    font_family: str | None = Field(default=None, alias="fontFamily")
    font_size: Literal["small", "medium", "large"] | None = Field(default=None, alias="fontSize")
    spacing: Literal["compact", "normal", "spacious"] | None = None
    margins: Literal["narrow", "normal", "wide"] | None = None


class DetailedAssessment(BaseModel):
    model_config = ConfigDict(extra="allow")

    hard_skills_score: int | None = None
    hard_skills_feedback: str | None = None
    hard_skills_tips: list[str] | None = None
    job_title_score: int | None = None
    job_title_feedback: str | None = None
    job_title_tips: list[str] | None = None
    soft_skills_score: int | None = None
    soft_skills_feedback: str | None = None
    soft_skills_tips: list[str] | None = None
    achievements_score: int | None = None
    achievements_feedback: str | None = None
    achievements_tips: list[str] | None = None
    education_score: int | None = None
    education_feedback: str | None = None
    education_tips: list[str] | None = None
    formatting_score: int | None = None
    formatting_feedback: str | None = None
    formatting_tips: list[str] | None = None
    relevance_score: int | None = None
    relevance_feedback: str | None = None
    relevance_tips: list[str] | None = None


class ATSAnalysis(BaseModel):
    model_config = ConfigDict(extra="allow")

    score: int = Field(ge=0, le=100)
    feedback: str = ""
    keyword_matches: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    formatting_issues: list[str] = Field(default_factory=list)
    improvement_suggestions: list[str] = Field(default_factory=list)
    detailed_assessment: DetailedAssessment = Field(default_factory=DetailedAssessment)
    keyword_match_percentage: int | None = Field(default=None, ge=0, le=100)
    content_hash: str | None = None
    analyzed_at: datetime | None = None
    from_cache: bool = False


class ResumeContent(_CamelModel):
    contact_info: ContactInfo = Field(default_factory=ContactInfo, alias="contactInfo")
    summary: str | None = None
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    certifications: list[CertificationEntry] | None = None
    projects: list[ProjectEntry] | None = None
    custom_sections: list[CustomSection] | None = Field(default=None, alias="customSections")
    ats_analysis: ATSAnalysis | None = None
    design: ResumeDesign | None = None
    section_order: list[ResumeSection] | None = Field(default=None, alias="sectionOrder")


class ResumeRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    title: str
    content: ResumeContent
    original_text: str | None = None
    enhanced_text: str | None = None
    ats_score: int | None = None
    job_description: str | None = None
    target_role: str | None = None
    template_id: str | None = None
    status: ResumeStatus = "draft"
    created_at: datetime | None = None
    updated_at: datetime | None = None


def dump_resume_content(content: ResumeContent, **kwargs: Any) -> dict[str, Any]:
    """Serialize content in its stored (camelCase) JSON shape, keeping only keys the caller set."""
    return content.model_dump(mode="json", by_alias=True, exclude_unset=True, **kwargs)


class CreateResumeRequest(_CamelModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(default="", max_length=300)
    content: ResumeContent | None = None
    original_text: str | None = Field(default=None, alias="originalText", max_length=200000)
    job_description: str | None = Field(default=None, alias="jobDescription", max_length=50000)
    selected_template: str | None = Field(default=None, alias="selectedTemplate", max_length=50)
    ats_score: int | None = Field(default=None, alias="atsScore", ge=0, le=100)


class TemporaryResume(BaseModel):
    id: str
    temporary: bool = True


ENHANCE_SECTIONS: tuple[str, ...] = ("summary", "experience", "projects", "skills", "all")


class ParseResumeTextRequest(_CamelModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_text: str = Field(default="", alias="resumeText", max_length=200000)
    job_description: str = Field(default="", alias="jobDescription", max_length=50000)


class ParsedResumeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    parsed_resume: ResumeContent = Field(alias="parsedResume")
    original_text: str = Field(alias="originalText")


class EnhanceResumeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_content: Any = Field(default=None, alias="resumeContent")
    section_type: str = Field(default="", alias="sectionType", max_length=50)
    job_description: str | None = Field(default=None, alias="jobDescription", max_length=50000)
    target_role: str | None = Field(default=None, alias="targetRole", max_length=200)
    improvement_suggestions: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)


class EnhanceResumeResponse(BaseModel):
    enhanced: Any
