from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.ats.scoring import ScoreClassification
from app.ats.staleness import ReAnalysisAdvice
from app.schemas.resume import ResumeContent


class ATSAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_content: ResumeContent | None = Field(default=None, alias="resumeContent")
    job_description: str = Field(default="", alias="jobDescription", max_length=50000)
    resume_id: str | None = Field(default=None, alias="resumeId", max_length=100)
    force_re_analysis: bool = Field(default=False, alias="forceReAnalysis")
    template_id: str | None = Field(default=None, alias="templateId", max_length=50)
    is_public_upload: bool = Field(default=False, alias="isPublicUpload")
    is_auto_analysis: bool = Field(default=False, alias="isAutoAnalysis")


class ATSStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_content: ResumeContent = Field(alias="resumeContent")
    job_description: str = Field(default="", alias="jobDescription", max_length=50000)


class ATSStatusResponse(BaseModel):
    fingerprint: str
    content_changed: bool
    is_recent: bool
    advice: ReAnalysisAdvice
    score: int | None = None
    classification: ScoreClassification | None = None
    color_class: str | None = None
