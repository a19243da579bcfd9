from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ExperienceLevel = Literal["fresher", "intermediate", "senior"]


class _AliasedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ConversationMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str = Field(max_length=20000)


class InterviewQuestionRequest(_AliasedModel):
    job_role: str = Field(alias="jobRole", min_length=1, max_length=200)
    experience_level: ExperienceLevel = Field(alias="experienceLevel")
    years_of_experience: int | float | str | None = Field(default=None, alias="yearsOfExperience")
    conversation_history: list[ConversationMessage] = Field(
        default_factory=list,
        alias="conversationHistory",
        max_length=200,
    )


class InterviewQuestionResponse(BaseModel):
    question: str


class PreparedQuestion(_AliasedModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    question_text: str = Field(default="", alias="questionText")
    references: list[str] = Field(default_factory=list)
    year: str | int | None = None
    category: str | None = None


class AdvancedQuestionRequest(_AliasedModel):
    job_role: str = Field(alias="jobRole", min_length=1, max_length=200)
    company_name: str = Field(alias="companyName", min_length=1, max_length=200)
    questions: list[PreparedQuestion] = Field(default_factory=list, max_length=50)
    conversation_history: list[ConversationMessage] = Field(
        default_factory=list,
        alias="conversationHistory",
        max_length=200,
    )


class CompanyQuestionsRequest(_AliasedModel):
    job_role: str = Field(default="", alias="jobRole", max_length=200)
    company_name: str = Field(default="", alias="companyName", max_length=200)


class PreparationSuggestion(BaseModel):
    title: str = ""
    description: str = ""


class CompanyQuestionsResponse(BaseModel):
    questions: list[PreparedQuestion]
    suggestions: list[PreparationSuggestion]


class FeedbackRequest(_AliasedModel):
    job_role: str = Field(default="", alias="jobRole", max_length=200)
    company_name: str | None = Field(default=None, alias="companyName", max_length=200)
    experience_level: str = Field(default="mid-level", alias="experienceLevel", max_length=50)
    conversation: list[ConversationMessage] = Field(default_factory=list, max_length=400)


class InterviewFeedback(_AliasedModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    overall_score: int | float = Field(alias="overallScore")
    technical_accuracy: int | float = Field(alias="technicalAccuracy")
    communication_clarity: int | float = Field(alias="communicationClarity")
    confidence: int | float
    experience_level_match: int | float | None = Field(default=None, alias="experienceLevelMatch")
    strengths: list[str]
    improvements: list[str]
    experience_assessment: str | None = Field(default=None, alias="experienceAssessment")
    detailed_feedback: str = Field(alias="detailedFeedback")
    hiring_recommendation: str | list[str] | None = Field(default=None, alias="hiringRecommendation")


class FeedbackResponse(BaseModel):
    feedback: InterviewFeedback


class InterviewSession(_AliasedModel):
    job_role: str = Field(alias="jobRole", min_length=1, max_length=200)
    company_name: str = Field(alias="companyName", min_length=1, max_length=200)
    questions: list[PreparedQuestion] = Field(default_factory=list)
    suggestions: list[PreparationSuggestion] = Field(default_factory=list)
    messages: list[ConversationMessage] = Field(default_factory=list)
    start_time: datetime | None = Field(default=None, alias="startTime")
    status: str = Field(default="active", max_length=50)


class SaveSessionRequest(BaseModel):
    session: InterviewSession


class SaveSessionResponse(_AliasedModel):
    success: bool
    session_id: str = Field(alias="sessionId")
