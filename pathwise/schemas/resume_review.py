"""
Pydantic schemas for resume reviewer endpoints and analysis results.
"""
from datetime import datetime
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field

from pathwise.schemas.analysis import LenientModel, StrList, Score, Count, Years

ExperienceLevel = Literal["entry", "junior", "mid", "senior", "executive"]


# ============================================
# Analysis result records
# ============================================

class ContentAnalysis(LenientModel):
    total_words: Count = 0
    readability_score: Score = 70
    grammar_issues: StrList = []
    spelling_errors: StrList = []
    tone_analysis: str = "Professional"
    clarity_score: Score = 70


class SectionAnalysis(LenientModel):
    section: str = "overall"
    score: Score = 70
    strengths: StrList = []
    weaknesses: StrList = []
    suggestions: StrList = []
    word_count: Count = 0


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


class SkillAnalysis(LenientModel):
    skill: str
    relevance: Annotated[Literal["high", "medium", "low"], BeforeValidator(_lower)] = "medium"
    frequency: Count = 1
    context: str = ""


class SkillsAnalysis(LenientModel):
    identified_skills: Annotated[List[SkillAnalysis], BeforeValidator(SkillAnalysis.lenient_list)] = []
    skills_gap: StrList = []
    recommended_skills: StrList = []
    technical_skills: StrList = []
    soft_skills: StrList = []


class ExperienceAnalysis(LenientModel):
    total_years: Years = 0
    career_progression: str = "Unknown"
    achievement_count: Count = 0
    quantified_achievements: Count = 0
    action_verbs_used: StrList = []
    improvement_suggestions: StrList = []


class AtsAnalysis(LenientModel):
    overall_score: Score = 70
    keyword_match: Score = 70
    formatting: Score = 70
    readability: Score = 70
    recommendations: StrList = []
    missing_keywords: StrList = []
    found_keywords: StrList = []


class IndustryAnalysis(LenientModel):
    target_industry: str = "General"
    industry_relevance: Score = 70
    industry_keywords: StrList = []
    competitor_analysis: str = "Standard"
    market_trends: StrList = []


class FormattingAnalysis(LenientModel):
    structure: str = "Standard"
    consistency: Score = 70
    visual_appeal: Score = 70
    length: str = "Appropriate"
    font_analysis: str = "Standard"
    spacing_analysis: str = "Standard"


class Recommendations(LenientModel):
    immediate: StrList = []
    short_term: StrList = []
    long_term: StrList = []
    priority_actions: StrList = []


class IndustryBenchmark(LenientModel):
    metric: str = "Overall Score"
    user_score: Score = 0
    industry_average: Score = 70
    top_percentile: Score = 90
    recommendation: str = ""


class ImprovementPlan(LenientModel):
    weekly_goals: StrList = []
    monthly_goals: StrList = []
    skill_development: StrList = []
    networking_advice: StrList = []


class ResumeAnalysisResult(LenientModel):
    """Complete resume analysis; every field is present even if the model omitted it."""
    overall_score: Score = 70
    content_analysis: Annotated[ContentAnalysis, BeforeValidator(ContentAnalysis.lenient)] = Field(default_factory=ContentAnalysis)
    section_analysis: Annotated[List[SectionAnalysis], BeforeValidator(SectionAnalysis.lenient_list)] = []
    skills_analysis: Annotated[SkillsAnalysis, BeforeValidator(SkillsAnalysis.lenient)] = Field(default_factory=SkillsAnalysis)
    experience_analysis: Annotated[ExperienceAnalysis, BeforeValidator(ExperienceAnalysis.lenient)] = Field(default_factory=ExperienceAnalysis)
    ats_analysis: Annotated[AtsAnalysis, BeforeValidator(AtsAnalysis.lenient)] = Field(default_factory=AtsAnalysis)
    industry_analysis: Annotated[IndustryAnalysis, BeforeValidator(IndustryAnalysis.lenient)] = Field(default_factory=IndustryAnalysis)
    formatting_analysis: Annotated[FormattingAnalysis, BeforeValidator(FormattingAnalysis.lenient)] = Field(default_factory=FormattingAnalysis)
    recommendations: Annotated[Recommendations, BeforeValidator(Recommendations.lenient)] = Field(default_factory=Recommendations)
    industry_benchmarks: Annotated[List[IndustryBenchmark], BeforeValidator(IndustryBenchmark.lenient_list)] = []
    improvement_plan: Annotated[ImprovementPlan, BeforeValidator(ImprovementPlan.lenient)] = Field(default_factory=ImprovementPlan)
    source: Literal["ai", "heuristic"] = "ai"


# ============================================
# Parsed resume
# ============================================

SECTION_NAMES = ("contact", "summary", "experience", "education", "skills", "projects", "certifications", "other")


class ResumeMetadata(BaseModel):
    word_count: int = 0
    page_count: Optional[int] = None
    has_formatting: bool = False


class ParsedResume(BaseModel):
    text: str
    sections: Dict[str, str] = Field(default_factory=dict)
    metadata: ResumeMetadata = Field(default_factory=ResumeMetadata)


# ============================================
# Request / response schemas
# ============================================

class ReanalyzeRequest(BaseModel):
    """Optional new context for re-analysis; omitted fields keep their stored value."""
    target_role: Optional[str] = Field(None, max_length=200)
    target_industry: Optional[str] = Field(None, max_length=200)
    experience_level: Optional[ExperienceLevel] = None
    additional_context: Optional[str] = Field(None, max_length=5000)


class ResumeReviewUpdate(BaseModel):
    user_notes: Optional[str] = Field(None, max_length=5000)
    implemented_suggestions: Optional[List[str]] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    feedback: Optional[str] = Field(None, max_length=5000)


class ResumeReviewSummary(BaseModel):
    """List view of a review; omits the (large) extracted text."""
    id: int
    file_name: str
    file_type: str
    file_size: int
    target_role: Optional[str] = None
    target_industry: Optional[str] = None
    experience_level: str
    analysis_status: str
    analysis_result: Optional[dict] = None
    processing_time: Optional[int] = None
    rating: Optional[int] = None
    analyzed_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True


class ResumeReviewDetail(ResumeReviewSummary):
    extracted_text: str = ""
    extracted_sections: Dict[str, str] = Field(default_factory=dict)
    additional_context: Optional[str] = None
    user_notes: Optional[str] = None
    implemented_suggestions: List[str] = Field(default_factory=list)
    feedback: Optional[str] = None
