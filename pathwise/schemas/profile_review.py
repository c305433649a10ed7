"""
Pydantic schemas for public profile (LinkedIn / GitHub) reviews.
"""
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field

from pathwise.schemas.analysis import LenientModel, StrList, Score


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


class ProfileSuggestion(LenientModel):
    category: str = "general"
    priority: Annotated[Literal["high", "medium", "low"], BeforeValidator(_lower)] = "medium"
    suggestion: str
    impact: str = ""


class ProfileBenchmark(LenientModel):
    metric: str
    user_score: Score = 0
    industry_average: Score = 70
    recommendation: str = ""


class ActionPlan(LenientModel):
    immediate: StrList = []
    short_term: StrList = []
    long_term: StrList = []


class ProfileAnalysisResult(LenientModel):
    overall_score: Score = 70
    strengths: StrList = []
    weaknesses: StrList = []
    suggestions: Annotated[List[ProfileSuggestion], BeforeValidator(ProfileSuggestion.lenient_list)] = []
    industry_benchmarks: Annotated[List[ProfileBenchmark], BeforeValidator(ProfileBenchmark.lenient_list)] = []
    action_plan: Annotated[ActionPlan, BeforeValidator(ActionPlan.lenient)] = Field(default_factory=ActionPlan)
    source: Literal["ai", "heuristic"] = "ai"


# ============================================
# Request schemas
# ============================================

class LinkedInExperience(BaseModel):
    title: str
    company: str
    duration: str = ""
    description: Optional[str] = None


class LinkedInEducation(BaseModel):
    school: str
    degree: str = ""
    field: str = ""
    year: Optional[str] = None


class LinkedInPost(BaseModel):
    content: str
    engagement: int = 0


class LinkedInData(BaseModel):
    """Profile details the user copies from LinkedIn (which has no public API)."""
    headline: Optional[str] = None
    summary: Optional[str] = None
    experience: List[LinkedInExperience] = Field(default_factory=list)
    education: List[LinkedInEducation] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    recommendations: Optional[int] = None
    connections: Optional[str] = None
    posts: List[LinkedInPost] = Field(default_factory=list)


class ProfileAnalysisRequest(BaseModel):
    profile_url: str = Field(..., min_length=1, max_length=500)
    profile_type: Literal["linkedin", "github"]
    additional_context: Optional[str] = Field(None, max_length=5000)
    linkedin_data: Optional[LinkedInData] = None


class ReviewNotesUpdate(BaseModel):
    notes: Optional[str] = Field(None, max_length=5000)
    completed_suggestions: Optional[List[str]] = None
