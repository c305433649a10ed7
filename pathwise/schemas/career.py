"""
Pydantic schemas for career path endpoints.
"""
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field

from pathwise.schemas.analysis import LenientModel, StrList, Count

Difficulty = Literal["Beginner", "Intermediate", "Advanced"]
Pace = Literal["slow", "normal", "fast"]


def _title_case(value):
    return value.strip().capitalize() if isinstance(value, str) else value


class CareerResource(LenientModel):
    title: str
    type: str = "article"  # video | article | course | practice | project
    url: str = ""
    duration: str = ""
    description: str = ""
    source: str = ""
    difficulty: Optional[str] = None
    rating: Optional[str] = None


class WeeklyPlan(LenientModel):
    week: Count = 1
    title: str = ""
    description: str = ""
    focus: str = ""
    goals: StrList = []
    tasks: StrList = []
    skills: StrList = []
    resources: Annotated[List[CareerResource], BeforeValidator(CareerResource.lenient_list)] = []
    milestones: StrList = []
    projects: StrList = []
    hours: Optional[Count] = None


class CareerPathData(LenientModel):
    """A complete learning roadmap as produced by the model or the template."""
    title: str
    description: str = ""
    duration: str = ""
    difficulty: Annotated[Difficulty, BeforeValidator(_title_case)] = "Intermediate"
    total_weeks: Count = 0
    prerequisites: StrList = []
    outcomes: StrList = []
    skills_to_learn: StrList = []
    market_demand: str = ""
    average_salary: str = ""
    job_titles: StrList = []
    weekly_plan: Annotated[List[WeeklyPlan], BeforeValidator(WeeklyPlan.lenient_list)] = []


class LearningPriority(LenientModel):
    skill: str
    priority: Annotated[Literal["High", "Medium", "Low"], BeforeValidator(_title_case)] = "Medium"
    reason: str = ""
    time_to_learn: str = ""


class SkillGapAnalysis(LenientModel):
    missing_skills: StrList = []
    skills_to_improve: StrList = []
    strong_skills: StrList = []
    learning_priority: Annotated[List[LearningPriority], BeforeValidator(LearningPriority.lenient_list)] = []
    recommendations: str = ""
    source: Literal["ai", "heuristic"] = "ai"


# ============================================
# Request schemas
# ============================================

class GenerateCareerPathRequest(BaseModel):
    target_role: str = Field(..., min_length=1, max_length=200)
    timeframe: Optional[str] = Field(None, max_length=100)
    pace: Pace = "normal"
    custom_skills: Optional[List[str]] = None
    custom_interests: Optional[List[str]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "target_role": "Data Engineer",
                "timeframe": "12 weeks",
                "pace": "normal",
                "custom_skills": ["Python", "SQL"]
            }
        }


class CareerPathUpdate(BaseModel):
    """Partial update of the stored career path."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    duration: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    total_weeks: Optional[int] = Field(None, ge=1, le=104)
    prerequisites: Optional[List[str]] = None
    outcomes: Optional[List[str]] = None
    skills_to_learn: Optional[List[str]] = None
    market_demand: Optional[str] = None
    average_salary: Optional[str] = None
    job_titles: Optional[List[str]] = None
    weekly_plan: Optional[List[dict]] = None
    pace: Optional[Pace] = None
    is_active: Optional[bool] = None


class SaveCareerPathRequest(BaseModel):
    career_path: dict = Field(..., description="Career path to keep on the profile")


class SkillGapRequest(BaseModel):
    target_role: str = Field(..., min_length=1, max_length=200)
