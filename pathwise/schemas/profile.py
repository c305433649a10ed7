"""
Pydantic schemas for profile endpoints.
"""
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class Education(BaseModel):
    degree: Optional[str] = None
    institution: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)
    field_of_study: Optional[str] = None


class CareerGoals(BaseModel):
    target_role: Optional[str] = None
    industry: Optional[str] = None
    timeframe: Optional[str] = None
    description: Optional[str] = None


class Experience(BaseModel):
    level: Literal["entry", "junior", "mid", "senior", "expert"] = "entry"
    years: Optional[float] = Field(None, ge=0, le=80)
    current_role: Optional[str] = None
    current_company: Optional[str] = None


class LearningProgress(BaseModel):
    current_week: int = Field(1, ge=1)
    completed_resources: List[str] = Field(default_factory=list)
    completed_milestones: List[str] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    last_activity_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Profile fields the owner may change. `name` is written to the user record."""
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    bio: Optional[str] = Field(None, max_length=2000)
    phone: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=200)
    education: Optional[Education] = None
    career_goals: Optional[CareerGoals] = None
    skills: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    experience: Optional[Experience] = None

    class Config:
        json_schema_extra = {
            "example": {
                "bio": "Backend developer moving into data engineering",
                "career_goals": {"target_role": "Data Engineer", "timeframe": "6 months"},
                "skills": ["Python", "SQL"],
                "experience": {"level": "mid", "years": 4}
            }
        }


class LearningProgressUpdate(BaseModel):
    learning_progress: LearningProgress


class ProfileResponse(BaseModel):
    id: int
    user_id: int
    bio: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    avatar: Optional[str] = None
    education: Optional[dict] = None
    career_goals: Optional[dict] = None
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    experience: Optional[dict] = None
    is_complete: bool = False
    saved_career_path: Optional[dict] = None
    career_path_generated_at: Optional[datetime] = None
    learning_progress: Optional[dict] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
