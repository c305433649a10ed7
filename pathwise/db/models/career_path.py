"""
Career path model - the active AI-generated learning roadmap for a user.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from pathwise.db.base import Base


class CareerPath(Base):
    __tablename__ = "career_paths"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    duration = Column(String, nullable=True)
    difficulty = Column(String, nullable=False, default="Beginner")  # "Beginner" | "Intermediate" | "Advanced"
    total_weeks = Column(Integer, nullable=False)
    prerequisites = Column(JSON, nullable=False, default=list)
    outcomes = Column(JSON, nullable=False, default=list)
    skills_to_learn = Column(JSON, nullable=False, default=list)
    market_demand = Column(String, nullable=True)
    average_salary = Column(String, nullable=True)
    job_titles = Column(JSON, nullable=False, default=list)
    weekly_plan = Column(JSON, nullable=False, default=list)  # list of WeeklyPlan

    # Generation inputs
    target_role = Column(String, nullable=True)
    timeframe = Column(String, nullable=True)
    pace = Column(String, nullable=False, default="normal")  # "slow" | "normal" | "fast"
    custom_skills = Column(JSON, nullable=False, default=list)
    custom_interests = Column(JSON, nullable=False, default=list)

    is_active = Column(Boolean, nullable=False, default=True)
    generated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="career_path")

    def __repr__(self):
        return f"<CareerPath(id={self.id}, user_id={self.user_id}, title='{self.title}')>"
