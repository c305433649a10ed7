from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from pathwise.db.base import Base

PROVIDER_EMAIL = "email"
PROVIDER_GOOGLE = "google"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)  # None for OAuth-only accounts
    name = Column(String, nullable=False)
    avatar = Column(String, nullable=True)
    provider = Column(String, nullable=False, default=PROVIDER_EMAIL)  # "email" | "google"
    google_id = Column(String, unique=True, index=True, nullable=True)

    # Verification / reset flows
    is_email_verified = Column(Boolean, nullable=False, default=False)
    email_verification_token = Column(String, index=True, nullable=True)
    email_verification_expires = Column(DateTime, nullable=True)
    password_reset_token = Column(String, index=True, nullable=True)
    password_reset_expires = Column(DateTime, nullable=True)

    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Deleting a user removes everything it owns
    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    career_path = relationship("CareerPath", back_populates="user", uselist=False, cascade="all, delete-orphan")
    resume_reviews = relationship("ResumeReview", back_populates="user", cascade="all, delete-orphan")
    profile_reviews = relationship("ProfileReview", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', provider='{self.provider}')>"
