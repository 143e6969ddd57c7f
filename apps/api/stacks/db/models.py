import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Text,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


def uuid4_str():
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    # Vapi call id of the onboarding voice session; the end-of-call webhook is correlated by it
    onboarding_call_id = Column(String(255), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="user", uselist=False)
    linked_accounts = relationship("LinkedAccount", back_populates="user")


class LinkedAccount(Base):
    """OAuth account connected at sign-in (github, linkedin, google)."""
    __tablename__ = "linked_accounts"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    provider = Column(String(50), nullable=False)
    access_token = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="linked_accounts")

    __table_args__ = (Index("ix_linked_accounts_user_provider", "user_id", "provider", unique=True),)


class Profile(Base):
    """Canonical profile: scalar attributes filled by users or by reconciliation (one row per user)."""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    username = Column(String(20), unique=True, nullable=True)

    display_name = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    personal_mission = Column(Text, nullable=True)
    life_philosophy = Column(Text, nullable=True)
    summary = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="profile")
    experiences = relationship("Experience", back_populates="profile", cascade="all, delete-orphan")
    educations = relationship("Education", back_populates="profile", cascade="all, delete-orphan")
    projects = relationship("Project", back_populates="profile", cascade="all, delete-orphan")
    social_links = relationship("SocialLink", back_populates="profile", cascade="all, delete-orphan")


class Experience(Base):
    __tablename__ = "experiences"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    title = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    location = Column(Text, nullable=True)
    employment_type = Column(String(50), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    currently_working = Column(Boolean, default=False, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="experiences")

    __table_args__ = (Index("ix_experiences_profile_id", "profile_id"),)


class Education(Base):
    __tablename__ = "educations"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    school = Column(Text, nullable=False)
    degree = Column(Text, nullable=True)
    field_of_study = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    grade = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="educations")

    __table_args__ = (Index("ix_educations_profile_id", "profile_id"),)


class Project(Base):
    __tablename__ = "projects"

    COMPLETED = "completed"
    WIP = "wip"
    ARCHIVED = "archived"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=False)
    url = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=WIP)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="projects")

    __table_args__ = (Index("ix_projects_profile_id", "profile_id"),)


class SocialLink(Base):
    __tablename__ = "social_links"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    platform = Column(String(50), nullable=False)
    url = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="social_links")

    __table_args__ = (Index("ix_social_links_profile_id", "profile_id"),)
