"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from typing import Optional

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Boolean,
    Numeric, Date, ForeignKey,
    Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.engine import Engine
from sqlalchemy.sql import func

from time_reporting.domain.models.workflow import TimeEntryStatus
from time_reporting.infrastructure.db.database import Base, engine


STATUS_VALUES = ", ".join(f"'{status.value}'" for status in TimeEntryStatus)


class ProjectModel(Base):
    """Project table"""
    __tablename__ = 'projects'

    code = Column(String(10), primary_key=True)
    name = Column(String(200), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    tasks = relationship(
        "ProjectTaskModel",
        back_populates="project",
        lazy="selectin",
        order_by="ProjectTaskModel.id",
        cascade="all, delete-orphan"
    )
    tags = relationship(
        "ProjectTagModel",
        back_populates="project",
        lazy="selectin",
        order_by="ProjectTagModel.id",
        cascade="all, delete-orphan"
    )


class ProjectTaskModel(Base):
    """Tasks available for time logging within a project"""
    __tablename__ = 'project_tasks'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_code = Column(String(10), ForeignKey('projects.code'), nullable=False)
    task_name = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    project = relationship("ProjectModel", back_populates="tasks")

    __table_args__ = (
        UniqueConstraint('project_code', 'task_name', name='uq_project_tasks_project_task_name'),
    )


class ProjectTagModel(Base):
    """Tag dimensions configured for a project"""
    __tablename__ = 'project_tags'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_code = Column(String(10), ForeignKey('projects.code'), nullable=False)
    tag_name = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    project = relationship("ProjectModel", back_populates="tags")
    values = relationship(
        "TagValueModel",
        back_populates="project_tag",
        lazy="selectin",
        order_by="TagValueModel.id",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint('project_code', 'tag_name', name='uq_project_tags_project_tag_name'),
    )


class TagValueModel(Base):
    """Allowed values of a project tag"""
    __tablename__ = 'tag_values'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_tag_id = Column(Integer, ForeignKey('project_tags.id'), nullable=False)
    value = Column(String(100), nullable=False)

    project_tag = relationship("ProjectTagModel", back_populates="values")

    __table_args__ = (
        UniqueConstraint('project_tag_id', 'value', name='uq_tag_values_tag_value'),
    )


class TimeEntryModel(Base):
    """Time entry table"""
    __tablename__ = 'time_entries'

    id = Column(String(36), primary_key=True)
    project_code = Column(String(10), ForeignKey('projects.code'), nullable=False)
    project_task_id = Column(Integer, ForeignKey('project_tasks.id'), nullable=False)

    issue_id = Column(String(30))
    standard_hours = Column(Numeric(10, 2), nullable=False)
    overtime_hours = Column(Numeric(10, 2), nullable=False, default=0)
    description = Column(Text)
    start_date = Column(Date, nullable=False)
    completion_date = Column(Date, nullable=False)

    # Approval workflow
    status = Column(String(20), nullable=False, default=TimeEntryStatus.NOT_REPORTED.value)
    decline_comment = Column(Text)

    # Owner
    user_id = Column(String(255))
    user_email = Column(String(255))
    user_name = Column(String(255))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Optimistic concurrency
    version = Column(Integer, nullable=False)

    # Relationships
    project = relationship("ProjectModel", lazy="joined")
    task = relationship("ProjectTaskModel", lazy="joined")
    tags = relationship(
        "TimeEntryTagModel",
        back_populates="time_entry",
        lazy="selectin",
        cascade="all, delete-orphan"
    )

    __mapper_args__ = {"version_id_col": version}

    # Constraints and indexes
    __table_args__ = (
        Index('idx_time_entries_project', 'project_code'),
        Index('idx_time_entries_user', 'user_id'),
        Index('idx_time_entries_status', 'status'),
        CheckConstraint('standard_hours >= 0', name='time_entry_standard_hours_non_negative'),
        CheckConstraint('overtime_hours >= 0', name='time_entry_overtime_hours_non_negative'),
        CheckConstraint('start_date <= completion_date', name='time_entry_valid_range'),
        CheckConstraint(f'status IN ({STATUS_VALUES})', name='time_entry_valid_status'),
    )


class TimeEntryTagModel(Base):
    """Tag values attached to a time entry"""
    __tablename__ = 'time_entry_tags'

    id = Column(Integer, primary_key=True, autoincrement=True)
    time_entry_id = Column(String(36), ForeignKey('time_entries.id', ondelete='CASCADE'), nullable=False)
    tag_value_id = Column(Integer, ForeignKey('tag_values.id'), nullable=False)

    time_entry = relationship("TimeEntryModel", back_populates="tags")
    tag_value = relationship("TagValueModel", lazy="joined")

    __table_args__ = (
        UniqueConstraint('time_entry_id', 'tag_value_id', name='uq_time_entry_tags_entry_value'),
    )


def create_all_tables(bind: Optional[Engine] = None) -> None:
    """Create all tables in the database."""
    Base.metadata.create_all(bind=bind or engine)


def drop_all_tables(bind: Optional[Engine] = None) -> None:
    """Drop all tables in the database."""
    Base.metadata.drop_all(bind=bind or engine)
