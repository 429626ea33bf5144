"""
Time entry mapper for converting between domain entities and database models.

Task and tag references of a mapped entry are resolved against the mapped
project, so an entry never holds a copy of a task or tag that disagrees
with its own project.
"""

from typing import List
from uuid import UUID

from time_reporting.domain.models.project import Project, ProjectTask
from time_reporting.domain.models.time_entry import TimeEntry, TimeEntryTag
from time_reporting.domain.models.workflow import TimeEntryStatus
from time_reporting.infrastructure.db.models import TimeEntryModel, TimeEntryTagModel
from time_reporting.infrastructure.mappers.project_mapper import ProjectMapper


class TimeEntryMapper:
    """Maps between TimeEntry domain entity and TimeEntryModel database model."""

    def __init__(self, project_mapper: ProjectMapper = None):
        self.project_mapper = project_mapper or ProjectMapper()

    def domain_to_model(self, time_entry: TimeEntry) -> TimeEntryModel:
        """Convert a new TimeEntry domain entity to TimeEntryModel."""
        model = TimeEntryModel(id=str(time_entry.id), created_at=time_entry.created_at)
        self.apply_to_model(time_entry, model)
        return model

    def apply_to_model(self, time_entry: TimeEntry, model: TimeEntryModel) -> None:
        """Copy the entity state onto an existing model."""
        model.project_code = time_entry.project_code
        model.project_task_id = time_entry.task.id
        model.issue_id = time_entry.issue_id
        model.standard_hours = time_entry.standard_hours
        model.overtime_hours = time_entry.overtime_hours
        model.description = time_entry.description
        model.start_date = time_entry.start_date
        model.completion_date = time_entry.completion_date
        model.status = time_entry.status.value
        model.decline_comment = time_entry.decline_comment
        model.user_id = time_entry.user_id
        model.user_email = time_entry.user_email
        model.user_name = time_entry.user_name
        model.updated_at = time_entry.updated_at

        # Keep rows for unchanged values; the unique constraint would reject a
        # delete and re-insert of the same value within one flush
        wanted = [tag.tag_value.id for tag in time_entry.tags]
        kept = [row for row in model.tags if row.tag_value_id in wanted]
        kept_ids = {row.tag_value_id for row in kept}
        model.tags = kept + [
            TimeEntryTagModel(tag_value_id=value_id)
            for value_id in dict.fromkeys(wanted)
            if value_id not in kept_ids
        ]

    def model_to_domain(self, model: TimeEntryModel) -> TimeEntry:
        """Convert TimeEntryModel to TimeEntry domain entity."""
        project = self.project_mapper.model_to_domain(model.project)

        time_entry = TimeEntry(
            id=UUID(model.id),
            project=project,
            task=self._resolve_task(project, model),
            standard_hours=model.standard_hours,
            overtime_hours=model.overtime_hours if model.overtime_hours is not None else 0,
            description=model.description,
            issue_id=model.issue_id,
            start_date=model.start_date,
            completion_date=model.completion_date,
            status=TimeEntryStatus(model.status) if model.status else TimeEntryStatus.NOT_REPORTED,
            decline_comment=model.decline_comment,
            tags=self._resolve_tags(project, model),
            user_id=model.user_id,
            user_email=model.user_email,
            user_name=model.user_name,
            version=model.version or 1
        )

        # Set entity metadata
        if model.created_at:
            time_entry.created_at = model.created_at
        if model.updated_at:
            time_entry.updated_at = model.updated_at

        return time_entry

    def _resolve_task(self, project: Project, model: TimeEntryModel) -> ProjectTask:
        for task in project.tasks:
            if task.id == model.project_task_id:
                return task
        # Row points outside its project; persisting it again fails validation
        return self.project_mapper.task_to_domain(model.task)

    def _resolve_tags(self, project: Project, model: TimeEntryModel) -> List[TimeEntryTag]:
        tags = []
        for row in model.tags:
            project_tag = next(
                (tag for tag in project.tags if tag.id == row.tag_value.project_tag_id),
                None
            )
            if project_tag is None:
                project_tag = self.project_mapper.tag_to_domain(row.tag_value.project_tag)

            tag_value = next(
                (value for value in project_tag.values if value.id == row.tag_value_id),
                None
            )
            tags.append(TimeEntryTag(tag=project_tag, tag_value=tag_value))
        return tags
