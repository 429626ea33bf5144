"""
Time entry repository implementation using SQLAlchemy.

Each write commits its own transaction. Lost updates are detected with the
``version`` column; store-level violations surface as ConflictError.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import asc, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from time_reporting.domain.models.base import ConflictError, EntityNotFoundError
from time_reporting.domain.models.time_entry import TimeEntry
from time_reporting.domain.repositories.time_entry_repository import (
    TimeEntryPage,
    TimeEntryQuery,
    TimeEntryRepository as TimeEntryRepositoryInterface
)
from time_reporting.infrastructure.db.models import TimeEntryModel
from time_reporting.infrastructure.mappers.time_entry_mapper import TimeEntryMapper
from time_reporting.infrastructure.pagination import offset_paginator

logger = logging.getLogger(__name__)


class SQLAlchemyTimeEntryRepository(TimeEntryRepositoryInterface):
    """SQLAlchemy implementation of time entry repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = TimeEntryMapper()
        self.model = TimeEntryModel

    def find_by_id(self, entry_id: UUID) -> Optional[TimeEntry]:
        """Get time entry by ID."""
        model = self.session.get(TimeEntryModel, str(entry_id))
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def find_project_code(self, entry_id: UUID) -> Optional[str]:
        """Look up the project code of an entry without loading it."""
        return self.session.query(TimeEntryModel.project_code).filter(
            TimeEntryModel.id == str(entry_id)
        ).scalar()

    def find_page(self, query: TimeEntryQuery) -> TimeEntryPage:
        """List entries with filtering, sorting and offset pagination."""
        if query.project_codes is not None and not query.project_codes:
            return TimeEntryPage(items=[], total_items=0, page=query.page, page_size=query.page_size)

        db_query = self.session.query(TimeEntryModel)

        if query.project_codes is not None:
            db_query = db_query.filter(TimeEntryModel.project_code.in_(query.project_codes))
        if query.user_id is not None:
            db_query = db_query.filter(TimeEntryModel.user_id == query.user_id)
        if query.status is not None:
            db_query = db_query.filter(TimeEntryModel.status == query.status.value)
        if query.date_from is not None:
            db_query = db_query.filter(TimeEntryModel.completion_date >= query.date_from)
        if query.date_to is not None:
            db_query = db_query.filter(TimeEntryModel.start_date <= query.date_to)

        direction = desc if query.descending else asc
        db_query = db_query.order_by(
            direction(getattr(TimeEntryModel, query.sort_by)),
            direction(TimeEntryModel.id)
        )

        models, metadata = offset_paginator.paginate(db_query, query.page, query.page_size)
        return TimeEntryPage(
            items=[self.mapper.model_to_domain(model) for model in models],
            total_items=metadata.total_items,
            page=metadata.page,
            page_size=metadata.page_size
        )

    def save(self, time_entry: TimeEntry) -> TimeEntry:
        """Insert or update a time entry in its own transaction."""
        try:
            model = self.session.get(TimeEntryModel, str(time_entry.id))
            if model is None:
                model = self.mapper.domain_to_model(time_entry)
                self.session.add(model)
            else:
                self._check_version(model, time_entry)
                self.mapper.apply_to_model(time_entry, model)

            self.session.commit()
        except ConflictError:
            self.session.rollback()
            raise
        except (StaleDataError, IntegrityError) as exc:
            self.session.rollback()
            logger.warning("Write conflict saving time entry %s: %s", time_entry.id, exc)
            raise ConflictError(f"Time entry '{time_entry.id}' could not be saved: conflicting write") from exc
        except SQLAlchemyError:
            self.session.rollback()
            raise

        time_entry.version = model.version
        return time_entry

    def delete(self, time_entry: TimeEntry) -> None:
        """Delete a time entry in its own transaction."""
        try:
            model = self.session.get(TimeEntryModel, str(time_entry.id))
            if model is None:
                raise EntityNotFoundError("TimeEntry", time_entry.id)
            self._check_version(model, time_entry)

            self.session.delete(model)
            self.session.commit()
        except (ConflictError, EntityNotFoundError):
            self.session.rollback()
            raise
        except (StaleDataError, IntegrityError) as exc:
            self.session.rollback()
            logger.warning("Write conflict deleting time entry %s: %s", time_entry.id, exc)
            raise ConflictError(f"Time entry '{time_entry.id}' could not be deleted: conflicting write") from exc
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _check_version(self, model: TimeEntryModel, time_entry: TimeEntry) -> None:
        if model.version != time_entry.version:
            raise ConflictError(
                f"Time entry '{time_entry.id}' was modified concurrently "
                f"(expected version {time_entry.version}, found {model.version})"
            )
