# File: translatable/repositories/base_repository.py

import logging
from typing import Generic, TypeVar, Dict, Any, Optional, List, Type

from sqlalchemy import select, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from translatable.core.exceptions import DatabaseException

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository class providing the storage primitives for all entities
    using modern SQLAlchemy select() syntax.

    Writes never commit: persist() and delete_record() flush inside a
    SAVEPOINT so the caller owns the surrounding transaction.

    Attributes:
        session (Session): The SQLAlchemy session for database operations
        model (Type[T]): The SQLAlchemy model class this repository manages
    """

    def __init__(self, session: Session, model: Optional[Type[T]] = None):
        """
        Initialize the repository with a database session and the specific model.

        Args:
            session (Session): SQLAlchemy database session
            model (Type[T]): The SQLAlchemy model class this repository manages.
        """
        self.session = session
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _get_model(self) -> Type[T]:
        """Ensures the model is set before use."""
        if self.model is None:
            raise TypeError(f"Repository model is not set for {self.__class__.__name__}")
        return self.model

    def get_by_id(self, id: Any) -> Optional[T]:
        """
        Retrieve an entity by its primary key.

        Args:
            id: The primary key of the entity

        Returns:
            Optional[T]: The entity if found, None otherwise
        """
        try:
            return self.session.get(self._get_model(), id)
        except SQLAlchemyError as e:
            self.logger.error(f"Database error loading {self.model} #{id}: {e}", exc_info=True)
            raise DatabaseException(f"Failed to load entity: {str(e)}")

    def list(self, skip: int = 0, limit: int = 100, **filters) -> List[T]:
        """
        Retrieve a list of entities with pagination.

        Args:
            skip (int): Number of records to skip (for pagination)
            limit (int): Maximum number of records to return
            **filters: Additional filters to apply (field=value pairs)

        Returns:
            List[T]: List of entities matching the criteria
        """
        model_class = self._get_model()
        stmt = select(model_class)

        for key, value in filters.items():
            if hasattr(model_class, key):
                stmt = stmt.where(getattr(model_class, key) == value)

        stmt = stmt.offset(skip).limit(limit)

        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Database error listing {model_class.__name__}: {e}", exc_info=True)
            raise DatabaseException(f"Failed to list entities: {str(e)}")

    def detach(self, record: Any) -> bool:
        """
        Take a record out of the session, keeping its unsaved changes.

        A detached record is left alone by flushes of other work until it
        is attached again.

        Returns:
            bool: True if the record was in the session
        """
        if record not in self.session:
            return False
        self.session.expunge(record)
        return True

    def attach(self, record: Any) -> None:
        """Put a stored record back into the session without flushing it."""
        if self.has_identity(record) and record not in self.session:
            self.session.add(record)

    def flush_pending(self) -> None:
        """
        Flush the work already pending in the session.

        Opening a SAVEPOINT flushes that work first, outside the savepoint,
        so a failure there would take down the whole transaction.

        Raises:
            DatabaseException: If the pending work cannot be flushed; the
                session must then be rolled back by its owner
        """
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to flush pending changes: {e}", exc_info=True)
            raise DatabaseException(f"Failed to flush pending changes: {str(e)}")

    def persist(self, record: Any) -> bool:
        """
        Insert or update a record.

        Other pending work in the session is flushed first. The record itself
        is written inside a SAVEPOINT; a storage error rolls back only that
        savepoint and is reported as False. An updated record is expired on
        failure, so it reads back its stored values.

        Args:
            record: Model instance to write

        Returns:
            bool: True if the record was written, False otherwise

        Raises:
            DatabaseException: If the other pending work fails to flush
        """
        record_type = type(record).__name__
        was_attached = self.detach(record)
        try:
            self.flush_pending()
        except DatabaseException:
            if was_attached:
                self.session.add(record)
            raise

        try:
            with self.session.begin_nested():
                self.session.add(record)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to persist {record_type}: {e}", exc_info=True)
            return False

        self.logger.debug(f"Persisted {record_type} with identity {inspect(record).identity}")
        return True

    def delete_record(self, record: Any) -> bool:
        """
        Delete a persisted record.

        Like persist(), other pending work is flushed first and the delete
        itself runs inside a SAVEPOINT.

        Args:
            record: Model instance to delete

        Returns:
            bool: True if the record was deleted, False if it was never
            persisted or the delete failed

        Raises:
            DatabaseException: If the other pending work fails to flush
        """
        record_type = type(record).__name__
        if not self.has_identity(record):
            return False

        self.detach(record)
        try:
            self.flush_pending()
        except DatabaseException:
            self.attach(record)
            raise

        try:
            with self.session.begin_nested():
                self.session.delete(record)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to delete {record_type}: {e}", exc_info=True)
            return False

        self.logger.debug(f"Deleted {record_type}")
        return True

    @staticmethod
    def has_identity(record: Any) -> bool:
        """Whether the record exists in storage (persistent or detached)."""
        return inspect(record).has_identity

    @staticmethod
    def get_dirty(record: Any) -> Dict[str, Any]:
        """
        Column attributes changed since the record was loaded or created.

        Args:
            record: Model instance

        Returns:
            Dict mapping changed column keys to their current values
        """
        state = inspect(record)
        dirty = {}
        for attr in state.mapper.column_attrs:
            if state.attrs[attr.key].history.has_changes():
                dirty[attr.key] = getattr(record, attr.key)
        return dirty
