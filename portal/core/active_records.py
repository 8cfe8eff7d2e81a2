"""
Single-active-record coordination for per-user resources.

A user keeps a history of cards, addresses and draft visits but only one of
each is current. The coordinator owns the read-modify-write that keeps it
that way so each resource service does not repeat it.
"""
import logging
from typing import Any, Dict, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..auth.models import User
from ..exceptions import PersistenceException

# Set up logging
logger = logging.getLogger(__name__)


class ActiveRecordCoordinator:
    """
    Keeps at most one active row per owner (and per scope) for a model.

    Args:
        model: SQLAlchemy model class
        owner_key: Column holding the owning user's id
        active_key: Column that marks the current row
        active_value: Value of ``active_key`` on the current row
        inactive_value: Value written when a row is superseded
        match_keys: Columns compared to find an existing row with the same
            content, which is reactivated instead of inserting a duplicate
        scope_keys: Columns that split an owner's rows into independent
            slots, each with its own active row

    Every save locks the owner's user row first, so concurrent saves for
    one user are serialized on databases that support ``SELECT ... FOR
    UPDATE``. Models back this up with a partial unique index on the
    active rows; a save that loses a race is rolled back and reported as a
    PersistenceException.
    """

    def __init__(
        self,
        model,
        owner_key: str = "user_id",
        active_key: str = "active",
        active_value: Any = True,
        inactive_value: Any = False,
        match_keys: Sequence[str] = (),
        scope_keys: Sequence[str] = (),
    ):
        self.model = model
        self.owner_key = owner_key
        self.active_key = active_key
        self.active_value = active_value
        self.inactive_value = inactive_value
        self.match_keys = tuple(match_keys)
        self.scope_keys = tuple(scope_keys)

    def _column(self, key: str):
        return getattr(self.model, key)

    def _scope(self, owner_id: int, values: Dict[str, Any]) -> list:
        criteria = [self._column(self.owner_key) == owner_id]
        criteria += [self._column(key) == values.get(key) for key in self.scope_keys]
        return criteria

    def _is_active(self):
        return self._column(self.active_key) == self.active_value

    def _lock_owner(self, db: Session, owner_id: int):
        db.query(User).filter(User.id == owner_id).with_for_update().first()

    def _new_record(self, owner_id: int, values: Dict[str, Any]):
        fields = dict(values)
        fields[self.owner_key] = owner_id
        fields[self.active_key] = self.active_value
        return self.model(**fields)

    def _commit(self, db: Session, record, owner_id: int):
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save {self.model.__name__} for user {owner_id}: {str(e)}")
            raise PersistenceException()
        db.refresh(record)
        return record

    def get_active(self, db: Session, owner_id: int, values: Dict[str, Any] = None):
        """Return the owner's current row in the given scope, if any."""
        return db.query(self.model).filter(*self._scope(owner_id, values or {}), self._is_active()).first()

    def replace_active(self, db: Session, owner_id: int, values: Dict[str, Any]):
        """
        Make a row with ``values`` the owner's only active row.

        All active rows in scope are deactivated. If ``match_keys`` is set and
        an existing row has identical content it is reactivated, otherwise a
        new active row is inserted. Everything is committed as one transaction.

        Args:
            db: Database session
            owner_id: ID of the owning user
            values: Column values for the new active row

        Returns:
            The active row

        Raises:
            PersistenceException: If the transaction fails
        """
        try:
            self._lock_owner(db, owner_id)
            scope = self._scope(owner_id, values)
            superseded = (
                db.query(self.model)
                .filter(*scope, self._is_active())
                .update({self.active_key: self.inactive_value}, synchronize_session="fetch")
            )

            record = None
            if self.match_keys:
                same_content = [self._column(key) == values.get(key) for key in self.match_keys]
                record = db.query(self.model).filter(*scope, *same_content).first()

            if record is not None:
                setattr(record, self.active_key, self.active_value)
                logger.info(f"Reactivated {self.model.__name__} {record.id} for user {owner_id}")
            else:
                record = self._new_record(owner_id, values)
                db.add(record)
                logger.info(f"Created active {self.model.__name__} for user {owner_id} ({superseded} superseded)")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update {self.model.__name__} for user {owner_id}: {str(e)}")
            raise PersistenceException()

        return self._commit(db, record, owner_id)

    def upsert_active(self, db: Session, owner_id: int, values: Dict[str, Any]):
        """
        Update the owner's active row in scope in place, or create it.

        Args:
            db: Database session
            owner_id: ID of the owning user
            values: Column values to write

        Returns:
            The active row

        Raises:
            PersistenceException: If the transaction fails
        """
        try:
            self._lock_owner(db, owner_id)
            record = self.get_active(db, owner_id, values)
            if record is not None:
                for key, value in values.items():
                    setattr(record, key, value)
                logger.info(f"Updated {self.model.__name__} {record.id} in place for user {owner_id}")
            else:
                record = self._new_record(owner_id, values)
                db.add(record)
                logger.info(f"Created {self.model.__name__} for user {owner_id}")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update {self.model.__name__} for user {owner_id}: {str(e)}")
            raise PersistenceException()

        return self._commit(db, record, owner_id)
