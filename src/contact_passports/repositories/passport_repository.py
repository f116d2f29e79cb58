"""Passport repository.

Data access for the passport attached to a contact. Every operation takes the
passport fields positionally in column order:

    contact_id, passport_number, surname, given_names, sex, date_of_birth,
    place_of_birth, nationality, date_of_issue, date_of_expiration,
    passport_type, issuing_country, authority, photo

``passport_type`` is stored in the ``type`` column.

Timestamps are set here rather than by the database. ``create_or_update``
runs SERIALIZABLE so two callers cannot both see "no passport yet" and
insert twice; conflicting transactions are retried with backoff.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import Select, delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from contact_passports.config import get_settings
from contact_passports.core.database import Database
from contact_passports.core.exceptions import (
    PassportConflictError,
    PassportNotFoundError,
    PassportStorageError,
)
from contact_passports.models.base import utcnow
from contact_passports.models.passport import Passport
from contact_passports.utils.logging import get_logger

logger = get_logger(__name__)

SERIALIZABLE = "SERIALIZABLE"

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}


def is_retryable_error(error: BaseException) -> bool:
    """Tell whether a failed serializable transaction may succeed on retry."""
    if isinstance(error, IntegrityError):
        return False
    if isinstance(error, OperationalError):
        message = str(error.orig).lower()
        if "database is locked" in message or "database is busy" in message:
            return True
    if isinstance(error, DBAPIError):
        code = getattr(error.orig, "sqlstate", None) or getattr(
            error.orig, "pgcode", None
        )
        return code in RETRYABLE_SQLSTATES
    return False


def passport_values(
    contact_id: int,
    passport_number: Optional[str] = None,
    surname: Optional[str] = None,
    given_names: Optional[str] = None,
    sex: Optional[str] = None,
    date_of_birth: Optional[str] = None,
    place_of_birth: Optional[str] = None,
    nationality: Optional[str] = None,
    date_of_issue: Optional[str] = None,
    date_of_expiration: Optional[str] = None,
    passport_type: Optional[str] = None,
    issuing_country: Optional[str] = None,
    authority: Optional[str] = None,
    photo: Optional[bytes] = None,
) -> Dict[str, Any]:
    """Map positional passport arguments onto column names."""
    return {
        "contact_id": contact_id,
        "passport_number": passport_number,
        "surname": surname,
        "given_names": given_names,
        "sex": sex,
        "date_of_birth": date_of_birth,
        "place_of_birth": place_of_birth,
        "nationality": nationality,
        "date_of_issue": date_of_issue,
        "date_of_expiration": date_of_expiration,
        "type": passport_type,
        "issuing_country": issuing_country,
        "authority": authority,
        "photo": photo,
    }


class PassportRepository:
    """CRUD operations for contact passports."""

    def __init__(
        self,
        database: Database,
        *,
        max_serializable_attempts: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize repository.

        Args:
            database: Storage handle shared by the process
            max_serializable_attempts: Tries for create_or_update_passport;
                defaults to the ``serializable_max_attempts`` setting
            clock: Source of created_at/updated_at values
        """
        self.database = database
        if max_serializable_attempts is None:
            max_serializable_attempts = get_settings().serializable_max_attempts
        self.max_serializable_attempts = max_serializable_attempts
        self._clock = clock

    async def create_passport(
        self,
        contact_id: int,
        passport_number: Optional[str] = None,
        surname: Optional[str] = None,
        given_names: Optional[str] = None,
        sex: Optional[str] = None,
        date_of_birth: Optional[str] = None,
        place_of_birth: Optional[str] = None,
        nationality: Optional[str] = None,
        date_of_issue: Optional[str] = None,
        date_of_expiration: Optional[str] = None,
        passport_type: Optional[str] = None,
        issuing_country: Optional[str] = None,
        authority: Optional[str] = None,
        photo: Optional[bytes] = None,
    ) -> Passport:
        """Insert a new passport for a contact.

        Returns:
            The stored passport. Its ``contact`` is not loaded.

        Raises:
            PassportConflictError: The contact already has a passport or
                does not exist.
            PassportStorageError: Any other database failure.
        """
        timestamp = self._clock()
        passport = Passport(
            **passport_values(
                contact_id,
                passport_number,
                surname,
                given_names,
                sex,
                date_of_birth,
                place_of_birth,
                nationality,
                date_of_issue,
                date_of_expiration,
                passport_type,
                issuing_country,
                authority,
                photo,
            ),
            created_at=timestamp,
            updated_at=timestamp,
        )

        try:
            async with self.database.session() as session:
                session.add(passport)
        except IntegrityError as e:
            logger.error("passport_create_conflict", contact_id=contact_id, error=str(e))
            raise PassportConflictError(contact_id) from e
        except SQLAlchemyError as e:
            logger.error("passport_create_failed", contact_id=contact_id, error=str(e))
            raise PassportStorageError(
                f"Error saving passport for contact {contact_id}"
            ) from e

        logger.info("passport_created", contact_id=contact_id)
        return passport

    async def create_or_update_passport(
        self,
        contact_id: int,
        passport_number: Optional[str] = None,
        surname: Optional[str] = None,
        given_names: Optional[str] = None,
        sex: Optional[str] = None,
        date_of_birth: Optional[str] = None,
        place_of_birth: Optional[str] = None,
        nationality: Optional[str] = None,
        date_of_issue: Optional[str] = None,
        date_of_expiration: Optional[str] = None,
        passport_type: Optional[str] = None,
        issuing_country: Optional[str] = None,
        authority: Optional[str] = None,
        photo: Optional[bytes] = None,
    ) -> Passport:
        """Store a contact's passport, inserting or updating as needed.

        Runs in a SERIALIZABLE transaction. An existing row has every field
        replaced, ``created_at`` and ``updated_at`` included.

        Returns:
            The stored passport with its ``contact`` loaded.

        Raises:
            PassportConflictError: The contact does not exist.
            PassportStorageError: Any other database failure, including
                serialization conflicts that persisted through every retry.
        """
        values = passport_values(
            contact_id,
            passport_number,
            surname,
            given_names,
            sex,
            date_of_birth,
            place_of_birth,
            nationality,
            date_of_issue,
            date_of_expiration,
            passport_type,
            issuing_country,
            authority,
            photo,
        )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_serializable_attempts),
            wait=wait_exponential(multiplier=0.05, max=1.0),
            retry=retry_if_exception(is_retryable_error),
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    passport, created = await self._save_serializable(values)
        except IntegrityError as e:
            logger.error("passport_save_conflict", contact_id=contact_id, error=str(e))
            raise PassportConflictError(contact_id) from e
        except SQLAlchemyError as e:
            logger.error("passport_save_failed", contact_id=contact_id, error=str(e))
            raise PassportStorageError(
                f"Error saving passport for contact {contact_id}"
            ) from e

        logger.info("passport_saved", contact_id=contact_id, created=created)
        return passport

    async def read_passports(self) -> List[Passport]:
        """Return every passport that has a contact, with the contact loaded."""
        try:
            async with self.database.session() as session:
                result = await session.execute(self._select_with_contact())
                passports = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("passports_read_failed", error=str(e))
            raise PassportStorageError("Could not read passports") from e

        logger.debug("passports_read", count=len(passports))
        return passports

    async def read_passport(self, contact_id: int) -> Optional[Passport]:
        """Return the contact's passport with the contact loaded, or None."""
        try:
            async with self.database.session() as session:
                return await self._fetch_one(session, contact_id)
        except SQLAlchemyError as e:
            logger.error("passport_read_failed", contact_id=contact_id, error=str(e))
            raise PassportStorageError(
                f"Could not read passport for contact {contact_id}"
            ) from e

    async def get_passport(self, contact_id: int) -> Passport:
        """Return the contact's passport or raise PassportNotFoundError."""
        passport = await self.read_passport(contact_id)
        if passport is None:
            raise PassportNotFoundError(contact_id)
        return passport

    async def update_passport(
        self,
        contact_id: int,
        passport_number: Optional[str] = None,
        surname: Optional[str] = None,
        given_names: Optional[str] = None,
        sex: Optional[str] = None,
        date_of_birth: Optional[str] = None,
        place_of_birth: Optional[str] = None,
        nationality: Optional[str] = None,
        date_of_issue: Optional[str] = None,
        date_of_expiration: Optional[str] = None,
        passport_type: Optional[str] = None,
        issuing_country: Optional[str] = None,
        authority: Optional[str] = None,
        photo: Optional[bytes] = None,
    ) -> bool:
        """Overwrite every field of a contact's passport, timestamps included.

        A contact without a passport is left alone; nothing is inserted.

        Returns:
            True if a passport was updated, False if there was none.
        """
        values = passport_values(
            contact_id,
            passport_number,
            surname,
            given_names,
            sex,
            date_of_birth,
            place_of_birth,
            nationality,
            date_of_issue,
            date_of_expiration,
            passport_type,
            issuing_country,
            authority,
            photo,
        )

        try:
            async with self.database.session() as session:
                matched = await self._update_row(session, values, self._clock())
        except SQLAlchemyError as e:
            logger.error("passport_update_failed", contact_id=contact_id, error=str(e))
            raise PassportStorageError(
                f"Error updating passport for contact {contact_id}"
            ) from e

        if matched:
            logger.info("passport_updated", contact_id=contact_id)
        else:
            logger.info("passport_update_no_match", contact_id=contact_id)
        return matched

    async def delete_passport(self, contact_id: int) -> bool:
        """Delete a contact's passport.

        Returns:
            True if a passport was removed, False if there was none.
        """
        stmt = (
            delete(Passport)
            .where(Passport.contact_id == contact_id)
            .execution_options(synchronize_session=False)
        )

        try:
            async with self.database.session() as session:
                result = await session.execute(stmt)
                deleted = bool(result.rowcount)
        except SQLAlchemyError as e:
            logger.error("passport_delete_failed", contact_id=contact_id, error=str(e))
            raise PassportStorageError(
                f"Error deleting passport for contact {contact_id}"
            ) from e

        logger.info("passport_deleted", contact_id=contact_id, deleted=deleted)
        return deleted

    async def _save_serializable(
        self, values: Dict[str, Any]
    ) -> Tuple[Passport, bool]:
        """One attempt of create_or_update_passport."""
        contact_id = values["contact_id"]

        async with self.database.transaction(isolation_level=SERIALIZABLE) as session:
            existing = await session.scalar(
                select(Passport.contact_id).where(Passport.contact_id == contact_id)
            )
            timestamp = self._clock()

            if existing is None:
                logger.debug("passport_inserting", contact_id=contact_id)
                await self._upsert_row(session, values, timestamp)
                created = True
            else:
                logger.debug("passport_updating", contact_id=contact_id)
                await self._update_row(session, values, timestamp)
                created = False

            passport = await self._fetch_one(session, contact_id, refresh=True)

        if passport is None:
            # The inner join drops a row whose contact vanished mid-transaction
            raise PassportNotFoundError(contact_id)
        return passport, created

    async def _upsert_row(
        self, session: AsyncSession, values: Dict[str, Any], timestamp: datetime
    ) -> None:
        """Insert a row, updating it instead if the contact_id already exists."""
        row = {**values, "created_at": timestamp, "updated_at": timestamp}

        dialect = self.database.dialect_name
        if dialect == "postgresql":
            insert_stmt = postgresql.insert(Passport).values(**row)
        elif dialect == "sqlite":
            insert_stmt = sqlite.insert(Passport).values(**row)
        else:
            await session.merge(Passport(**row))
            await session.flush()
            return

        # A conflicting insert rewrites the row, timestamps included
        set_ = {
            key: insert_stmt.excluded[key]
            for key in row
            if key != "contact_id"
        }
        await session.execute(
            insert_stmt.on_conflict_do_update(
                index_elements=[Passport.contact_id], set_=set_
            )
        )

    @staticmethod
    async def _update_row(
        session: AsyncSession, values: Dict[str, Any], timestamp: datetime
    ) -> bool:
        """Update every field of the row for ``values['contact_id']``."""
        fields = {key: value for key, value in values.items() if key != "contact_id"}
        stmt = (
            update(Passport)
            .where(Passport.contact_id == values["contact_id"])
            .values(**fields, created_at=timestamp, updated_at=timestamp)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)

    async def _fetch_one(
        self, session: AsyncSession, contact_id: int, refresh: bool = False
    ) -> Optional[Passport]:
        stmt = (
            self._select_with_contact()
            .where(Passport.contact_id == contact_id)
            .limit(1)
        )
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    def _select_with_contact() -> Select:
        """Passports inner-joined to their contacts, contact eagerly loaded."""
        return (
            select(Passport)
            .join(Passport.contact)
            .options(contains_eager(Passport.contact))
            .order_by(Passport.contact_id)
        )

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "passport_save_retrying",
            attempt=retry_state.attempt_number,
            max_attempts=self.max_serializable_attempts,
            error=str(error),
        )


__all__ = ["PassportRepository", "passport_values", "is_retryable_error"]
