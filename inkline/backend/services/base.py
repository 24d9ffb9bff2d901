"""
Service base class.

Services hold the business rules and sit between the routers and the
repositories. Owner-scoped services receive the authenticated user id in
their constructor and pass it to their repositories.
"""

from collections.abc import Awaitable, Iterable, Mapping
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inkline.backend.core.exceptions import ConflictError, DatabaseError, ValidationError
from inkline.backend.core.logging import get_logger

T = TypeVar("T")

_UNIQUE_MARKERS = ("unique", "duplicate")


class BaseService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._logger = get_logger(type(self).__module__)

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await ``coro`` and translate SQLAlchemy failures.

        Raises:
            ConflictError: A unique constraint was violated
            DatabaseError: Any other database failure
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning("Integrity error", extra={"operation": operation, "error": str(e)})
            if any(marker in str(e).lower() for marker in _UNIQUE_MARKERS):
                raise ConflictError("Resource already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error("Database error", extra={"operation": operation, "error": str(e)})
            raise DatabaseError(f"Database operation failed: {operation}") from e

    @staticmethod
    def _validate_required(fields: Mapping[str, Any], field_names: Iterable[str]) -> None:
        """None and whitespace-only strings count as missing."""
        missing = [
            name
            for name in field_names
            if fields.get(name) is None
            or (isinstance(fields[name], str) and not fields[name].strip())
        ]
        if missing:
            raise ValidationError("Required fields missing", details={"missing_fields": missing})

    @staticmethod
    def _validate_string_length(value: str, field_name: str, max_length: int) -> None:
        if len(value) > max_length:
            raise ValidationError(
                f"{field_name} too long",
                details={field_name: f"Maximum length is {max_length}"},
            )

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(operation, extra={"service": type(self).__name__, **context})

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra={"service": type(self).__name__, **context})
