"""Translation of SQLAlchemy failures into planner errors."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.domain.errors import ConflictError, UpstreamUnavailableError


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise database failures as planner errors.

    Args:
        operation: Short description used in the error message.

    Raises:
        ConflictError: On unique constraint violations.
        UpstreamUnavailableError: On any other database failure.
    """
    try:
        yield
    except IntegrityError as exc:
        raise ConflictError(f"{operation} conflicts with stored data") from exc
    except SQLAlchemyError as exc:
        raise UpstreamUnavailableError(f"{operation} failed: {exc}") from exc


__all__ = ["translate_errors"]
