"""Business logic services used by HTTP controllers.

`StudentService` validates request input, delegates to the repository
and turns any SQLAlchemy failure into a `StorageError`. The driver's
message is logged here and never reaches the client.
"""

import logging
import math
from contextlib import contextmanager
from typing import Any, List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from . import models, repositories
from .errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger("school_fees.services")

STUDENT_NOT_FOUND = "Student not found"
MISSING_NAME_OR_FEES = "Missing name or fees"
INVALID_FEES = "Invalid fees"
INVALID_AMOUNT = "Invalid amount"
STORAGE_FAILURE = "Internal storage error"


def to_number(value: Any):
    """Coerce a JSON scalar to a finite float, or return None.

    Numbers and numeric strings are accepted; booleans, containers and
    non-finite values (including integers too large for a float) are not.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_student_id(raw: str) -> int:
    """Parse a path identifier; anything that is not an integer cannot exist."""
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise NotFoundError(STUDENT_NOT_FOUND)


class StudentService:
    """Create, read and pay operations over `Student` rows."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.StudentRepository(session)

    @contextmanager
    def _storage(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("storage_failed", extra={"action": action, "error_type": type(exc).__name__})
            raise StorageError(STORAGE_FAILURE) from exc

    def list_students(self) -> List[models.Student]:
        with self._storage("list_students"):
            return self.repo.list_all()

    def get_student(self, raw_id: str) -> models.Student:
        student_id = parse_student_id(raw_id)
        with self._storage("get_student"):
            student = self.repo.get(student_id)
        if student is None:
            raise NotFoundError(STUDENT_NOT_FOUND)
        return student

    def create_student(self, name: Any, fees: Any) -> models.Student:
        """Create a student with nothing paid yet.

        Both `name` and `fees` must be present and truthy; `fees` must
        also be numeric.
        """
        if not name or not fees:
            raise ValidationError(MISSING_NAME_OR_FEES)
        if not isinstance(name, str):
            raise ValidationError(MISSING_NAME_OR_FEES)
        amount_owed = to_number(fees)
        if amount_owed is None:
            raise ValidationError(INVALID_FEES)
        if amount_owed == 0:
            raise ValidationError(MISSING_NAME_OR_FEES)
        student = models.Student(name=name, fees=amount_owed, fee_paid=0)
        with self._storage("create_student"):
            student = self.repo.create(student)
        logger.info("student_created", extra={"student_id": student.id})
        return student

    def record_payment(self, raw_id: str, amount: Any) -> models.Student:
        """Add a strictly positive `amount` to the student's paid total.

        Overpayment is accepted: nothing caps `fee_paid` at `fees`.
        """
        value = to_number(amount) if amount else None
        if value is None or value <= 0:
            raise ValidationError(INVALID_AMOUNT)
        student_id = parse_student_id(raw_id)
        try:
            with self._storage("record_payment"):
                student = self.repo.add_payment(student_id, value)
        except OverflowError:
            logger.warning("payment_rejected_overflow", extra={"student_id": student_id, "amount": value})
            raise ValidationError(INVALID_AMOUNT)
        if student is None:
            raise NotFoundError(STUDENT_NOT_FOUND)
        logger.info("payment_recorded", extra={"student_id": student.id, "amount": value})
        return student
