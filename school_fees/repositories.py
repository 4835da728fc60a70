"""Repository classes encapsulating database operations.

Repositories return SQLModel objects and perform commits/refreshes where
appropriate. They let SQLAlchemy exceptions propagate; mapping those to
API errors is the service layer's job.
"""

import sys
from typing import List, Optional
from sqlmodel import Session, select
from sqlalchemy import func, update
from . import models


class StudentRepository:
    """CRUD operations for `Student` rows."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Student]:
        """Return every student in storage order."""
        return list(self.session.exec(select(models.Student)).all())

    def get(self, student_id: int) -> Optional[models.Student]:
        """Get a `Student` by primary key."""
        return self.session.get(models.Student, student_id)

    def create(self, student: models.Student) -> models.Student:
        """Persist a new student and return the managed instance."""
        self.session.add(student)
        self.session.commit()
        self.session.refresh(student)
        return student

    def add_payment(self, student_id: int, amount: float) -> Optional[models.Student]:
        """Atomically add `amount` to `fee_paid` and return the updated row.

        The increment is computed by the database in a single UPDATE, so
        concurrent payments on the same student are all applied. Returns
        `None` when no student has that id. Raises `OverflowError`, leaving
        the row untouched, when the new total would not fit in a float.
        """
        paid = func.coalesce(models.Student.fee_paid, 0)
        stmt = (
            update(models.Student)
            .where(models.Student.id == student_id)
            .where(paid <= sys.float_info.max - amount)
            .values(
                fee_paid=paid + amount,
                updated_at=models.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            self.session.rollback()
            if self.get(student_id) is None:
                return None
            raise OverflowError(f"fee_paid of student {student_id} would exceed the float range")
        self.session.commit()
        student = self.get(student_id)
        if student is not None:
            self.session.refresh(student)
        return student
