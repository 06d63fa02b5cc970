from typing import Callable, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session

from rapidwaste.models.sequence import Sequence


class CRUDSequence:
    """Named counters incremented with a single UPDATE statement."""

    def next_value(self, db: Session, *, name: str, initial: Optional[Callable[[], int]] = None) -> int:
        """
        Increment and return the counter ``name``.

        The first call creates the row, starting from ``initial()`` when given
        so existing records keep their numbers.
        """
        result = db.execute(
            update(Sequence)
            .where(Sequence.name == name)
            .values(value=Sequence.value + 1)
        )
        if result.rowcount == 0:
            start = initial() if initial else 0
            db.add(Sequence(name=name, value=start + 1))
            db.flush()
            return start + 1

        return db.query(Sequence.value).filter(Sequence.name == name).scalar()


sequence_crud = CRUDSequence()
