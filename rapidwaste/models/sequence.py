from sqlalchemy import Column, Integer, String
from rapidwaste.database.session import Base


class Sequence(Base):
    """Named monotonic counter used for human readable identifiers."""
    __tablename__ = "sequences"
    __table_args__ = (
        {"extend_existing": True}
    )

    name = Column(String(50), primary_key=True)
    value = Column(Integer, default=0, nullable=False)
