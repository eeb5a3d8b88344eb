"""SQLAlchemy model for lend/borrow records."""

from sqlalchemy import Column, Date, DateTime, Numeric, String, Text, func

from alerts_engine.infrastructure.database import Base


class LendBorrowModel(Base):
    """Database representation of a loan given or received by the user."""

    __tablename__ = "lend_borrow"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    type = Column(String(10), nullable=False)
    person_name = Column(String(120), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    due_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())


__all__ = ["LendBorrowModel"]
