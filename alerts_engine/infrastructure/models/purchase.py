"""SQLAlchemy model for purchases."""

from sqlalchemy import Column, Date, DateTime, Numeric, String, func

from alerts_engine.infrastructure.database import Base


class PurchaseModel(Base):
    """Database representation of a planned or completed purchase."""

    __tablename__ = "purchases"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    price = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    planned_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="planned", index=True)
    priority = Column(String(10), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["PurchaseModel"]
