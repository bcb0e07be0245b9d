from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.sql import func
from app.db.base import Base


class Job(Base):
    """
    Freight job posted by an owner.

    Every row counts toward the quota of its owner's active subscription.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    route = Column(String(255), nullable=False)
    price = Column(String(100), nullable=False)
    type = Column(String(100), nullable=False, index=True)
    date = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    requirements = Column(JSON, nullable=False, default=list)
    owner = Column(String(200), nullable=False, default="")  # display name shown on the listing
    phone = Column(String(50), nullable=False, default="")
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_jobs_created_by_created", "created_by", "created_at"),
    )
