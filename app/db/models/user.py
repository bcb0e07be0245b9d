from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.sql import func
from app.db.base import Base


class User(Base):
    """
    Account for every role: drivers, owners and admins.

    Driver profile fields live on the same row; they stay empty for owners
    and admins. Email and username are stored lower-cased and trimmed so the
    unique indexes are case-insensitive.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=True)
    password_hash = Column(String, nullable=False)
    name = Column(String(200), nullable=False)
    role = Column(String(20), nullable=False, index=True)  # driver | owner | admin

    # Owner
    company_name = Column(String(200), nullable=True)

    # Driver
    license_category = Column(String(50), nullable=True)
    location = Column(String(200), nullable=True)
    experience = Column(String(200), nullable=True)
    categories = Column(JSON, nullable=False, default=list)
    rating = Column(Float, nullable=False, default=0)
    bio = Column(Text, nullable=False, default="")
    verified = Column(Boolean, nullable=False, default=False)
    trips = Column(Integer, nullable=False, default=0)
    phone = Column(String(50), nullable=False, default="")
    work_zone = Column(String(200), nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<User {self.id} {self.email} ({self.role})>"
