"""SQLAlchemy models for user accounts and the doctor directory."""

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class User(Base):
    """Account that can log in: admin, doctor or patient."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "user_type IN ('admin', 'doctor', 'patient')", name="ck_users_user_type"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    user_type = Column(String(50), nullable=False, index=True)
    specialization = Column(String(255), nullable=True)
    hospital = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Doctor(Base):
    """Entry in the public doctor directory."""

    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    id_number = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    specialization = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    contact = Column(String(50), nullable=False)
    status = Column(String(50), default="Active")
    image_url = Column(Text, nullable=True)
    join_date = Column(Date, default=date.today)
