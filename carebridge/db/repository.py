"""Repository layer: user accounts and the doctor directory."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carebridge.core.exceptions import ConflictError
from carebridge.db.models import Doctor, User


class UserRepository:
    """Repository for users and doctors."""

    def __init__(self, session: Session) -> None:
        """Initialize with a SQLAlchemy session."""
        self.session = session

    def get_by_email(self, email: str) -> Optional[User]:
        return self.session.query(User).filter(User.email == email).first()

    def get_by_email_and_type(self, email: str, user_type: str) -> Optional[User]:
        return (
            self.session.query(User)
            .filter(User.email == email, User.user_type == user_type)
            .first()
        )

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        user_type: str,
        specialization: str | None = None,
        hospital: str | None = None,
    ) -> User:
        """
        Insert a user. Specialization and hospital are only stored for doctors.
        Raises ConflictError if the email is already registered.
        """
        is_doctor = user_type == "doctor"
        user = User(
            name=name,
            email=email,
            password=password_hash,
            user_type=user_type,
            specialization=specialization if is_doctor else None,
            hospital=hospital if is_doctor else None,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ConflictError("Email already exists") from e
        self.session.refresh(user)
        return user

    def list_doctors(self) -> list[Doctor]:
        return self.session.query(Doctor).order_by(Doctor.name).all()

    def create_doctor(self, **fields) -> Doctor:
        """Insert a doctor directory entry; email must be unique."""
        doctor = Doctor(**fields)
        self.session.add(doctor)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ConflictError("Email already exists") from e
        self.session.refresh(doctor)
        return doctor

    def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        self.session.execute(text("SELECT 1"))
