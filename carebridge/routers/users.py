"""Account signup/login and the doctor directory"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status

from carebridge.config import UserType
from carebridge.core.exceptions import InvalidCredentialsError
from carebridge.core.logging import audit_logger, get_logger
from carebridge.core.security import hash_password, verify_password
from carebridge.db.repository import UserRepository
from carebridge.dependencies import get_user_repository
from carebridge.models.requests import (
    DoctorCreateRequest,
    LoginRequest,
    SignupRequest,
    VALID_USER_TYPES,
)
from carebridge.models.responses import (
    DoctorResponse,
    LoginResponse,
    SignupResponse,
    UserInfo,
)

logger = get_logger(__name__)

users_router = APIRouter(prefix="/api", tags=["Users"])

Repository = Annotated[UserRepository, Depends(get_user_repository)]


@users_router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse)
def signup(body: SignupRequest, repo: Repository):
    """Register an admin, doctor or patient account."""
    if not (body.name and body.email and body.password and body.user_type):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    if body.user_type == UserType.DOCTOR.value and not (body.specialization and body.hospital):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Specialization and hospital required for doctors",
        )
    if body.user_type not in VALID_USER_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user type")

    if repo.get_by_email(body.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")

    user = repo.create_user(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
        user_type=body.user_type,
        specialization=body.specialization,
        hospital=body.hospital,
    )
    audit_logger.log_account_event("signup", user.user_type, success=True, user_id=user.id, email=user.email)
    return SignupResponse(id=user.id)


@users_router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, repo: Repository):
    if not (body.email and body.password and body.user_type):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    if body.user_type not in VALID_USER_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user type")

    user = repo.get_by_email_and_type(body.email, body.user_type)
    if user is None or not verify_password(body.password, user.password):
        audit_logger.log_account_event("login", body.user_type, success=False, email=body.email)
        raise InvalidCredentialsError()

    audit_logger.log_account_event("login", user.user_type, success=True, user_id=user.id)
    return LoginResponse(
        user=UserInfo(id=user.id, name=user.name, email=user.email, user_type=user.user_type)
    )


@users_router.get("/doctors", response_model=List[DoctorResponse])
def list_doctors(repo: Repository):
    return [DoctorResponse.model_validate(d) for d in repo.list_doctors()]


@users_router.post("/doctors", status_code=status.HTTP_201_CREATED, response_model=DoctorResponse)
def create_doctor(body: DoctorCreateRequest, repo: Repository):
    doctor = repo.create_doctor(**body.model_dump())
    logger.info("Doctor added to directory", doctor_id=doctor.id, specialization=doctor.specialization)
    return DoctorResponse.model_validate(doctor)
