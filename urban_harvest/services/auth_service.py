# urban_harvest/services/auth_service.py
import re

from sqlalchemy.orm import Session

from urban_harvest.data.models.user import UserModel
from urban_harvest.domain.schemas import SignupIn, LoginIn
from urban_harvest.repos.user_repo import UserRepo
from urban_harvest.utils.security import hash_password, check_password, create_access_token
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")
PHONE_RE = re.compile(r"^(\+94|0)\d{9}$")


class InvalidCredentials(Exception):
    pass


def validate_signup(payload: SignupIn):
    if not payload.name or not payload.email or not payload.password:
        raise ValueError("Name, email, and password are required")
    if not EMAIL_RE.match(payload.email):
        raise ValueError("Invalid email format")
    if not PASSWORD_RE.match(payload.password):
        raise ValueError(
            "Password must be at least 8 characters, include uppercase, lowercase, and a number"
        )
    if payload.phone and not PHONE_RE.match(payload.phone):
        raise ValueError("Invalid phone number format (e.g. 0771234567 or +94771234567)")


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def signup(self, payload: SignupIn) -> dict:
        validate_signup(payload)

        if self.repo.get_by_email(payload.email):
            raise ValueError("Email already registered")

        user = self.repo.create_user(UserModel(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role="customer",
            phone=payload.phone or None,
            address=payload.address or None,
        ))
        logger.info(f"User {user.user_id} registered")

        return {
            "message": "Account created successfully",
            "token": create_access_token(user.user_id, user.email, user.role),
            "user": user.public_dict(),
        }

    def login(self, payload: LoginIn) -> dict:
        if not payload.email or not payload.password:
            raise ValueError("Email and password are required")

        user = self.repo.get_by_email(payload.email)
        if not user or not check_password(payload.password, user.password_hash):
            raise InvalidCredentials("Invalid email or password")

        logger.info(f"User {user.user_id} logged in")
        return {
            "message": "Login successful",
            "token": create_access_token(user.user_id, user.email, user.role),
            "user": user.public_dict(),
        }

    def me(self, user_id: int) -> dict:
        user = self.repo.get_user(user_id)
        if not user:
            raise LookupError("User not found")
        return {"user": user.public_dict()}
