from typing import Literal

import bcrypt
import pymongo
from beanie import Document
from pydantic import Field, field_validator
from pymongo import IndexModel

from echocatering.models.models.base import TimestampedModel

UserRole = Literal["admin", "editor", "viewer"]

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(stored_hash: str, password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


class UserBase(TimestampedModel):
    email: str = Field(min_length=3, max_length=254)
    password: str
    role: UserRole = "viewer"
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value

    @field_validator("password")
    @classmethod
    def require_hashed_password(cls, value: str) -> str:
        if not value.startswith(BCRYPT_PREFIXES):
            raise ValueError("Password must be hashed")
        return value


class UserBeanie(UserBase, Document):
    class Settings:
        name = "users"
        indexes = [IndexModel([("email", pymongo.ASCENDING)], unique=True)]
