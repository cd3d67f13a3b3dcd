from sqlmodel import SQLModel
from .user import User

__all__ = [
    "SQLModel",
    "User",
]
