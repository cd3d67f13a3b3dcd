from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional

from vetcare.core.permissions import Role

class Identity(BaseModel):
    id: str = Field(min_length=1)
    name: str
    email: str = Field(min_length=1)
    role: Role
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    class Config:
        populate_by_name = True
        frozen = True

    def to_json(self) -> str:
        # Persisted with the same field names the dashboard reads
        return self.model_dump_json(by_alias=True)

class DirectoryRecord(BaseModel):
    """
    A user record as returned by a user directory.

    Directories are outside our control, so every field the identity needs
    is required here and checked before anything is mapped.
    """
    id: str
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    role: Role
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, bytes)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_identity(self) -> Identity:
        return Identity(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            image_url=self.image_url,
        )
