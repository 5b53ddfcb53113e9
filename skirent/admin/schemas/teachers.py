from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class TeacherCreate(BaseModel):
    firstname: str = Field(..., max_length=100)
    lastname: str = Field(..., max_length=100)

    @field_validator("firstname", "lastname")
    @classmethod
    def strip_names(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("First name and last name are required")
        return v


class TeacherUpdate(BaseModel):
    firstname: Optional[str] = Field(None, max_length=100)
    lastname: Optional[str] = Field(None, max_length=100)

    @field_validator("firstname", "lastname")
    @classmethod
    def strip_names(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class AdminTeacherRead(BaseModel):
    id: int
    firstname: str
    lastname: str
    lessons_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
