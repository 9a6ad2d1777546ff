from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt

USER_RESOURCE = "user"


class UserDocument(BaseModel):
    """Shape of a persisted user. Unknown keys are dropped before writing."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    age: Optional[StrictInt] = Field(default=None, ge=0, le=120)


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    age: Optional[StrictInt] = Field(default=None, ge=0, le=120)


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=3, max_length=30)
    email: Optional[EmailStr] = None
    age: Optional[StrictInt] = Field(default=None, ge=0, le=120)
