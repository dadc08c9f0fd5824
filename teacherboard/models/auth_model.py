# /teacherboard/models/auth_model.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TeacherAccount(BaseModel):
    """The authenticated principal, as carried in the bearer token."""
    model_config = ConfigDict(from_attributes=True)

    uid: str
    displayName: Optional[str] = None
    email: Optional[str] = None
    photoURL: Optional[str] = None


class GoogleSignInRequest(BaseModel):
    idToken: str = Field(..., min_length=1, description="The ID token returned by the Google sign-in popup.")


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: TeacherAccount
