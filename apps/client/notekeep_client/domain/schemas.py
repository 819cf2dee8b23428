from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notekeep_client.domain.entities import Identity, Note, NoteOwner


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        return str(value)
    return None


class NoteOwnerOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Union[int, str]] = None
    username: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None


class NoteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    title: Optional[str] = None
    content: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    user: Optional[NoteOwnerOut] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _timestamps_as_text(cls, value: Any) -> Optional[str]:
        # Malformed timestamps degrade to "missing" and sort as oldest.
        return value if isinstance(value, str) else None

    def to_entity(self) -> Note:
        owner = None
        if self.user is not None:
            owner = NoteOwner(
                id=_str_or_none(self.user.id),
                username=self.user.username,
                full_name=self.user.full_name,
                email=self.user.email,
            )
        return Note(
            id=str(self.id),
            title=self.title or "",
            content=self.content or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
            owner=owner,
        )


class NoteWriteIn(BaseModel):
    title: str
    content: str


class LoginIn(BaseModel):
    email: str
    password: str


class RegisterIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    full_name: str = Field(alias="fullName")
    email: str
    password: str


class StoredSessionRecord(BaseModel):
    """Persisted form of an Identity. Never carries the password."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")
    is_authenticated: bool = Field(default=False, alias="isAuthenticated")

    @classmethod
    def from_identity(cls, identity: Identity) -> "StoredSessionRecord":
        return cls(
            id=identity.id,
            email=identity.email,
            username=identity.username,
            full_name=identity.full_name,
            is_authenticated=True,
        )

    def to_identity(self) -> Identity:
        return Identity(
            id=self.id or self.email,
            email=self.email,
            username=self.username,
            full_name=self.full_name,
        )
