from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, Field, field_validator

from ..models.connection import ConnectionStatus, Permission
from .common import CamelModel, ORMModel, SuccessOut
from .user import PublicUserOut


class ConnectionOut(ORMModel):
    id: str
    parent_user_id: str
    child_user_id: str
    permission: Permission
    status: ConnectionStatus
    invite_token: str
    invite_expires_at: datetime
    created_at: datetime
    updated_at: datetime

    @field_validator("invite_expires_at", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # SQLite drops tzinfo; values are always written in UTC
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class ConnectionDetailOut(ConnectionOut):
    is_expired: bool
    parent_user: Optional[PublicUserOut] = None
    child_user: Optional[PublicUserOut] = None


class OwnerConnectionOut(ConnectionOut):
    parent_user: Optional[PublicUserOut] = None


class SharedLedgerOut(ConnectionOut):
    child_user: Optional[PublicUserOut] = None


class InviteGenerateIn(CamelModel):
    child_user_id: str = Field(min_length=1)
    parent_phone: str = Field(min_length=1)
    permission: str = Field(min_length=1)
    language: Optional[str] = None


class InviteGenerateOut(SuccessOut):
    invite_token: str
    invite_url: str
    expires_at: datetime
    parent_user: PublicUserOut


class InviteDetailsOut(SuccessOut):
    connection: ConnectionDetailOut


class InviteAcceptIn(CamelModel):
    token: str = Field(min_length=1)
    parent_user_id: str = Field(min_length=1)


class InviteAcceptOut(SuccessOut):
    connection: ConnectionOut
    child_user: Optional[PublicUserOut] = None


class PermissionUpdateIn(CamelModel):
    user_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("userId", "parentUserId", "childUserId", "user_id"),
    )
    permission: str = Field(min_length=1)
    language: Optional[str] = None


class RevokeIn(CamelModel):
    user_id: str = Field(min_length=1)
    role: str = Field(min_length=1)
    language: Optional[str] = None


class ViewIn(CamelModel):
    parent_user_id: str = Field(min_length=1)
    child_user_id: str = Field(min_length=1)
    connection_id: Optional[str] = None
    language: Optional[str] = None


class OwnerConnectionsOut(SuccessOut):
    connections: list[OwnerConnectionOut]


class SharedLedgersOut(SuccessOut):
    connections: list[SharedLedgerOut]
