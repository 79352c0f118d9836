"""
Ledger sharing: invites and connections between an owner and a viewer.

Rows store the owner as ``child_user_id`` and the viewer as
``parent_user_id``. Every lookup is filtered by the acting user, so a row that
exists but belongs to someone else is reported exactly like a missing one.

Status transitions::

    pending --accept (viewer, before expiry)--> accepted
    pending|accepted --revoke (either side)--> row deleted
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import uuid4
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.config import settings
from ..core.errors import ConflictError, NotFoundError, UpstreamError, ValidationError
from ..models import utcnow, as_utc
from ..models.connection import ConnectionRole, ConnectionStatus, Permission, UserConnection
from ..models.notification import NotificationType
from ..models.user import User
from .notification_service import notify
from .sms_service import SmsSender, invite_message
from .user_service import get_by_phone

logger = logging.getLogger(__name__)


@dataclass
class GeneratedInvite:
    connection: UserConnection
    invite_url: str
    expires_at: datetime
    viewer: User


@dataclass
class InviteDetails:
    connection: UserConnection
    is_expired: bool
    owner: User | None
    viewer: User | None


@dataclass
class AcceptedInvite:
    connection: UserConnection
    owner: User | None


def parse_permission(value) -> Permission:
    try:
        return Permission(value)
    except ValueError:
        raise ValidationError("Valid permission is required (read or read_write)")


def parse_role(value) -> ConnectionRole:
    try:
        return ConnectionRole(value)
    except ValueError:
        raise ValidationError("Valid role is required (owner or viewer)")


def is_expired(connection: UserConnection, now: datetime | None = None) -> bool:
    return (now or utcnow()) > as_utc(connection.invite_expires_at)


def build_invite_url(token: str) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/invite/{token}"


def _ensure_pending(connection: UserConnection) -> None:
    status = connection.status
    if status is ConnectionStatus.ACCEPTED:
        raise ConflictError("This invite has already been accepted")
    elif status is ConnectionStatus.REVOKED:
        raise ConflictError("This invite has been revoked")
    elif status is ConnectionStatus.PENDING:
        return
    else:
        raise ValueError(f"Unhandled connection status: {status!r}")


def _accepted_between(db: Session, *, owner_id: str, viewer_id: str) -> UserConnection | None:
    return db.execute(
        select(UserConnection).where(
            UserConnection.child_user_id == owner_id,
            UserConnection.parent_user_id == viewer_id,
            UserConnection.status == ConnectionStatus.ACCEPTED,
        )
    ).scalars().first()


def _commit(db: Session, failure_message: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error(failure_message, exc_info=True)
        db.rollback()
        raise UpstreamError(failure_message)


def generate_invite(
    db: Session,
    *,
    owner_id: str,
    viewer_phone: str,
    permission: str,
    language: str | None = None,
    send_sms: SmsSender | None = None,
) -> GeneratedInvite:
    """Create a pending connection and its shareable invite link.

    A second pending invite for the same pair is allowed; each token stays
    acceptable on its own until it expires or is used.
    """
    granted = parse_permission(permission)
    owner = db.get(User, owner_id)
    if not owner:
        raise NotFoundError("User not found")

    viewer = get_by_phone(db, viewer_phone)
    if not viewer:
        raise NotFoundError("User with this phone number not found")
    if viewer.id == owner.id:
        raise ValidationError("You cannot share your ledger with yourself")

    if _accepted_between(db, owner_id=owner.id, viewer_id=viewer.id):
        raise ConflictError("Connection already exists and is accepted")

    expires_at = utcnow() + timedelta(days=settings.INVITE_EXPIRY_DAYS)
    connection = UserConnection(
        parent_user_id=viewer.id,
        child_user_id=owner.id,
        permission=granted,
        status=ConnectionStatus.PENDING,
        invite_token=str(uuid4()),
        invite_expires_at=expires_at,
    )
    db.add(connection)
    _commit(db, "Failed to create invite")
    db.refresh(connection)

    invite_url = build_invite_url(connection.invite_token)
    logger.info(f"Invite {connection.id} created by {owner.id} for {viewer.id} ({granted})")

    notify(
        db,
        user_id=viewer.id,
        type=NotificationType.INVITE,
        language=language,
        related_id=connection.id,
        owner_name=owner.display_name,
        permission=granted,
    )
    if send_sms is not None:
        result = send_sms(viewer.phone, invite_message(owner.display_name, invite_url))
        if not result.success:
            logger.warning(f"Invite SMS to {viewer.phone} failed: {result.error}")

    return GeneratedInvite(connection=connection, invite_url=invite_url, expires_at=expires_at, viewer=viewer)


def get_invite_details(db: Session, *, token: str, now: datetime | None = None) -> InviteDetails:
    # No caller check: holding the link is what grants a preview
    connection = db.execute(
        select(UserConnection)
        .options(selectinload(UserConnection.parent_user), selectinload(UserConnection.child_user))
        .where(UserConnection.invite_token == token)
    ).scalar_one_or_none()
    if not connection:
        raise NotFoundError("Invalid invite token")
    _ensure_pending(connection)
    return InviteDetails(
        connection=connection,
        is_expired=is_expired(connection, now),
        owner=connection.child_user,
        viewer=connection.parent_user,
    )


def accept_invite(db: Session, *, token: str, viewer_id: str, now: datetime | None = None) -> AcceptedInvite:
    connection = db.execute(
        select(UserConnection).where(
            UserConnection.invite_token == token,
            UserConnection.parent_user_id == viewer_id,
        )
    ).scalar_one_or_none()
    if not connection:
        raise NotFoundError("Invalid invite token")
    _ensure_pending(connection)
    if is_expired(connection, now):
        raise ConflictError("This invite has expired")
    if _accepted_between(db, owner_id=connection.child_user_id, viewer_id=viewer_id):
        raise ConflictError("Connection already exists and is accepted")

    # Compare-and-set so two concurrent accepts cannot both succeed
    accepted = db.execute(
        update(UserConnection)
        .where(UserConnection.id == connection.id, UserConnection.status == ConnectionStatus.PENDING)
        .values(status=ConnectionStatus.ACCEPTED, updated_at=utcnow())
    ).rowcount
    if not accepted:
        db.rollback()
        raise ConflictError("This invite has already been accepted")
    _commit(db, "Failed to accept invite")
    db.refresh(connection)
    logger.info(f"Invite {connection.id} accepted by {viewer_id}")

    return AcceptedInvite(connection=connection, owner=db.get(User, connection.child_user_id))


def update_permission(
    db: Session, *, connection_id: str, viewer_id: str, permission: str, language: str | None = None
) -> UserConnection:
    """Change the access level on an accepted connection.

    Only the viewer side of the connection may call this; the owner is
    notified of the change.
    """
    connection = db.execute(
        select(UserConnection).where(
            UserConnection.id == connection_id,
            UserConnection.parent_user_id == viewer_id,
            UserConnection.status == ConnectionStatus.ACCEPTED,
        )
    ).scalar_one_or_none()
    if not connection:
        raise NotFoundError("Connection not found or access denied")
    granted = parse_permission(permission)

    connection.permission = granted
    connection.updated_at = utcnow()
    _commit(db, "Failed to update connection")
    db.refresh(connection)
    logger.info(f"Connection {connection.id} permission set to {granted}")

    viewer = db.get(User, viewer_id)
    notify(
        db,
        user_id=connection.child_user_id,
        type=NotificationType.PERMISSION_UPDATE,
        language=language,
        related_id=connection.id,
        viewer_name=viewer.display_name if viewer else None,
        permission=granted,
    )
    return connection


def revoke_connection(
    db: Session, *, connection_id: str, user_id: str, role: str, language: str | None = None
) -> None:
    """Hard-delete a connection from either side and tell the other side."""
    side = parse_role(role)
    stmt = select(UserConnection).where(UserConnection.id == connection_id)
    if side is ConnectionRole.OWNER:
        stmt = stmt.where(UserConnection.child_user_id == user_id)
    elif side is ConnectionRole.VIEWER:
        stmt = stmt.where(UserConnection.parent_user_id == user_id)
    else:
        raise ValueError(f"Unhandled connection role: {side!r}")

    connection = db.execute(stmt).scalar_one_or_none()
    if not connection:
        raise NotFoundError("Connection not found or access denied")

    counterpart_id = connection.parent_user_id if side is ConnectionRole.OWNER else connection.child_user_id
    db.delete(connection)
    _commit(db, "Failed to delete connection")
    logger.info(f"Connection {connection_id} revoked by {side} {user_id}")

    revoker = db.get(User, user_id)
    notify(
        db,
        user_id=counterpart_id,
        type=NotificationType.REVOKED,
        language=language,
        related_id=connection_id,
        user_name=revoker.display_name if revoker else None,
    )


def notify_viewed(
    db: Session,
    *,
    owner_id: str,
    viewer_id: str,
    connection_id: str | None = None,
    language: str | None = None,
):
    viewer = db.get(User, viewer_id)
    if not viewer:
        raise NotFoundError("Parent user not found")

    stmt = select(UserConnection).where(
        UserConnection.child_user_id == owner_id,
        UserConnection.parent_user_id == viewer_id,
        UserConnection.status == ConnectionStatus.ACCEPTED,
    )
    if connection_id:
        stmt = stmt.where(UserConnection.id == connection_id)
    connection = db.execute(stmt).scalars().first()
    if not connection:
        raise NotFoundError("Connection not found or access denied")

    return notify(
        db,
        user_id=owner_id,
        type=NotificationType.VIEWED,
        language=language,
        related_id=connection.id,
        viewer_name=viewer.display_name,
    )


def list_owner_connections(db: Session, *, owner_id: str) -> list[UserConnection]:
    """Every connection to the owner's ledger, any status, newest first."""
    stmt = (
        select(UserConnection)
        .options(selectinload(UserConnection.parent_user))
        .where(UserConnection.child_user_id == owner_id)
        .order_by(UserConnection.created_at.desc())
    )
    return list(db.execute(stmt).scalars())


def list_shared_ledgers(db: Session, *, viewer_id: str) -> list[UserConnection]:
    stmt = (
        select(UserConnection)
        .options(selectinload(UserConnection.child_user))
        .where(
            UserConnection.parent_user_id == viewer_id,
            UserConnection.status == ConnectionStatus.ACCEPTED,
        )
        .order_by(UserConnection.created_at.desc())
    )
    return list(db.execute(stmt).scalars())
