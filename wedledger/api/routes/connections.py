from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.errors import ValidationError
from ...schemas.common import SuccessOut
from ...schemas.connection import (
    OwnerConnectionOut,
    OwnerConnectionsOut,
    PermissionUpdateIn,
    RevokeIn,
    SharedLedgerOut,
    SharedLedgersOut,
    ViewIn,
)
from ...services import connection_service
from ..deps import get_db

router = APIRouter()


@router.get("/my-connections", response_model=OwnerConnectionsOut)
def my_connections(child_user_id: str = Query("", alias="childUserId"), db: Session = Depends(get_db)):
    if not child_user_id:
        raise ValidationError("childUserId is required")
    rows = connection_service.list_owner_connections(db, owner_id=child_user_id)
    return OwnerConnectionsOut(connections=[OwnerConnectionOut.model_validate(r) for r in rows])


@router.get("/shared", response_model=SharedLedgersOut)
def shared_ledgers(parent_user_id: str = Query("", alias="parentUserId"), db: Session = Depends(get_db)):
    if not parent_user_id:
        raise ValidationError("parentUserId is required")
    rows = connection_service.list_shared_ledgers(db, viewer_id=parent_user_id)
    return SharedLedgersOut(connections=[SharedLedgerOut.model_validate(r) for r in rows])


@router.post("/view", response_model=SuccessOut)
def viewed(payload: ViewIn, db: Session = Depends(get_db)):
    connection_service.notify_viewed(
        db,
        owner_id=payload.child_user_id,
        viewer_id=payload.parent_user_id,
        connection_id=payload.connection_id,
        language=payload.language,
    )
    return SuccessOut()


@router.patch("/{connection_id}", response_model=SuccessOut)
def change_permission(connection_id: str, payload: PermissionUpdateIn, db: Session = Depends(get_db)):
    connection_service.update_permission(
        db,
        connection_id=connection_id,
        viewer_id=payload.user_id,
        permission=payload.permission,
        language=payload.language,
    )
    return SuccessOut()


@router.delete("/{connection_id}", response_model=SuccessOut)
def revoke(connection_id: str, payload: RevokeIn, db: Session = Depends(get_db)):
    connection_service.revoke_connection(
        db,
        connection_id=connection_id,
        user_id=payload.user_id,
        role=payload.role,
        language=payload.language,
    )
    return SuccessOut()
