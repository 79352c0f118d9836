from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...models.user import User
from ...schemas.user import ProfileOut, ProfileUpdate, UserOut
from ...services.user_service import update_profile
from ..deps import get_db, get_current_user

router = APIRouter()


@router.get("/me", response_model=ProfileOut)
def me(current: User = Depends(get_current_user)):
    return ProfileOut(user=UserOut.model_validate(current))


@router.patch("/me", response_model=ProfileOut)
def update_me(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    user = update_profile(
        db,
        user=current,
        firstname=payload.firstname,
        lastname=payload.lastname,
        birthdate=payload.birthdate,
    )
    return ProfileOut(user=UserOut.model_validate(user))
