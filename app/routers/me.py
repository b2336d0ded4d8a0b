import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.schemas.user import UserRead, UserUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=UserRead)
def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's profile."""
    return current_user


@router.patch("", response_model=UserRead)
def update_me(
    update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update the authenticated user's profile (partial).
    Only fields present in the body are changed; email and username stay unique.
    """
    changes = update.model_dump(exclude_unset=True)
    if changes.get("email") and changes["email"] != current_user.email:
        taken = db.query(User).filter(User.email == changes["email"], User.id != current_user.id).first()
        if taken:
            raise HTTPException(status_code=400, detail="Email already exists")
    if changes.get("username") and changes["username"] != current_user.username:
        taken = db.query(User).filter(User.username == changes["username"], User.id != current_user.id).first()
        if taken:
            raise HTTPException(status_code=400, detail="Username already exists")

    for key, value in changes.items():
        if value is None and key != "phone_number":
            continue
        setattr(current_user, key, value)

    db.commit()
    db.refresh(current_user)
    logger.info(f"Updated profile for user id={current_user.id}: fields={sorted(changes)}")
    return current_user
