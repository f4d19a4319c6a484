import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import DUPLICATE_EMAIL_MESSAGE, UserValidationError
from app.models import User
from app.schemas import UserPayload, UserResponse
from app.services import user_service
from app.validation import validate_user

router = APIRouter(prefix="/api/users", tags=["users"])


def _validated_user(payload: UserPayload) -> User:
    """Run the field rules and build a transient User from *payload*."""
    errors = validate_user(payload)
    if errors:
        raise UserValidationError(errors)
    return User(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        date_of_birth=payload.date_of_birth,
        phone_number=payload.phone_number,
    )


@router.post("", status_code=201, response_model=UserResponse)
async def create_user(
    payload: UserPayload,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    user = _validated_user(payload)
    if not await user_service.is_email_unique(db, user.email):
        raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL_MESSAGE)

    created = await user_service.create_user(db, user)
    response.headers["Location"] = str(request.url_for("get_user", user_id=str(created.id)))
    return created

@router.get("", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await user_service.get_users(db)

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    if user is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return user

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: uuid.UUID,
    payload: UserPayload,
    db: AsyncSession = Depends(get_db),
):
    user = _validated_user(payload)

    # The email may only be shared with the user being updated.
    same_email = await user_service.list_users_with_same_email(db, user.email)
    if any(other.id != user_id for other in same_email):
        raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL_MESSAGE)

    updated = await user_service.update_user(db, user_id, user)
    if updated is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return updated

@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    deleted = await user_service.delete_user(db, user_id)
    if not deleted:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
