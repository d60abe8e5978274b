"""User API endpoints."""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_email_sender, get_verified_user
from app.models.user import User
from app.schemas.user import ChangePasswordRequest, UserResponse
from app.services import users as user_service
from app.services.email_sender import EmailSender
from app.services.email_templates import NEW_PASSWORD_SUBJECT, build_new_password_email
from app.services.exceptions import (
    EmailNotVerifiedError,
    InvalidEmailError,
    UserNotFoundError,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/get", response_model=UserResponse)
def get_user(current_user: User = Depends(get_verified_user)):
    """Get the current user."""
    return current_user


@router.delete("/delete", response_class=PlainTextResponse)
def delete_user(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """Delete the current user together with their tokens, accounts and transactions."""
    user_service.delete_user(db, current_user)
    return "User is deleted!"


@router.patch("/change-password", response_class=PlainTextResponse)
def change_password(
    password_data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """Change the current user's password."""
    user_service.change_password(db, current_user, password_data.new_password)
    return "Password was changed."


@router.patch("/reset-password", response_class=PlainTextResponse)
def reset_password(
    background_tasks: BackgroundTasks,
    email: str = Query(...),
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    """Replace a forgotten password with a generated one and email it."""
    try:
        user, new_password = user_service.reset_password(db, email)
    except (InvalidEmailError, UserNotFoundError, EmailNotVerifiedError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    background_tasks.add_task(
        sender.send,
        user.email,
        NEW_PASSWORD_SUBJECT,
        build_new_password_email(new_password),
    )
    return "Password is changed. Check your email!"
