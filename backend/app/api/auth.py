"""Authentication API endpoints."""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_email_sender
from app.config import get_settings
from app.database import transaction
from app.models.confirmation_token import ConfirmationToken
from app.models.user import User
from app.schemas.auth import RegisterAndLoginRequest, TokenResponse
from app.services import confirmation_tokens
from app.services.authentication import (
    LoginOutcome,
    authenticate,
    issue_session_token,
    refresh_session_token,
)
from app.services.confirmation_tokens import ConfirmOutcome, ResendOutcome
from app.services.email_sender import EmailSender
from app.services.email_templates import (
    CONFIRMATION_SUBJECT,
    build_confirmation_email,
    build_confirmation_link,
)
from app.services.exceptions import (
    EmailAlreadyRegisteredError,
    EmailNotVerifiedError,
    InvalidEmailError,
    PasswordTooLongError,
)
from app.services.registration import register_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()

CONFIRM_FAILURES = {
    ConfirmOutcome.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Invalid confirmation token!"),
    ConfirmOutcome.ALREADY_CONFIRMED: (status.HTTP_409_CONFLICT, "Email is already confirmed!"),
    ConfirmOutcome.EXPIRED: (
        status.HTTP_410_GONE,
        "Confirmation token has expired! Please, login and request a new confirmation email!",
    ),
}


def send_confirmation_email(sender: EmailSender, email: str, token: str) -> None:
    """Dispatch a confirmation link. Runs after the token has been committed."""
    link = build_confirmation_link(settings.confirmation_link_base, token)
    html = build_confirmation_email(link, settings.confirmation_token_expire_minutes)
    if not sender.send(email, CONFIRMATION_SUBJECT, html):
        logger.warning("Confirmation email was not delivered; the user can request a new one")


def invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Incorrect user data!",
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_class=PlainTextResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: RegisterAndLoginRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    """Register a new user and email a confirmation link."""
    try:
        user, token = register_user(db, user_data.email, user_data.password)
    except (InvalidEmailError, EmailAlreadyRegisteredError, PasswordTooLongError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    background_tasks.add_task(send_confirmation_email, sender, user.email, token.token)
    return "User was created! Please, confirm the user email address!"


@router.post("/login", response_model=TokenResponse)
def login(user_data: RegisterAndLoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a session token."""
    outcome, user = authenticate(db, user_data.email, user_data.password)

    if outcome is LoginOutcome.INVALID_CREDENTIALS:
        raise invalid_credentials()
    if outcome is LoginOutcome.UNVERIFIED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email is not verified!",
        )

    logger.info(f"User {user.id} successfully logged in")
    return TokenResponse(token=issue_session_token(user.email))


@router.get("/confirm", response_class=PlainTextResponse)
def confirm(token: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    """Confirm an email address using the token from the confirmation link."""
    with transaction(db):
        outcome = confirmation_tokens.confirm_token(db, token)

    if outcome is not ConfirmOutcome.CONFIRMED:
        status_code, detail = CONFIRM_FAILURES[outcome]
        raise HTTPException(status_code=status_code, detail=detail)

    return "User email is confirmed. You can close this tab!"


@router.get("/refresh", response_model=TokenResponse)
def refresh(current_user: User = Depends(get_current_user)):
    """Issue a new session token to a verified user."""
    try:
        token = refresh_session_token(current_user)
    except EmailNotVerifiedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    return TokenResponse(token=token)


@router.post("/send-confirmation-email", response_class=PlainTextResponse)
def resend_confirmation_email(
    user_data: RegisterAndLoginRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    """Send a new confirmation link to an unverified user, at most once per resend window."""
    outcome, user = authenticate(db, user_data.email, user_data.password)

    if outcome is LoginOutcome.INVALID_CREDENTIALS:
        raise invalid_credentials()
    if outcome is LoginOutcome.AUTHENTICATED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User email is already verified!",
        )

    with transaction(db):
        result = confirmation_tokens.resend_if_needed(db, user)

    if result.outcome is ResendOutcome.ALREADY_SENT:
        return PlainTextResponse(
            "Confirmation email is already sent!",
            status_code=status.HTTP_202_ACCEPTED,
        )

    token: ConfirmationToken = result.token
    background_tasks.add_task(send_confirmation_email, sender, user.email, token.token)
    return PlainTextResponse(
        "Email was sent. Confirm your email address!",
        status_code=status.HTTP_201_CREATED,
    )
