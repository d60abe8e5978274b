"""Account API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_verified_user
from app.models.user import User
from app.schemas.bookkeeping import AccountCreate, AccountResponse, MemberAdd, MemberResponse
from app.services import bookkeeping
from app.services.exceptions import (
    AccountNotFoundError,
    MemberNotFoundError,
    UserNotFoundError,
)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/get-all", response_model=list[AccountResponse])
def get_accounts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """List accounts the current user owns or shares."""
    return bookkeeping.list_accounts(db, current_user)


@router.post("/create", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    account_data: AccountCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """Create an account owned by the current user."""
    return bookkeeping.create_account(db, current_user, account_data.name)


@router.delete("/delete", response_class=PlainTextResponse)
def delete_account(
    id: str = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """Delete an owned account with its transactions."""
    try:
        bookkeeping.delete_account(db, current_user, id)
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return "Account is deleted!"


@router.get("/members", response_model=list[MemberResponse])
def get_members(
    id: str = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """List the users sharing an account."""
    try:
        return bookkeeping.list_members(db, current_user, id)
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.post("/add-member", response_class=PlainTextResponse, status_code=status.HTTP_201_CREATED)
def add_member(
    member_data: MemberAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """Share an owned account with a family member."""
    try:
        bookkeeping.add_member(db, current_user, member_data.account_id, member_data.email)
    except (AccountNotFoundError, UserNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return "User is added to the account!"


@router.delete("/remove-member", response_class=PlainTextResponse)
def remove_member(
    id: str = Query(...),
    user_id: str = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """Stop sharing an owned account with a member."""
    try:
        bookkeeping.remove_member(db, current_user, id, user_id)
    except (AccountNotFoundError, MemberNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return "User is removed from the account!"
