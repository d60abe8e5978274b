"""Transactions API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_verified_user
from app.models.user import User
from app.schemas.bookkeeping import TransactionCreate, TransactionResponse
from app.services import bookkeeping
from app.services.exceptions import AccountNotFoundError, TransactionNotFoundError

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("/create", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction_data: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """Record a transaction in one of the current user's accounts."""
    try:
        return bookkeeping.create_transaction(db, current_user, transaction_data)
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("/get-all", response_model=list[TransactionResponse])
def list_transactions(
    account_id: str | None = Query(None, description="Filter by account"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """List transactions of the current user's accounts."""
    return bookkeeping.list_transactions(db, current_user, account_id=account_id)


@router.delete("/delete", response_class=PlainTextResponse)
def delete_transaction(
    id: str = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    """Delete a transaction."""
    try:
        bookkeeping.delete_transaction(db, current_user, id)
    except TransactionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return "Transaction is deleted!"
