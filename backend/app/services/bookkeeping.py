"""Accounts, memberships and transactions."""
import logging

from sqlalchemy.orm import Session

from app.database import transaction
from app.models.account import Account, AccountUser
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.bookkeeping import TransactionCreate
from app.services.authentication import get_user_by_email
from app.services.exceptions import (
    AccountNotFoundError,
    MemberNotFoundError,
    TransactionNotFoundError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


def provision_account(db: Session, user: User, name: str) -> Account:
    """Create an account owned by ``user`` plus the owner's membership row (flush only)."""
    account = Account(name=name, user_id=user.id)
    db.add(account)
    db.flush()

    membership = AccountUser(account_id=account.id, user_id=user.id)
    db.add(membership)
    db.flush()
    return account


def get_member_account_ids(db: Session, user: User) -> list[str]:
    rows = db.query(AccountUser.account_id).filter(AccountUser.user_id == user.id).all()
    return [row.account_id for row in rows]


def get_owned_accounts(db: Session, user: User) -> list[Account]:
    return db.query(Account).filter(Account.user_id == user.id).all()


def get_owned_account(db: Session, owner: User, account_id: str) -> Account:
    account = db.query(Account).filter(Account.id == account_id, Account.user_id == owner.id).first()
    if account is None:
        raise AccountNotFoundError()
    return account


def list_accounts(db: Session, user: User) -> list[Account]:
    """Accounts the user belongs to, owned or shared."""
    account_ids = get_member_account_ids(db, user)
    if not account_ids:
        return []
    return db.query(Account).filter(Account.id.in_(account_ids)).order_by(Account.name).all()


def create_account(db: Session, user: User, name: str) -> Account:
    with transaction(db):
        account = provision_account(db, user, name)
    logger.info(f"Account {account.id} of user {user.id} was created")
    return account


def purge_account(db: Session, account: Account) -> None:
    """Delete an account after its transactions and memberships (flush only)."""
    db.query(Transaction).filter(Transaction.account_id == account.id).delete(synchronize_session=False)
    db.query(AccountUser).filter(AccountUser.account_id == account.id).delete(synchronize_session=False)
    db.query(Account).filter(Account.id == account.id).delete(synchronize_session=False)


def delete_account(db: Session, user: User, account_id: str) -> None:
    """Delete an account owned by ``user``."""
    account = get_owned_account(db, user, account_id)

    with transaction(db):
        purge_account(db, account)
    logger.info(f"Account {account_id} of user {user.id} was deleted")


def create_transaction(db: Session, user: User, data: TransactionCreate) -> Transaction:
    if data.account_id not in get_member_account_ids(db, user):
        raise AccountNotFoundError()

    with transaction(db):
        txn = Transaction(
            account_id=data.account_id,
            category=data.category,
            value=data.value,
            date=data.date,
            to_whom=data.to_whom,
            comment=data.comment,
        )
        db.add(txn)
        db.flush()
    logger.info(f"Transaction {txn.id} was added to account {data.account_id}")
    return txn


def list_transactions(db: Session, user: User, account_id: str | None = None) -> list[Transaction]:
    """Transactions of the user's accounts, newest first."""
    account_ids = get_member_account_ids(db, user)
    if account_id is not None:
        account_ids = [a for a in account_ids if a == account_id]
    if not account_ids:
        return []

    return (
        db.query(Transaction)
        .filter(Transaction.account_id.in_(account_ids))
        .order_by(Transaction.date.desc(), Transaction.id)
        .all()
    )


def delete_transaction(db: Session, user: User, transaction_id: str) -> None:
    txn = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if txn is None or txn.account_id not in get_member_account_ids(db, user):
        raise TransactionNotFoundError()

    with transaction(db):
        db.delete(txn)
    logger.info(f"Transaction {transaction_id} was deleted")


def add_member(db: Session, owner: User, account_id: str, email: str) -> AccountUser:
    """Share an owned account with another user (a family member).

    Adding someone who is already a member returns the existing membership.
    """
    account = get_owned_account(db, owner, account_id)
    member = get_user_by_email(db, email)
    if member is None:
        raise UserNotFoundError()

    membership = (
        db.query(AccountUser)
        .filter(AccountUser.account_id == account.id, AccountUser.user_id == member.id)
        .first()
    )
    if membership is not None:
        return membership

    with transaction(db):
        membership = AccountUser(account_id=account.id, user_id=member.id)
        db.add(membership)
        db.flush()
    logger.info(f"User {member.id} was added to account {account.id}")
    return membership


def remove_member(db: Session, owner: User, account_id: str, user_id: str) -> None:
    """Stop sharing an owned account with a member. The owner cannot be removed."""
    account = get_owned_account(db, owner, account_id)
    if user_id == account.user_id:
        raise MemberNotFoundError()

    with transaction(db):
        deleted = (
            db.query(AccountUser)
            .filter(AccountUser.account_id == account.id, AccountUser.user_id == user_id)
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            raise MemberNotFoundError()
    logger.info(f"User {user_id} was removed from account {account.id}")


def list_members(db: Session, user: User, account_id: str) -> list[User]:
    """Users sharing an account the current user belongs to."""
    if account_id not in get_member_account_ids(db, user):
        raise AccountNotFoundError()
    return (
        db.query(User)
        .join(AccountUser, AccountUser.user_id == User.id)
        .filter(AccountUser.account_id == account_id)
        .order_by(User.email)
        .all()
    )
