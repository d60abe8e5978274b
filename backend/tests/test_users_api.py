from datetime import date

from conftest import PASSWORD, login, register

from app.models.account import Account, AccountUser
from app.models.confirmation_token import ConfirmationToken
from app.models.transaction import Transaction
from app.models.user import User
from app.services import users as user_service


def test_get_user_returns_profile_without_password_fields(client, verified_user):
    email, headers = verified_user()

    response = client.get("/api/v1/users/get", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == email
    assert data["is_verified"] is True
    assert data["id"]
    assert data["registration_date"]
    assert not any("password" in key for key in data)


def test_gated_endpoints_refuse_unverified_users(client, unverified_headers):
    headers = unverified_headers()

    assert client.get("/api/v1/users/get", headers=headers).status_code == 403
    assert client.delete("/api/v1/users/delete", headers=headers).status_code == 403
    assert client.patch(
        "/api/v1/users/change-password",
        json={"newPassword": "BrandNew123!"},
        headers=headers,
    ).status_code == 403


def test_change_password(client, verified_user):
    email, headers = verified_user()

    response = client.patch(
        "/api/v1/users/change-password",
        json={"newPassword": "BrandNew123!"},
        headers=headers,
    )

    assert response.status_code == 200
    assert login(client, email).status_code == 401
    assert login(client, email, "BrandNew123!").status_code == 200


def test_reset_password_emails_generated_password(client, verified_user, outbox, monkeypatch):
    email, _ = verified_user()
    monkeypatch.setattr(user_service, "generate_password", lambda: "Generated42")

    response = client.patch("/api/v1/users/reset-password", params={"email": email})

    assert response.status_code == 200
    message = outbox.to(email)[-1]
    assert message.subject == "New password"
    assert "Generated42" in message.html_content
    assert login(client, email).status_code == 401
    assert login(client, email, "Generated42").status_code == 200


def test_reset_password_rejections(client, outbox):
    register(client, "pending@example.com")
    sent_before = len(outbox.sent)

    invalid = client.patch("/api/v1/users/reset-password", params={"email": "bad-email"})
    unknown = client.patch("/api/v1/users/reset-password", params={"email": "nobody@example.com"})
    unverified = client.patch("/api/v1/users/reset-password", params={"email": "pending@example.com"})

    assert invalid.status_code == 400
    assert invalid.json()["detail"] == "Invalid email format!"
    assert unknown.status_code == 400
    assert unknown.json()["detail"] == "No user with this email!"
    assert unverified.status_code == 400
    assert unverified.json()["detail"] == "User email is not verified!"
    assert len(outbox.sent) == sent_before


def test_delete_user_removes_all_dependent_rows(client, session_factory, verified_user):
    email, headers = verified_user("owner@example.com")
    other_email, other_headers = verified_user("family@example.com")

    second = client.post("/api/v1/accounts/create", json={"name": "Savings"}, headers=headers)
    assert second.status_code == 201
    accounts = client.get("/api/v1/accounts/get-all", headers=headers).json()
    assert len(accounts) == 2
    for account in accounts:
        for value in (-12.5, 100.0):
            created = client.post(
                "/api/v1/transactions/create",
                json={
                    "account_id": account["id"],
                    "category": "Food",
                    "value": value,
                    "date": date(2026, 3, 1).isoformat(),
                },
                headers=headers,
            )
            assert created.status_code == 201

    # The other user shares their wallet with the owner.
    other_account_id = client.get("/api/v1/accounts/get-all", headers=other_headers).json()[0]["id"]
    shared = client.post(
        "/api/v1/accounts/add-member",
        json={"account_id": other_account_id, "email": email},
        headers=other_headers,
    )
    assert shared.status_code == 201
    with session_factory() as session:
        owner_id = session.query(User).filter(User.email == email).one().id
        assert session.query(AccountUser).filter(AccountUser.user_id == owner_id).count() == 3
    owned_ids = [account["id"] for account in accounts]

    response = client.delete("/api/v1/users/delete", headers=headers)

    assert response.status_code == 200
    with session_factory() as session:
        assert session.query(User).filter(User.id == owner_id).count() == 0
        assert session.query(ConfirmationToken).filter(ConfirmationToken.user_id == owner_id).count() == 0
        assert session.query(Account).filter(Account.id.in_(owned_ids)).count() == 0
        assert session.query(AccountUser).filter(AccountUser.account_id.in_(owned_ids)).count() == 0
        assert session.query(AccountUser).filter(AccountUser.user_id == owner_id).count() == 0
        assert session.query(Transaction).filter(Transaction.account_id.in_(owned_ids)).count() == 0

        # The other user's data is untouched.
        assert session.query(User).filter(User.email == other_email).count() == 1
        assert session.query(Account).filter(Account.id == other_account_id).count() == 1
        assert session.query(AccountUser).filter(AccountUser.account_id == other_account_id).count() == 1

    assert client.get("/api/v1/users/get", headers=headers).status_code == 401
    assert login(client, email, PASSWORD).status_code == 401
