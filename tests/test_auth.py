"""Tests for sign up, sign in, TOTP and sign out."""

import pyotp

from conftest import ME, SIGN_IN, SIGN_UP, error_messages, execute
from shipyard.models import Organization, User


ONBOARD_TOTP = "query { me { onboardTOTP } }"

ENABLE_TOTP = """
mutation Enable($secret: String!, $token: String!) {
    enableTOTP(secret: $secret, token: $token) { ok }
}
"""

EXCHANGE_TOTP = """
mutation Exchange($token: String!) {
    exchangeTOTP(token: $token) { ok }
}
"""

DISABLE_TOTP = """
mutation Disable($password: String!) {
    disableTOTP(password: $password) { ok }
}
"""

SIGN_OUT = "mutation { signOut { ok } }"


def enable_totp(client) -> str:
    secret = execute(client, ONBOARD_TOTP)["data"]["me"]["onboardTOTP"]
    result = execute(client, ENABLE_TOTP, secret=secret, token=pyotp.TOTP(secret).now())
    assert result["data"]["enableTOTP"]["ok"] is True
    return secret


class TestSignUp:

    def test_sign_up_signs_in(self, client, sign_up):
        me = sign_up(client)

        assert me["name"] == "Ada Lovelace"
        assert me["email"] == "ada@example.com"
        assert me["hasTOTP"] is False

    def test_sign_up_creates_personal_organization(self, client, sign_up, db):
        sign_up(client)

        user = db.query(User).filter(User.email == "ada@example.com").one()
        assert user.personal_organization.name == "Personal"
        assert user.personal_organization.is_personal is True
        assert [member.id for member in user.personal_organization.users] == [user.id]
        assert user.hashed_password != "correct-horse"

    def test_sign_up_stores_email_lowercased(self, client, sign_up):
        me = sign_up(client, email="Ada@Example.COM")
        assert me["email"] == "ada@example.com"

    def test_duplicate_email_rejected(self, client, make_client, sign_up, db):
        sign_up(client)

        result = execute(
            make_client(), SIGN_UP,
            name="Someone Else", email="ada@example.com", password="another-password",
        )

        assert error_messages(result) == ["An account with this email already exists."]
        assert result["errors"][0]["extensions"]["code"] == "BAD_USER_INPUT"
        assert db.query(Organization).count() == 1

    def test_short_password_rejected(self, graphql, db):
        result = graphql(SIGN_UP, name="Ada", email="ada@example.com", password="short")

        assert result["data"] is None
        assert error_messages(result)[0].startswith("Invalid password")
        assert db.query(User).count() == 0

    def test_invalid_email_rejected(self, graphql):
        result = graphql(SIGN_UP, name="Ada", email="not-an-email", password="correct-horse")
        assert error_messages(result)[0].startswith("Invalid email")


class TestSignIn:

    def test_sign_in(self, user, make_client):
        other = make_client()
        result = execute(other, SIGN_IN, email="ada@example.com", password="correct-horse")

        assert result["data"]["signIn"] == {"ok": True, "requiresTOTP": False}
        assert execute(other, ME)["data"]["me"]["id"] == user["id"]

    def test_sign_in_is_case_insensitive_on_email(self, user, make_client):
        result = execute(make_client(), SIGN_IN, email="ADA@example.com", password="correct-horse")
        assert result["data"]["signIn"]["ok"] is True

    def test_unknown_email(self, graphql, db_setup):
        result = graphql(SIGN_IN, email="nobody@example.com", password="correct-horse")

        assert result["data"] is None
        assert error_messages(result) == ["No user found."]
        assert result["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"

    def test_wrong_password(self, user, make_client):
        other = make_client()
        result = execute(other, SIGN_IN, email="ada@example.com", password="wrong-password")

        assert error_messages(result) == ["Invalid password."]
        assert error_messages(execute(other, ME)) == [
            "Access denied! You need to be authorized to perform this action."
        ]

    def test_sign_in_records_last_login(self, user, make_client, db):
        execute(make_client(), SIGN_IN, email="ada@example.com", password="correct-horse")

        assert db.query(User).one().last_login_at is not None


class TestMe:

    def test_requires_session(self, graphql, db_setup):
        result = graphql(ME)

        assert result["data"] is None
        assert result["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"

    def test_bearer_token(self, user, make_client):
        response = make_client().post(
            "/graphql",
            json={"query": SIGN_IN, "variables": {"email": "ada@example.com", "password": "correct-horse"}},
        )
        token = response.cookies["shipyard_session"]

        result = make_client().post(
            "/graphql",
            json={"query": ME},
            headers={"Authorization": f"Bearer {token}"},
        ).json()

        assert result["data"]["me"]["id"] == user["id"]

    def test_tampered_token(self, user, make_client):
        result = make_client().post(
            "/graphql",
            json={"query": ME},
            headers={"Authorization": "Bearer not.a.token"},
        ).json()

        assert result["data"] is None

    def test_sign_out(self, user, client):
        assert execute(client, SIGN_OUT)["data"]["signOut"]["ok"] is True
        assert execute(client, ME)["data"] is None


class TestTOTP:

    def test_onboard_returns_fresh_secret(self, user, client):
        first = execute(client, ONBOARD_TOTP)["data"]["me"]["onboardTOTP"]
        second = execute(client, ONBOARD_TOTP)["data"]["me"]["onboardTOTP"]

        assert first != second
        assert len(first) >= 16

    def test_onboard_fails_once_enabled(self, user, client):
        enable_totp(client)

        result = execute(client, ONBOARD_TOTP)

        assert error_messages(result) == ["TOTP Already Enabled"]

    def test_enable_rejects_wrong_code(self, user, client):
        secret = execute(client, ONBOARD_TOTP)["data"]["me"]["onboardTOTP"]
        wrong = "000000" if pyotp.TOTP(secret).now() != "000000" else "111111"

        result = execute(client, ENABLE_TOTP, secret=secret, token=wrong)

        assert error_messages(result) == ["Invalid TOTP token."]
        assert execute(client, ME)["data"]["me"]["hasTOTP"] is False

    def test_enable_rejects_malformed_secret(self, user, client):
        for secret in ["not-a-secret", "A" * 100]:
            result = execute(client, ENABLE_TOTP, secret=secret, token="123456")

            assert error_messages(result)[0].startswith("Invalid secret")
            assert result["errors"][0]["extensions"]["code"] == "BAD_USER_INPUT"

        assert execute(client, ME)["data"]["me"]["hasTOTP"] is False

    def test_sign_in_requires_totp(self, user, client, make_client):
        secret = enable_totp(client)
        other = make_client()

        result = execute(other, SIGN_IN, email="ada@example.com", password="correct-horse")
        assert result["data"]["signIn"] == {"ok": True, "requiresTOTP": True}

        # Half way through sign in is not signed in
        assert execute(other, ME)["data"] is None

        result = execute(other, EXCHANGE_TOTP, token=pyotp.TOTP(secret).now())
        assert result["data"]["exchangeTOTP"]["ok"] is True
        assert execute(other, ME)["data"]["me"]["hasTOTP"] is True

    def test_exchange_rejects_wrong_code(self, user, client, make_client):
        secret = enable_totp(client)
        other = make_client()
        execute(other, SIGN_IN, email="ada@example.com", password="correct-horse")
        wrong = "000000" if pyotp.TOTP(secret).now() != "000000" else "111111"

        result = execute(other, EXCHANGE_TOTP, token=wrong)

        assert error_messages(result) == ["Invalid TOTP token."]
        assert execute(other, ME)["data"] is None

    def test_exchange_without_started_sign_in(self, graphql, db_setup):
        result = graphql(EXCHANGE_TOTP, token="123456")
        assert error_messages(result) == ["Did not find a started sign in."]

    def test_disable(self, user, client):
        enable_totp(client)

        assert error_messages(execute(client, DISABLE_TOTP, password="wrong-password")) == ["Invalid password."]

        result = execute(client, DISABLE_TOTP, password="correct-horse")
        assert result["data"]["disableTOTP"]["ok"] is True
        assert execute(client, ME)["data"]["me"]["hasTOTP"] is False
