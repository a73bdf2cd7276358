"""Unit tests for arangodriver.connection.auth module."""

import base64
import time

import orjson
import pytest

from arangodriver.connection.auth import (
    HeaderAuthentication,
    JWTAuthentication,
    bearer_authentication,
    parse_jwt_expiry,
)
from arangodriver.errors import ArangoError


def make_token(exp: float) -> str:
    payload = base64.urlsafe_b64encode(orjson.dumps({"exp": exp})).rstrip(b"=").decode()
    return f"eyJhbGciOiJIUzI1NiJ9.{payload}.signature"


class TestParseJwtExpiry:
    """Tests for parse_jwt_expiry."""

    def test_reads_exp_claim(self) -> None:
        assert parse_jwt_expiry(make_token(1700000000)) == 1700000000.0

    @pytest.mark.parametrize("token", ["not-a-jwt", "a.!!!.c", "a.e30.c"])
    def test_invalid_tokens(self, token: str) -> None:
        with pytest.raises(ValueError):
            parse_jwt_expiry(token)


class TestHeaderAuthentication:
    """Tests for fixed header authentication."""

    def test_bearer_header(self, fake_arango) -> None:
        fake_arango.add("GET", "/_api/version", json={})
        connection = fake_arango.connection(auth=bearer_authentication("tok"))
        connection.do(connection.new_request("GET", "_api/version"))
        assert fake_arango.last_request.headers["authorization"] == "bearer tok"

    def test_custom_header(self, fake_arango) -> None:
        fake_arango.add("GET", "/_api/version", json={})
        connection = fake_arango.connection(auth=HeaderAuthentication("X-Api-Key", "k"))
        connection.do(connection.new_request("GET", "_api/version"))
        assert fake_arango.last_request.headers["x-api-key"] == "k"

    def test_set_authentication_at_runtime(self, fake_arango) -> None:
        fake_arango.add("GET", "/_api/version", json={})
        connection = fake_arango.connection()
        connection.set_authentication(bearer_authentication("late"))
        connection.do(connection.new_request("GET", "_api/version"))
        assert fake_arango.last_request.headers["authorization"] == "bearer late"


class TestJWTAuthentication:
    """Tests for the JWT login flow."""

    def test_logs_in_before_first_request(self, fake_arango) -> None:
        token = make_token(time.time() + 3600)
        fake_arango.add("POST", "/_open/auth", json={"jwt": token})
        fake_arango.add("GET", "/_api/version", json={"version": "3.12.0"})
        auth = JWTAuthentication("root", "secret")
        connection = fake_arango.connection(auth=auth)

        response = connection.do(connection.new_request("GET", "_api/version"), (200,))

        assert response.json() == {"version": "3.12.0"}
        login = fake_arango.sent("POST", "/_open/auth")
        assert len(login) == 1
        assert fake_arango.body(login[0]) == {"username": "root", "password": "secret"}
        assert fake_arango.last_request.headers["authorization"] == f"bearer {token}"
        assert auth.token == token

    def test_token_is_reused(self, fake_arango) -> None:
        fake_arango.add("POST", "/_open/auth", json={"jwt": make_token(time.time() + 3600)})
        fake_arango.add("GET", "/_api/version", json={})
        connection = fake_arango.connection(auth=JWTAuthentication("root"))
        for _ in range(3):
            connection.do(connection.new_request("GET", "_api/version"))
        assert len(fake_arango.sent("POST", "/_open/auth")) == 1

    def test_expired_token_is_refreshed(self, fake_arango) -> None:
        fake_arango.add("POST", "/_open/auth", json={"jwt": make_token(time.time() - 10)})
        fake_arango.add("POST", "/_open/auth", json={"jwt": make_token(time.time() + 3600)})
        fake_arango.add("GET", "/_api/version", json={})
        connection = fake_arango.connection(auth=JWTAuthentication("root"))
        connection.do(connection.new_request("GET", "_api/version"))
        connection.do(connection.new_request("GET", "_api/version"))
        assert len(fake_arango.sent("POST", "/_open/auth")) == 2

    def test_unauthorized_triggers_single_refresh(self, fake_arango) -> None:
        first = make_token(time.time() + 3600)
        second = make_token(time.time() + 7200)
        fake_arango.add("POST", "/_open/auth", json={"jwt": first})
        fake_arango.add("POST", "/_open/auth", json={"jwt": second})
        fake_arango.add_error("GET", "/_api/version", 401)
        fake_arango.add("GET", "/_api/version", json={})
        connection = fake_arango.connection(auth=JWTAuthentication("root"))

        response = connection.do(connection.new_request("GET", "_api/version"))

        assert response.code == 200
        assert fake_arango.last_request.headers["authorization"] == f"bearer {second}"

    def test_failed_login_raises(self, fake_arango) -> None:
        fake_arango.add_error("POST", "/_open/auth", 401, message="Wrong credentials")
        connection = fake_arango.connection(auth=JWTAuthentication("root", "wrong"))
        with pytest.raises(ArangoError, match="Wrong credentials"):
            connection.do(connection.new_request("GET", "_api/version"))
