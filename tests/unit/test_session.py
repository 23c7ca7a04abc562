"""Unit tests for the session context"""

import pytest

from invest_client.infrastructure.session import SessionContext, resolve_display_name


@pytest.mark.parametrize(
    "claims, expected",
    [
        ({"username": "ali"}, "ALI"),
        ({"name": " Sara Khan "}, "SARA KHAN"),
        ({"user": "omar"}, "OMAR"),
        ({"email": "ali@example.com"}, "INVESTOR"),
        ({"username": ""}, "INVESTOR"),
    ],
)
def test_resolve_display_name(token_factory, claims, expected):
    assert resolve_display_name(token_factory(**claims)) == expected


def test_resolve_display_name_undecodable_token():
    assert resolve_display_name("not-a-jwt") == "INVESTOR"


def test_init_and_clear(token_factory):
    session = SessionContext()
    assert not session.is_authenticated()
    assert session.current_user() == "anonymous"
    assert session.auth_headers() == {}

    token = token_factory(username="ali")
    session.init(token, refresh_token="refresh")

    assert session.is_authenticated()
    assert session.current_user() == "ALI"
    assert session.access_token == token
    assert session.refresh_token == "refresh"
    assert session.auth_headers() == {"Authorization": f"Bearer {token}"}

    session.clear()

    assert not session.is_authenticated()
    assert session.access_token is None
    assert session.refresh_token is None
    assert session.current_user() == "anonymous"


def test_init_requires_token():
    with pytest.raises(ValueError):
        SessionContext().init("")


def test_custom_identity_provider():
    session = SessionContext(identity_provider=lambda token: "TEST USER")
    session.init("opaque")
    assert session.current_user() == "TEST USER"
