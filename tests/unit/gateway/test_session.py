"""Tests for SessionManager in isolation"""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from topstepx.domain.models import Credentials
from topstepx.infrastructure.gateway import SessionManager, SessionState
from topstepx.shared.exceptions import AuthenticationError, TransportError

LOGIN = "/Auth/loginKey"
VALIDATE = "/Auth/validate"


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "user_name,api_key",
    [("", "key"), ("user", ""), ("", "")],
)
async def test_authenticate_requires_credentials(
    fake_transport, user_name, api_key
):
    """Missing credentials fail before any request is made"""
    manager = SessionManager(Credentials(user_name, api_key), fake_transport)

    with pytest.raises(AuthenticationError) as exc_info:
        await manager.authenticate()

    assert "userName and apiKey are required" in str(exc_info.value)
    assert fake_transport.calls == []
    assert manager.is_authenticated is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_authenticate_success_stores_token(
    session, fake_transport, load_fixture, credentials
):
    """Successful login stores the token, sets the bearer and schedules validation"""
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))

    token = await session.authenticate()

    assert token == "eyJhbGciOiJIUzI1NiJ9.session-one"
    assert session.token == token
    assert session.is_authenticated is True
    assert session.state is SessionState.AUTHENTICATED
    assert session.expires_at - session.issued_at == timedelta(hours=24)
    assert fake_transport.authorization == f"Bearer {token}"
    assert session.has_validation_timer is True
    assert fake_transport.calls == [
        (
            "POST",
            LOGIN,
            {"userName": credentials.user_name, "apiKey": credentials.api_key},
        )
    ]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_authenticate_rejected_carries_server_error(
    session, fake_transport, load_fixture
):
    """A failure envelope raises AuthenticationError with code and message"""
    fake_transport.queue(LOGIN, load_fixture("login_rejected.json"))

    with pytest.raises(AuthenticationError) as exc_info:
        await session.authenticate()

    assert exc_info.value.error_code == 3
    assert exc_info.value.error_message == "Invalid API key"
    assert "(Code: 3)" in str(exc_info.value)
    assert session.token is None
    assert session.is_authenticated is False
    assert session.state is SessionState.UNAUTHENTICATED
    assert fake_transport.authorization is None
    assert session.has_validation_timer is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_authenticate_success_without_token_is_rejected(
    session, fake_transport, load_fixture
):
    """authenticated implies a token, so an empty token is a failure"""
    body = load_fixture("login_success.json")
    body["token"] = ""
    fake_transport.queue(LOGIN, body)

    with pytest.raises(AuthenticationError):
        await session.authenticate()

    assert session.is_authenticated is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_authenticate_transport_error_becomes_authentication_error(
    session, fake_transport
):
    """HTTP-level failures during login surface as AuthenticationError"""
    transport_error = TransportError(
        "Request failed with status code 401",
        status=401,
        data={"success": False, "errorCode": 3, "errorMessage": "Bad key"},
    )
    fake_transport.queue(LOGIN, transport_error)

    with pytest.raises(AuthenticationError) as exc_info:
        await session.authenticate()

    assert exc_info.value.__cause__ is transport_error
    assert exc_info.value.error_code == 3
    assert session.is_authenticated is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_login_clears_previous_session(
    session, fake_transport, load_fixture
):
    """Unauthenticated is re-enterable: a failed re-login discards the old token"""
    fake_transport.queue(
        LOGIN,
        load_fixture("login_success.json"),
        load_fixture("login_rejected.json"),
    )
    await session.authenticate()

    with pytest.raises(AuthenticationError):
        await session.authenticate()

    assert session.token is None
    assert fake_transport.authorization is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_valid_authenticates_when_unauthenticated(
    session, fake_transport, load_fixture
):
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))

    await session.ensure_valid()

    assert session.is_authenticated is True
    assert len(fake_transport.calls_to(LOGIN)) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_valid_is_silent_until_final_hour(
    session, fake_transport, load_fixture
):
    """No requests before expiresAt - 1h, exactly one validation at it"""
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))
    fake_transport.queue(VALIDATE, load_fixture("validate_success.json"))

    with freeze_time("2025-01-02 12:00:00", real_asyncio=True) as frozen:
        await session.authenticate()
        assert len(fake_transport.calls) == 1

        frozen.tick(timedelta(hours=22, minutes=59))
        for _ in range(5):
            await session.ensure_valid()
        assert len(fake_transport.calls) == 1

        frozen.tick(timedelta(minutes=1))
        await session.ensure_valid()

    assert len(fake_transport.calls_to(VALIDATE)) == 1
    assert len(fake_transport.calls_to(LOGIN)) == 1
    assert session.is_authenticated is True


@pytest.mark.unit
def test_is_expiring_within_final_hour(credentials, fake_transport):
    manager = SessionManager(credentials, fake_transport)
    assert manager.is_expiring() is False

    with freeze_time("2025-01-02 12:00:00") as frozen:
        manager._expires_at = datetime(2025, 1, 3, 12, 0, tzinfo=UTC)
        frozen.tick(timedelta(hours=22))
        assert manager.is_expiring() is False
        frozen.tick(timedelta(hours=1))
        assert manager.is_expiring() is True
        frozen.tick(timedelta(hours=2))
        assert manager.is_expiring() is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validate_success_leaves_session_unchanged(
    session, fake_transport, load_fixture
):
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))
    fake_transport.queue(VALIDATE, load_fixture("validate_success.json"))
    await session.authenticate()
    token, expires_at = session.token, session.expires_at

    assert await session.validate() is True

    assert session.token == token
    assert session.expires_at == expires_at
    assert session.state is SessionState.AUTHENTICATED
    assert fake_transport.calls_to(VALIDATE) == [("POST", VALIDATE, {})]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validate_rejection_reauthenticates(
    session, fake_transport, load_fixture
):
    """A rejected validation is repaired with a fresh login, not raised"""
    second_login = load_fixture("login_success.json")
    second_login["token"] = "session-two"
    fake_transport.queue(
        LOGIN, load_fixture("login_success.json"), second_login
    )
    fake_transport.queue(VALIDATE, load_fixture("validate_rejected.json"))
    await session.authenticate()

    assert await session.validate() is True

    assert session.token == "session-two"
    assert fake_transport.authorization == "Bearer session-two"
    assert len(fake_transport.calls_to(LOGIN)) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validate_transport_error_reauthenticates(
    session, fake_transport, load_fixture
):
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))
    fake_transport.queue(VALIDATE, TransportError("Network error: reset"))
    await session.authenticate()

    assert await session.validate() is True

    assert session.is_authenticated is True
    assert len(fake_transport.calls_to(LOGIN)) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validate_raises_only_when_reauthentication_fails(
    session, fake_transport, load_fixture
):
    fake_transport.queue(
        LOGIN,
        load_fixture("login_success.json"),
        load_fixture("login_rejected.json"),
    )
    fake_transport.queue(VALIDATE, load_fixture("validate_rejected.json"))
    await session.authenticate()

    with pytest.raises(AuthenticationError) as exc_info:
        await session.validate()

    assert exc_info.value.error_code == 3
    assert session.is_authenticated is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_reauthentication_replaces_validation_timer(
    session, fake_transport, load_fixture
):
    """Only one validation task is ever active"""
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))

    await session.authenticate()
    first_task = session._validation_task
    await session.authenticate()
    second_task = session._validation_task

    assert second_task is not first_task
    with pytest.raises(asyncio.CancelledError):
        await first_task
    assert not second_task.done()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validation_timer_validates_periodically(
    credentials, fake_transport, load_fixture
):
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))
    fake_transport.queue(VALIDATE, load_fixture("validate_success.json"))
    manager = SessionManager(
        credentials, fake_transport, validation_interval=timedelta(milliseconds=5)
    )

    try:
        await manager.authenticate()
        await asyncio.sleep(0.05)

        assert len(fake_transport.calls_to(VALIDATE)) >= 1
        assert len(fake_transport.calls_to(LOGIN)) == 1
    finally:
        await manager.teardown()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validation_timer_survives_reauthentication(
    credentials, fake_transport, load_fixture
):
    """Re-login triggered by the timer keeps the running timer"""
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))
    fake_transport.queue(VALIDATE, load_fixture("validate_rejected.json"))
    manager = SessionManager(
        credentials, fake_transport, validation_interval=timedelta(milliseconds=5)
    )

    try:
        await manager.authenticate()
        timer = manager._validation_task
        await asyncio.sleep(0.05)

        assert len(fake_transport.calls_to(LOGIN)) >= 2
        assert manager._validation_task is timer
        assert not timer.done()
        assert manager.is_authenticated is True
    finally:
        await manager.teardown()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_ensure_valid_logs_in_once(
    session, fake_transport, load_fixture
):
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))

    await asyncio.gather(*(session.ensure_valid() for _ in range(5)))

    assert len(fake_transport.calls_to(LOGIN)) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_teardown_discards_session_and_is_idempotent(
    session, fake_transport, load_fixture
):
    fake_transport.queue(LOGIN, load_fixture("login_success.json"))
    await session.authenticate()
    timer = session._validation_task

    await session.teardown()
    await session.teardown()

    assert timer.cancelled()
    assert session.has_validation_timer is False
    assert session.token is None
    assert session.is_authenticated is False
    assert fake_transport.authorization is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_teardown_without_session_is_safe(credentials, fake_transport):
    manager = SessionManager(credentials, fake_transport)

    await manager.teardown()

    assert manager.state is SessionState.UNAUTHENTICATED
    assert fake_transport.calls == []
