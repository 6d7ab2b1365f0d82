from datetime import timedelta

from karts.core.roles import Role
from karts.core.security import close_session, decode_session, is_revoked, open_session


def test_session_token_round_trip():
    session, token = open_session("M00001", Role.PRIMARY)
    decoded = decode_session(token)
    assert decoded.code == "M00001"
    assert decoded.role == Role.PRIMARY
    assert decoded.token_id == session.token_id


def test_invalid_and_expired_tokens():
    assert decode_session("not-a-token") is None
    _, token = open_session("M00001", Role.PRIMARY, expires_delta=timedelta(seconds=-10))
    assert decode_session(token) is None


async def test_close_session_revokes(fake_redis):
    session, _ = open_session("E00001", Role.ADMIN)
    assert not await is_revoked(fake_redis, session)
    await close_session(fake_redis, session)
    assert await is_revoked(fake_redis, session)
