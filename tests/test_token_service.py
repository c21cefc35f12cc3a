"""Tests for the access/refresh token lifecycle."""

from uuid import uuid4

import pytest
from litestar.exceptions import InternalServerException, NotAuthorizedException

from conftest import make_result, make_session, make_user
from tubeline.auth import token_service
from tubeline.auth.tokens import ACCESS, REFRESH, create_signed_token, verify_signed_token


class TestIssuePair:
    async def test_persists_refresh_token(self, auth_config):
        user = make_user()
        session = make_session(make_result(scalar=user))

        pair = await token_service.issue_pair(session, user.id, auth_config)

        assert user.refresh_token == pair.refresh_token
        session.commit.assert_awaited_once()

    async def test_tokens_carry_subject_and_type(self, auth_config):
        user = make_user()
        session = make_session(make_result(scalar=user))

        pair = await token_service.issue_pair(session, user.id, auth_config)

        access = verify_signed_token(pair.access_token, auth_config.access_token_secret, ACCESS)
        refresh = verify_signed_token(pair.refresh_token, auth_config.refresh_token_secret, REFRESH)
        assert access["sub"] == str(user.id)
        assert access["username"] == "ada"
        assert refresh["sub"] == str(user.id)

    async def test_consecutive_pairs_differ(self, auth_config):
        user = make_user()
        session = make_session(make_result(scalar=user), make_result(scalar=user))

        first = await token_service.issue_pair(session, user.id, auth_config)
        second = await token_service.issue_pair(session, user.id, auth_config)

        assert first.refresh_token != second.refresh_token

    async def test_missing_user_is_internal_error(self, auth_config):
        session = make_session(make_result(scalar=None))
        with pytest.raises(InternalServerException):
            await token_service.issue_pair(session, uuid4(), auth_config)


class TestRotate:
    def _refresh_for(self, user, auth_config):
        return create_signed_token(
            {"type": REFRESH, "sub": str(user.id)}, auth_config.refresh_token_secret, 300
        )

    async def test_missing_token(self, auth_config):
        session = make_session()
        with pytest.raises(NotAuthorizedException) as exc_info:
            await token_service.rotate(session, None, auth_config)
        assert exc_info.value.detail == "unauthorized request"
        session.execute.assert_not_awaited()

    async def test_bad_signature(self, auth_config):
        token = create_signed_token({"type": REFRESH, "sub": str(uuid4())}, "other-secret", 300)
        with pytest.raises(NotAuthorizedException) as exc_info:
            await token_service.rotate(make_session(), token, auth_config)
        assert exc_info.value.detail == "Invalid refresh token"

    async def test_access_token_is_not_a_refresh_token(self, auth_config):
        token = create_signed_token({"type": ACCESS, "sub": str(uuid4())}, auth_config.refresh_token_secret, 300)
        with pytest.raises(NotAuthorizedException):
            await token_service.rotate(make_session(), token, auth_config)

    async def test_unknown_subject(self, auth_config):
        user = make_user()
        session = make_session(make_result(scalar=None))
        with pytest.raises(NotAuthorizedException) as exc_info:
            await token_service.rotate(session, self._refresh_for(user, auth_config), auth_config)
        assert exc_info.value.detail == "Invalid refresh token"

    async def test_stale_token_is_rejected(self, auth_config):
        """A validly signed token that is no longer the persisted one fails."""
        user = make_user()
        session = make_session(make_result(scalar=user), make_result(rowcount=0))

        with pytest.raises(NotAuthorizedException) as exc_info:
            await token_service.rotate(session, self._refresh_for(user, auth_config), auth_config)

        assert exc_info.value.detail == "Refresh token is expired or used"
        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    async def test_current_token_rotates(self, auth_config):
        user = make_user()
        presented = self._refresh_for(user, auth_config)
        session = make_session(make_result(scalar=user), make_result(rowcount=1))

        pair = await token_service.rotate(session, presented, auth_config)

        assert pair.refresh_token != presented
        session.commit.assert_awaited_once()


class TestAuthenticate:
    async def test_missing_token(self, auth_config):
        with pytest.raises(NotAuthorizedException) as exc_info:
            await token_service.authenticate(make_session(), None, auth_config)
        assert exc_info.value.detail == "Unauthorized request"

    async def test_refresh_token_is_rejected(self, auth_config):
        token = create_signed_token({"type": REFRESH, "sub": str(uuid4())}, auth_config.access_token_secret, 300)
        with pytest.raises(NotAuthorizedException) as exc_info:
            await token_service.authenticate(make_session(), token, auth_config)
        assert exc_info.value.detail == "Invalid access token"

    async def test_deleted_user(self, auth_config):
        token = create_signed_token({"type": ACCESS, "sub": str(uuid4())}, auth_config.access_token_secret, 300)
        with pytest.raises(NotAuthorizedException):
            await token_service.authenticate(make_session(make_result(scalar=None)), token, auth_config)

    async def test_resolves_user(self, auth_config):
        user = make_user()
        token = create_signed_token({"type": ACCESS, "sub": str(user.id)}, auth_config.access_token_secret, 300)
        assert await token_service.authenticate(make_session(make_result(scalar=user)), token, auth_config) is user


async def test_revoke_clears_and_commits():
    session = make_session(make_result(rowcount=1))
    await token_service.revoke(session, uuid4())
    session.execute.assert_awaited_once()
    session.commit.assert_awaited_once()
