"""Tests for user-facing failure messages."""

from unittest.mock import AsyncMock, Mock

import pytest

from wardrobe_throttle.exceptions import (
    GenerationError,
    InvalidCredentialError,
    QuotaExceededError,
)
from wardrobe_throttle.services.messages import (
    CREDENTIAL_MESSAGE,
    GENERIC_MESSAGE,
    QUOTA_MESSAGE,
    UserAction,
    respond_to_failure,
    user_message_for,
)


class TestUserMessageFor:
    def test_quota(self):
        message = user_message_for(QuotaExceededError(retry_after=60.0))
        assert message.text == QUOTA_MESSAGE
        assert message.action is UserAction.WAIT

    def test_credential(self):
        message = user_message_for(InvalidCredentialError())
        assert message.text == CREDENTIAL_MESSAGE
        assert message.action is UserAction.RESELECT_KEY

    @pytest.mark.parametrize(
        "error", [GenerationError("no image"), RuntimeError("boom"), TimeoutError()]
    )
    def test_everything_else_is_retryable(self, error):
        message = user_message_for(error)
        assert message.text == GENERIC_MESSAGE
        assert message.action is UserAction.RETRY


class TestRespondToFailure:
    @pytest.fixture
    def host(self):
        host = Mock()
        host.has_selected_key = AsyncMock(return_value=True)
        host.open_select_key = AsyncMock()
        return host

    @pytest.mark.asyncio
    async def test_credential_failure_opens_key_selection(self, host):
        message = await respond_to_failure(InvalidCredentialError(), host)
        assert message.action is UserAction.RESELECT_KEY
        host.open_select_key.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_quota_failure_does_not_prompt(self, host):
        message = await respond_to_failure(QuotaExceededError(), host)
        assert message.action is UserAction.WAIT
        host.open_select_key.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_without_host(self):
        message = await respond_to_failure(InvalidCredentialError())
        assert message.text == CREDENTIAL_MESSAGE
