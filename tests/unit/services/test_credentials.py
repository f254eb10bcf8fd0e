"""Tests for the credential gate."""

from unittest.mock import AsyncMock, Mock

import pytest

from wardrobe_throttle.protocols import CredentialHostProtocol
from wardrobe_throttle.services.credentials import (
    ensure_credential,
    reselect_credential,
)


@pytest.fixture
def host():
    host = Mock()
    host.has_selected_key = AsyncMock(return_value=True)
    host.open_select_key = AsyncMock()
    return host


class TestEnsureCredential:
    def test_mock_satisfies_protocol(self, host):
        assert isinstance(host, CredentialHostProtocol)

    @pytest.mark.asyncio
    async def test_key_already_selected(self, host):
        assert await ensure_credential(host) is True
        host.open_select_key.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_prompts_when_missing(self, host):
        host.has_selected_key.return_value = False

        assert await ensure_credential(host) is False
        host.open_select_key.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reselect_always_prompts(self, host):
        await reselect_credential(host)
        host.open_select_key.assert_awaited_once()
        host.has_selected_key.assert_not_awaited()
