# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Credential gate over the host's key selection capability."""

import logging

from ..protocols.credentials import CredentialHostProtocol

logger = logging.getLogger(__name__)


async def ensure_credential(host: CredentialHostProtocol) -> bool:
    """
    Make sure an API key is selected before PRO features are used.

    Prompts through the host when no key is selected. The host's selection
    dialog gives no result, so a completed prompt is assumed to have
    selected a key.

    Returns:
        True if a key was already selected, False if the user was prompted
    """
    if await host.has_selected_key():
        return True
    logger.info("No API key selected, prompting the user")
    await host.open_select_key()
    return False


async def reselect_credential(host: CredentialHostProtocol) -> None:
    """Prompt for a new key after the backend rejected the current one."""
    logger.info("API key rejected, prompting the user to select another")
    await host.open_select_key()


__all__ = ["ensure_credential", "reselect_credential"]
