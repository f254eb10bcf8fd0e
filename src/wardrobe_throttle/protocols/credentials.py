# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for the host's API key selection capability."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CredentialHostProtocol(Protocol):
    """
    Key-management capability provided by the hosting environment.

    The library only consumes it: it asks whether a key is selected and,
    when one is needed, asks the host to prompt the user.
    """

    async def has_selected_key(self) -> bool:
        """Whether an API key is currently selected."""
        ...

    async def open_select_key(self) -> None:
        """Prompt the user to select an API key."""
        ...
