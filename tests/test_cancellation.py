"""Tests for sitegen.cancellation."""

from __future__ import annotations

import pytest

from sitegen.cancellation import CancellationToken
from sitegen.errors import BuildCancelledError


def test_token_starts_active() -> None:
    token = CancellationToken()

    assert token.is_cancelled is False
    token.throw_if_cancelled()
    assert token.wait(0) is False


def test_cancel_is_observed() -> None:
    token = CancellationToken()
    token.cancel()

    assert token.is_cancelled is True
    assert token.wait(5) is True
    with pytest.raises(BuildCancelledError):
        token.throw_if_cancelled()
