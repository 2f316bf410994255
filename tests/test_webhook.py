"""Webhook relay tests: requests session is mocked."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from weight_ocr.webhook.dispatcher import EVENT_NAME, WebhookDispatcher


def _session(*side_effects) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.post.side_effect = list(side_effects)
    return session


def _ok_response() -> MagicMock:
    response = MagicMock()
    response.raise_for_status.return_value = None
    return response


@pytest.mark.asyncio
async def test_dispatch_posts_event_payload() -> None:
    session = _session(_ok_response())
    dispatcher = WebhookDispatcher("http://hooks.local/weight", timeout=2.0, session=session)

    delivered = await dispatcher.dispatch({"weight": "1626"})

    assert delivered is True
    session.post.assert_called_once_with(
        "http://hooks.local/weight",
        json={"event": EVENT_NAME, "data": {"weight": "1626"}},
        timeout=2.0,
    )


@pytest.mark.asyncio
async def test_dispatch_retries_then_succeeds() -> None:
    session = _session(requests.ConnectionError("refused"), _ok_response())
    dispatcher = WebhookDispatcher("http://hooks.local", max_attempts=3, wait_multiplier=0, session=session)

    assert await dispatcher.dispatch({"weight": "1"}) is True
    assert session.post.call_count == 2


@pytest.mark.asyncio
async def test_dispatch_gives_up_after_max_attempts() -> None:
    bad = MagicMock()
    bad.raise_for_status.side_effect = requests.HTTPError("502 Bad Gateway")
    session = _session(bad, bad, bad)
    dispatcher = WebhookDispatcher("http://hooks.local", max_attempts=3, wait_multiplier=0, session=session)

    assert await dispatcher.dispatch({"weight": "1"}) is False
    assert session.post.call_count == 3
