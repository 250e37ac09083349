"""Live checks against the KIS Open API.

Run with ``pytest --kisquote-run-integration`` and ``KIS_APP_KEY`` /
``KIS_APP_SECRET`` exported.
"""

from __future__ import annotations

import os

import pytest

from kisquote import create_service
from kisquote.core.config import ConfigManager


@pytest.fixture
def live_config():
    if not (os.getenv("KIS_APP_KEY") and os.getenv("KIS_APP_SECRET")):
        pytest.skip("KIS_APP_KEY and KIS_APP_SECRET are required")
    return ConfigManager().get_config()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_bond_etfs(live_config) -> None:
    service = create_service(live_config)
    try:
        result = await service.fetch_etf_prices("bond")
    finally:
        await service.client.aclose()

    assert result.total == 4
    assert all(quote.current_value > 0 for quote in result.succeeded)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_us_index_estimates_are_positive(live_config) -> None:
    service = create_service(live_config)
    try:
        result = await service.fetch_us_indices()
    finally:
        await service.client.aclose()

    assert result.total == 4
    for quote in result.succeeded:
        if quote.is_estimated:
            assert quote.current_value > 0
