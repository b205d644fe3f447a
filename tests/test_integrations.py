"""Tests for gateway connectivity helpers."""

from __future__ import annotations

import pytest
import pytest_mock

from fridgeforge.config.settings import get_settings
from fridgeforge.integrations.checks import check_gateway, check_models, run_all_checks


@pytest.fixture(autouse=True)
def _setup_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AITUNNEL_API_KEY", "test-aitunnel")
    monkeypatch.setenv("AITUNNEL_BASE_URL", "https://aitunnel.test/v1")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.asyncio
async def test_check_gateway_success(mocker: pytest_mock.MockerFixture) -> None:
    client_mock = mocker.patch("fridgeforge.integrations.checks.GatewayClient", autospec=True)
    instance = client_mock.return_value
    instance.ping = mocker.AsyncMock(return_value=True)
    instance.close = mocker.AsyncMock(return_value=None)

    result = await check_gateway()

    assert result.success
    assert "aitunnel.test" in result.message
    instance.ping.assert_awaited_once()
    instance.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_gateway_failure(mocker: pytest_mock.MockerFixture) -> None:
    client_mock = mocker.patch("fridgeforge.integrations.checks.GatewayClient", autospec=True)
    instance = client_mock.return_value
    instance.ping = mocker.AsyncMock(return_value=False)
    instance.close = mocker.AsyncMock(return_value=None)

    result = await check_gateway()

    assert not result.success
    assert "non-success" in result.message.lower()


@pytest.mark.asyncio
async def test_check_gateway_reports_exceptions(mocker: pytest_mock.MockerFixture) -> None:
    client_mock = mocker.patch("fridgeforge.integrations.checks.GatewayClient", autospec=True)
    instance = client_mock.return_value
    instance.ping = mocker.AsyncMock(side_effect=RuntimeError("connection refused"))
    instance.close = mocker.AsyncMock(return_value=None)

    result = await check_gateway()

    assert not result.success
    assert result.message == "connection refused"
    instance.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_models_lists_missing_models(
    monkeypatch: pytest.MonkeyPatch,
    mocker: pytest_mock.MockerFixture,
) -> None:
    monkeypatch.setenv("FRIDGEFORGE_IMAGE_MODEL", "dall-e-3")
    get_settings.cache_clear()
    client_mock = mocker.patch("fridgeforge.integrations.checks.GatewayClient", autospec=True)
    instance = client_mock.return_value
    instance.list_model_ids = mocker.AsyncMock(return_value={"gemini-2.5-flash", "gpt-4o"})
    instance.close = mocker.AsyncMock(return_value=None)

    result = await check_models()

    assert not result.success
    assert "image=dall-e-3" in result.message
    assert "vision" not in result.message
    instance.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_all_checks_covers_gateway_and_models(mocker: pytest_mock.MockerFixture) -> None:
    client_mock = mocker.patch("fridgeforge.integrations.checks.GatewayClient", autospec=True)
    instance = client_mock.return_value
    instance.ping = mocker.AsyncMock(return_value=True)
    instance.list_model_ids = mocker.AsyncMock(return_value={"gemini-2.5-flash", "gemini-2.5-flash-image"})
    instance.close = mocker.AsyncMock(return_value=None)

    results = await run_all_checks()

    assert [result.name for result in results] == ["Model gateway", "Configured models"]
    assert all(result.success for result in results)
    assert instance.close.await_count == 2


@pytest.mark.asyncio
async def test_check_gateway_requires_key(
    monkeypatch: pytest.MonkeyPatch,
    mocker: pytest_mock.MockerFixture,
) -> None:
    monkeypatch.setenv("AITUNNEL_API_KEY", "")
    get_settings.cache_clear()
    client_mock = mocker.patch("fridgeforge.integrations.checks.GatewayClient", autospec=True)

    result = await check_gateway()

    assert not result.success
    assert "AITUNNEL_API_KEY" in result.message
    client_mock.assert_not_called()
