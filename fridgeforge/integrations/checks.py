"""Connectivity checks for the model gateway and the configured models."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from fridgeforge.api.gateway_client import GatewayClient
from fridgeforge.config.settings import Settings, get_settings

GATEWAY_CHECK = "Model gateway"
MODELS_CHECK = "Configured models"


@dataclass(slots=True)
class IntegrationCheckResult:
    """Outcome of one check, printed by ``fridgeforge check``."""

    name: str
    success: bool
    message: str


def _missing_key(name: str) -> IntegrationCheckResult:
    return IntegrationCheckResult(name=name, success=False, message="AITUNNEL_API_KEY is not configured.")


async def _with_client(
    name: str,
    settings: Settings,
    run_check: Callable[[GatewayClient], Awaitable[IntegrationCheckResult]],
) -> IntegrationCheckResult:
    if not settings.aitunnel_api_key:
        return _missing_key(name)
    client = GatewayClient(settings)
    try:
        return await run_check(client)
    except Exception as exc:
        return IntegrationCheckResult(name=name, success=False, message=str(exc))
    finally:
        await client.close()


async def check_gateway() -> IntegrationCheckResult:
    """Ping the model gateway."""

    settings = get_settings()

    async def _ping(client: GatewayClient) -> IntegrationCheckResult:
        if await client.ping():
            return IntegrationCheckResult(
                name=GATEWAY_CHECK,
                success=True,
                message=f"{settings.aitunnel_base_url} is reachable.",
            )
        return IntegrationCheckResult(
            name=GATEWAY_CHECK,
            success=False,
            message="Service responded with non-success status.",
        )

    return await _with_client(GATEWAY_CHECK, settings, _ping)


async def check_models() -> IntegrationCheckResult:
    """Verify the vision, recipe and image models are offered by the gateway."""

    settings = get_settings()
    wanted = {
        "vision": settings.vision_model,
        "recipe": settings.recipe_model,
        "image": settings.image_model,
    }

    async def _lookup(client: GatewayClient) -> IntegrationCheckResult:
        available = await client.list_model_ids()
        missing = [f"{role}={model}" for role, model in wanted.items() if model not in available]
        if missing:
            return IntegrationCheckResult(
                name=MODELS_CHECK,
                success=False,
                message=f"Not offered by the gateway: {', '.join(missing)}.",
            )
        return IntegrationCheckResult(
            name=MODELS_CHECK,
            success=True,
            message=", ".join(sorted(set(wanted.values()))),
        )

    return await _with_client(MODELS_CHECK, settings, _lookup)


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_gateway(), check_models()))
