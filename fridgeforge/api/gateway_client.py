"""Async wrapper around the OpenAI-compatible model gateway."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx
from openai import AsyncOpenAI

from fridgeforge.config.settings import Settings

logger = logging.getLogger(__name__)


class GatewayRequestError(RuntimeError):
    """Raised when the gateway responds with an error status code."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class GatewayClient:
    """Provides helper methods for the vision, chat and image models."""

    def __init__(self, settings: Settings) -> None:
        base_url = settings.aitunnel_base_url.rstrip("/")
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=settings.request_timeout,
            headers={
                "Authorization": f"Bearer {settings.aitunnel_api_key}",
            },
        )
        self._openai = AsyncOpenAI(
            api_key=settings.aitunnel_api_key,
            base_url=base_url,
        )

    async def close(self) -> None:
        """Close the underlying HTTP clients."""

        await self._client.aclose()
        await self._openai.close()

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, endpoint, json=json_body)
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except httpx.TimeoutException as exc:  # pragma: no cover - network safeguard
            raise GatewayRequestError("Timed out waiting for the model gateway.") from exc
        except httpx.HTTPStatusError as exc:
            raise GatewayRequestError(
                f"Model gateway returned {exc.response.status_code}: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TransportError as exc:
            raise GatewayRequestError(f"Model gateway is unreachable: {exc}") from exc
        except ValueError as exc:
            raise GatewayRequestError("Model gateway returned a non-JSON body.") from exc

    async def chat_completion(
        self,
        messages: Sequence[Mapping[str, Any]],
        *,
        model: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Call the OpenAI-compatible chat completions endpoint."""

        payload = {
            "model": model,
            "messages": list(messages),
        }
        payload.update(kwargs)
        return await self._request_json("POST", "/chat/completions", json_body=payload)

    async def generate_image(self, prompt: str, *, model: str | None = None) -> dict[str, Any]:
        """Ask the image model for a single picture described by ``prompt``."""

        return await self.chat_completion(
            [{"role": "user", "content": prompt}],
            model=model or self._settings.image_model,
            modalities=["image", "text"],
        )

    async def ping(self) -> bool:
        """Return ``True`` when the gateway responds to a model listing call."""

        models = await self._openai.models.list()
        return bool(models.data)

    async def list_model_ids(self) -> set[str]:
        """Return the ids of the models the gateway exposes."""

        models = await self._openai.models.list()
        return {model.id for model in models.data}

    @staticmethod
    def _first_message(payload: Mapping[str, Any]) -> Mapping[str, Any] | None:
        choices = payload.get("choices")
        if not choices:
            return None
        if not isinstance(choices, list) or not isinstance(choices[0], Mapping):
            raise GatewayRequestError("Model gateway returned malformed choices.")
        message = choices[0].get("message") or {}
        if not isinstance(message, Mapping):
            raise GatewayRequestError("Model gateway returned a malformed message.")
        return message

    @staticmethod
    def first_choice_content(payload: Mapping[str, Any]) -> str | None:
        """Return the text content of the first choice, if any."""

        message = GatewayClient._first_message(payload)
        if message is None:
            return None
        content = message.get("content")
        if isinstance(content, list):
            texts = [
                part.get("text", "")
                for part in content
                if isinstance(part, Mapping) and part.get("type") == "text"
            ]
            return "".join(texts) or None
        return content if isinstance(content, str) else None

    @staticmethod
    def first_image_url(payload: Mapping[str, Any]) -> str | None:
        """Return the first picture of an image-modality answer as a URL.

        Gemini-style gateways put it under ``message.images``; others inline a
        data URL in ``content`` or send an ``image_url`` content part.
        """

        message = GatewayClient._first_message(payload)
        if message is None:
            logger.warning("Image response has no choices")
            return None

        for entry in message.get("images") or []:
            url = _url_of(entry)
            if url:
                return url

        content = message.get("content")
        if isinstance(content, str) and content.startswith("data:"):
            return content
        if isinstance(content, list):
            for part in content:
                if isinstance(part, Mapping) and part.get("type") == "image_url":
                    url = _url_of(part)
                    if url:
                        return url

        logger.warning("Image response contains no picture")
        return None


def _url_of(part: Any) -> str | None:
    if not isinstance(part, Mapping):
        return None
    image_url = part.get("image_url")
    if isinstance(image_url, Mapping):
        image_url = image_url.get("url")
    return image_url if isinstance(image_url, str) and image_url else None
