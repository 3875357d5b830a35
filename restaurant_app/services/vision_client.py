# restaurant_app/services/vision_client.py
import json
from decimal import Decimal, InvalidOperation

import requests
from requests import RequestException

from restaurant_app.domain.errors import ProviderError
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)

_FULL_PROMPT = (
    "Analyze the food image provided and identify the dish name and describe it. "
    "{hint}"
    "Provide a reasonable price estimate in {currency} based on local market prices; "
    "use 0 if you cannot estimate it confidently. "
    "The description must be at most 50 words. "
    'Respond only with JSON: {{"name": str, "description": str, "estimated_price": number}}.'
)

_DESCRIPTION_PROMPT = (
    'Analyze the food image provided and write a short description (at most 50 words) '
    'of the dish called "{name}": ingredients, appearance and taste. '
    'Respond only with JSON: {{"description": str}}.'
)


class VisionClient:
    """Klient modelu wizyjnego przez API zgodne z OpenAI chat completions (OpenRouter)."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        model: str = "gpt-4o-mini",
        currency: str = "IDR",
        timeout: float = 30,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.currency = currency
        self.timeout = timeout

    def _ask(self, prompt: str, image: str) -> dict:
        if not self.api_key:
            raise ProviderError("Vision API key not configured")

        url = f"{self.base_url}/chat/completions"
        logger.info(f"VisionClient POST {url} model={self.model}")

        try:
            resp = requests.post(
                url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": self.model,
                    "temperature": 0.7,
                    "response_format": {"type": "json_object"},
                    "messages": [
                        {
                            "role": "user",
                            "content": [
                                {"type": "text", "text": prompt},
                                {"type": "image_url", "image_url": {"url": image}},
                            ],
                        }
                    ],
                },
                timeout=self.timeout,
            )
        except RequestException as e:
            raise ProviderError("Vision API unreachable") from e

        if not resp.ok:
            logger.error(f"Vision API error {resp.status_code}: {resp.text[:200]}")
            raise ProviderError(f"Vision API returned {resp.status_code}")

        try:
            content = resp.json()["choices"][0]["message"]["content"]
            parsed = json.loads(content)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            # np. strona HTML zamiast JSON przy limitach/awarii
            raise ProviderError("Vision API returned an unexpected response") from e

        if not isinstance(parsed, dict):
            raise ProviderError("Vision API returned an unexpected response")
        return parsed

    def describe(self, image: str, name: str) -> str:
        data = self._ask(_DESCRIPTION_PROMPT.format(name=name), image)
        return str(data.get("description") or "")

    def analyze(self, image: str, name_hint: str | None = None) -> dict:
        hint = ""
        if name_hint:
            hint = (
                f'The filename suggests this might be "{name_hint}". '
                "Use this as a hint but verify with the image content. "
            )

        data = self._ask(_FULL_PROMPT.format(hint=hint, currency=self.currency), image)

        try:
            price = Decimal(str(data.get("estimated_price") or 0))
        except InvalidOperation:
            price = Decimal("0")

        return {
            "name": str(data.get("name") or name_hint or "Food Item"),
            "description": str(data.get("description") or ""),
            "estimated_price": price,
        }
