"""
OpenAI transport.

One ``POST {base}/chat/completions`` per call with a system + user message
pair, fixed temperature and JSON response mode. The reply text is
``choices[0].message.content``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..base.context import DispatchContext
from ..base.http_transport import HttpTransport
from ..base.models import ModelInfo, TransportRequest
from ..config.defaults import DISPATCH_TEMPERATURE
from .get_openai_models import fetch_openai_models


class OpenAITransport(HttpTransport):
    """Transport for the OpenAI Chat Completions API."""

    json_mode = True

    def build_generate(
        self, request: TransportRequest, credential: str
    ) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "model": request.model_id,
            "temperature": DISPATCH_TEMPERATURE,
            "messages": [
                {"role": "system", "content": request.system_instructions},
                {"role": "user", "content": request.user_content},
            ],
        }
        if self.json_mode:
            payload["response_format"] = {"type": "json_object"}
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }
        return f"{self.base_url}/chat/completions", headers, payload

    def extract_text(self, data: Mapping[str, Any]) -> str:
        choices = data.get("choices") if isinstance(data, Mapping) else None
        if not choices:
            return ""
        first = choices[0] if isinstance(choices, list) else None
        if not isinstance(first, Mapping):
            raise self.malformed_reply("choices[0] is not an object")
        message = first.get("message") or {}
        if not isinstance(message, Mapping):
            raise self.malformed_reply("choices[0].message is not an object")
        content = message.get("content") or ""
        if not isinstance(content, str):
            raise self.malformed_reply("message content is not text")
        return content

    def list_models(self, ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
        return fetch_openai_models(self, ctx)


__all__ = ["OpenAITransport"]
