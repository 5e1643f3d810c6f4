"""
Gemini transport.

``POST {base}/models/{model}:generateContent`` with a ``systemInstruction``,
one user turn and ``generationConfig`` requesting JSON. The key travels in the
``x-goog-api-key`` header, never in the query string. Reply text is the
concatenation of ``candidates[0].content.parts[*].text``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote

from ..base.context import DispatchContext
from ..base.http_transport import HttpTransport
from ..base.models import ModelInfo, TransportRequest
from ..config.defaults import DISPATCH_TEMPERATURE
from .get_gemini_models import fetch_gemini_models


class GeminiTransport(HttpTransport):
    """Transport for the Gemini ``generateContent`` REST API."""

    def build_generate(
        self, request: TransportRequest, credential: str
    ) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "systemInstruction": {
                "role": "system",
                "parts": [{"text": request.system_instructions}],
            },
            "contents": [
                {"role": "user", "parts": [{"text": request.user_content}]},
            ],
            "generationConfig": {
                "temperature": DISPATCH_TEMPERATURE,
                "responseMimeType": "application/json",
            },
        }
        headers = {"x-goog-api-key": credential, "Content-Type": "application/json"}
        model = quote(request.model_id, safe="-._")
        return f"{self.base_url}/models/{model}:generateContent", headers, payload

    def extract_text(self, data: Mapping[str, Any]) -> str:
        candidates = data.get("candidates") if isinstance(data, Mapping) else None
        if not candidates:
            return ""
        first = candidates[0] if isinstance(candidates, list) else None
        if not isinstance(first, Mapping):
            raise self.malformed_reply("candidates[0] is not an object")
        content = first.get("content") or {}
        parts = content.get("parts") if isinstance(content, Mapping) else None
        if parts is not None and not isinstance(parts, list):
            raise self.malformed_reply("candidate parts is not a list")
        parts = parts or []
        return "".join(str(p.get("text") or "") for p in parts if isinstance(p, Mapping))

    def list_models(self, ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
        return fetch_gemini_models(self, ctx)


__all__ = ["GeminiTransport"]
