"""
Thin wrapper around the google-genai client.
Turns a list of text / inline-data parts into one generate_content call
and normalizes the reply into a GenerationResult.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from google import genai
from google.genai import types


@dataclass(frozen=True)
class InlineData:
    """Binary input tagged with a MIME type."""
    data: bytes
    mime_type: str


Part = Union[str, InlineData]


@dataclass(frozen=True)
class GenerationResult:
    text: str
    image: Optional[str] = None  # base64, only when the model returned an image part


class GeminiGenerator:
    """
    Immutable handle on one Gemini model.

    Built once by the app factory and injected into the generation blueprint.
    Every call to generate() hits the API exactly once; there is no retry.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        timeout_ms: Optional[int] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.model_name = model_name
        if client is None:
            http_options = types.HttpOptions(timeout=timeout_ms) if timeout_ms else None
            client = genai.Client(api_key=api_key, http_options=http_options)
        self._client = client
        logging.info(f"Gemini client ready (model={model_name}, timeout_ms={timeout_ms})")

    @staticmethod
    def _to_content_part(part: Part) -> types.Part:
        if isinstance(part, InlineData):
            return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
        return types.Part.from_text(text=part)

    def generate(self, parts: Sequence[Part]) -> GenerationResult:
        """
        Send parts to the model and return its text (and first image, if any).

        Raises:
            google.genai.errors.APIError: The service rejected the call.
            Exception: Transport failures and timeouts propagate unchanged.
        """
        contents: List[types.Part] = [self._to_content_part(p) for p in parts]
        response = self._client.models.generate_content(
            model=self.model_name,
            contents=contents,
        )
        return GenerationResult(
            text=response.text or "",
            image=self._first_image(response),
        )

    @staticmethod
    def _first_image(response: Any) -> Optional[str]:
        for candidate in response.candidates or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                blob = getattr(part, "inline_data", None)
                if blob is None or not blob.data:
                    continue
                if (blob.mime_type or "").startswith("image/"):
                    return base64.b64encode(blob.data).decode("ascii")
        return None
