from __future__ import annotations

import os
import time
from typing import Any, Dict, Optional

from openai import BadRequestError, OpenAI, OpenAIError

from expense_tracker.exception import CustomException, NoTextResponse, TransportFailure
from expense_tracker.logger import get_logger
from expense_tracker.models import EncodedPayload, LLMResponse
from expense_tracker.utils.load_config import load_config_file

logger = get_logger(__name__)


class OpenAIClient:
    """
    Lightweight wrapper around the OpenAI Responses API for vision extraction.

    Every call is a single attempt: the SDK's built-in retries are disabled and
    failures surface to the caller as TransportFailure.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        client: Optional[OpenAI] = None,
        base_url: Optional[str] = None,
    ) -> None:
        config = load_config_file()
        llm_config = config.get("llm", {})

        self.model = model or llm_config.get("extraction_model", "gpt-4o-mini")
        self.temperature = llm_config.get("temperature", 0.0) if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or llm_config.get("max_output_tokens", 1024)

        if client is not None:
            self.client = client
            return

        resolved_api_key = api_key or os.getenv("OPENAI_API_KEY")
        resolved_base_url = base_url or os.getenv("OPENAI_BASE_URL") or llm_config.get("base_url")

        if not resolved_api_key:
            raise CustomException("OPENAI_API_KEY is not set in the environment.")

        self.client = OpenAI(api_key=resolved_api_key, base_url=resolved_base_url, max_retries=0)

    # ------------------------------------------------------------------
    def extract_receipt(self, payload: EncodedPayload, prompt: str) -> LLMResponse:
        """
        Send one receipt image with the extraction prompt.

        Args:
            payload: Encoded image and its media type.
            prompt: Fixed extraction instructions.

        Returns:
            LLMResponse: content holds the first text block of the reply.

        Raises:
            TransportFailure: the request errored.
            NoTextResponse: the reply carried no text block.
        """
        request: Dict[str, Any] = {
            "model": self.model,
            "max_output_tokens": self.max_output_tokens,
            "temperature": self.temperature,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_image", "image_url": payload.data_url},
                        {"type": "input_text", "text": prompt},
                    ],
                }
            ],
        }

        started = time.perf_counter()
        try:
            logger.info("Sending %s receipt to OpenAI model %s", payload.media_type, self.model)
            response = self.client.responses.create(**request)
        except BadRequestError as exc:
            logger.error("OpenAI rejected the request: %s", exc)
            raise TransportFailure(exc)
        except OpenAIError as exc:
            logger.error("OpenAI call failed: %s", exc)
            raise TransportFailure(exc)

        latency_ms = (time.perf_counter() - started) * 1000
        text = self._first_text_block(response)
        if text is None:
            logger.error("OpenAI reply from %s carried no text content", self.model)
            raise NoTextResponse()

        logger.info("Received response from OpenAI model %s in %.0f ms", self.model, latency_ms)
        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=text,
            model_name=getattr(response, "model", None) or self.model,
            prompt_tokens=getattr(usage, "input_tokens", 0) or 0,
            completion_tokens=getattr(usage, "output_tokens", 0) or 0,
            total_tokens=getattr(usage, "total_tokens", 0) or 0,
            latency_ms=latency_ms,
            provider=self.__class__.__name__,
        )

    # ------------------------------------------------------------------
    @staticmethod
    def _first_text_block(response: Any) -> Optional[str]:
        """Return the text of the first output_text content block, if any."""
        for item in getattr(response, "output", None) or []:
            for block in getattr(item, "content", None) or []:
                if getattr(block, "type", None) != "output_text":
                    continue
                text = getattr(block, "text", None)
                if isinstance(text, str):
                    return text
        return None
