"""
Advice Consultant

Sends a financial summary prompt to a generative model and returns
advice, either as one completed text or as a stream of tokens.

DESIGN DECISION: The consultant only ever receives a prompt string.
It has no access to the stores, so an advice failure can never
change financial data.

Without an API key the consultant is "not configured" and callers
fall back to local_response(), a small set of canned answers.
"""

from typing import Any, Optional

import google.generativeai as genai
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_manager.advice.callbacks import StreamCallback
from finance_manager.config import AdviceSettings, get_settings
from finance_manager.logger import get_logger


class AdviceError(Exception):
    """Base exception for advice errors."""
    pass


class AdviceNotConfiguredError(AdviceError):
    """No API key is configured."""
    pass


class AdviceRequestError(AdviceError):
    """The advice service failed or returned nothing usable."""
    pass


LOCAL_RESPONSES = {
    "analysis": (
        "Based on your spending records, dining takes a large share of your "
        "expenses, around 35% of the total. Cooking at home more often would "
        "save part of that. Your savings rate is about 15%, a little below the "
        "recommended 20%, so consider gradually raising your monthly savings."
    ),
    "budget": (
        "When planning a monthly budget, consider the 50/30/20 rule: 50% for "
        "necessities (rent, food, transport), 30% for personal spending "
        "(entertainment, shopping) and 20% for savings and investment. Aim to "
        "put at least 20% of your income into an emergency fund and long-term "
        "savings every month."
    ),
    "saving": (
        "For savings, first build an emergency fund covering 3-6 months of "
        "living costs and keep it in a current account or short-term deposit "
        "so it stays liquid. After that, depending on your risk tolerance and "
        "horizon, spread money across index funds, fixed deposits and other "
        "products for steady growth."
    ),
    "default": (
        "I can help with money management, budget planning, saving and "
        "investing. Based on the data you provided, look closely at your "
        "highest-spending categories for savings opportunities, make sure you "
        "have an adequate emergency fund, and start setting long-term "
        "financial goals."
    ),
}


class AdviceConsultant:
    """
    Client for the generative advice service.

    RESPONSIBILITIES:
    - Non-streaming requests, retried on transient failure
    - Streaming requests delivered through a StreamCallback
    - Offline canned answers when the service is unavailable

    BOUNDARIES:
    - NEVER reads or writes store data
    - Streaming failures are reported to the callback, never raised
    """

    def __init__(
        self,
        settings: Optional[AdviceSettings] = None,
        model: Optional[Any] = None,
        retry_wait: Optional[Any] = None,
    ):
        """
        Initialize the consultant.

        Args:
            settings: Advice settings. Defaults to the configured settings.
            model: A ready GenerativeModel-like object. When given, the
                   API key is not needed and genai is not configured.
            retry_wait: tenacity wait strategy between non-streaming attempts.
        """
        self._settings = settings or get_settings().advice
        self._model = model
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)
        self._logger = get_logger(__name__)

    @property
    def is_configured(self) -> bool:
        return self._model is not None or self._settings.api_key is not None

    def _get_model(self):
        """Get or create the generative model."""
        if self._model is None:
            if self._settings.api_key is None:
                raise AdviceNotConfiguredError(
                    "No advice API key configured (set ADVICE_API_KEY)"
                )
            genai.configure(api_key=self._settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=self._settings.model_name,
                system_instruction=self._settings.system_prompt,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_tokens,
                },
            )
        return self._model

    def _request_options(self) -> dict:
        return {"timeout": self._settings.request_timeout_seconds}

    # -------------------------------------------------------------------------
    # Non-streaming
    # -------------------------------------------------------------------------

    def get_advice(self, prompt: str, attempts: Optional[int] = None) -> str:
        """
        Request advice and wait for the complete text.

        Makes at most `attempts` tries (default max_retries), retrying
        transient failures.

        Raises:
            AdviceNotConfiguredError: If no API key is configured
            AdviceRequestError: If every attempt failed or the reply was empty
        """
        model = self._get_model()

        @retry(
            stop=stop_after_attempt(attempts or self._settings.max_retries),
            wait=self._retry_wait,
            retry=retry_if_not_exception_type(AdviceError),
            reraise=True,
        )
        def generate() -> str:
            response = model.generate_content(
                prompt,
                request_options=self._request_options(),
            )
            try:
                text = response.text
            except ValueError as e:
                raise AdviceRequestError(f"Response contained no text: {e}")
            if not text or not text.strip():
                raise AdviceRequestError("Advice service returned an empty response")
            return text

        self._logger.info("advice_requested", streaming=False, prompt_chars=len(prompt))
        try:
            text = generate()
        except AdviceError:
            raise
        except Exception as e:
            self._logger.error("advice_request_failed", streaming=False, error=str(e))
            raise AdviceRequestError(f"Error communicating with advice service: {e}") from e

        self._logger.info("advice_received", streaming=False, response_chars=len(text))
        return text

    # -------------------------------------------------------------------------
    # Streaming
    # -------------------------------------------------------------------------

    def stream_advice(self, prompt: str, callback: StreamCallback) -> bool:
        """
        Request advice and deliver it token by token.

        A chunk without readable text is logged and skipped. Any other
        failure ends the stream with callback.on_error.

        Returns:
            True if the stream completed, False if it failed
        """
        self._logger.info("advice_requested", streaming=True, prompt_chars=len(prompt))
        token_count = 0
        try:
            model = self._get_model()
            response = model.generate_content(
                prompt,
                stream=True,
                request_options=self._request_options(),
            )
            for chunk in response:
                try:
                    text = chunk.text
                except ValueError as e:
                    self._logger.warning("advice_chunk_unreadable", error=str(e))
                    continue
                if text:
                    token_count += 1
                    callback.on_token(text)
        except Exception as e:
            self._logger.error(
                "advice_request_failed",
                streaming=True,
                tokens_delivered=token_count,
                error=str(e),
            )
            callback.on_error(f"Advice request failed: {e}")
            return False

        self._logger.info("advice_received", streaming=True, tokens_delivered=token_count)
        callback.on_complete()
        return True

    # -------------------------------------------------------------------------
    # Offline
    # -------------------------------------------------------------------------

    def local_response(self, query: str) -> str:
        """Canned advice used when the service is unavailable."""
        lowered = query.lower()
        if "financial analysis" in lowered:
            return LOCAL_RESPONSES["analysis"]
        if "budget" in lowered:
            return LOCAL_RESPONSES["budget"]
        if "saving" in lowered:
            return LOCAL_RESPONSES["saving"]
        return LOCAL_RESPONSES["default"]

    def test_connection(self) -> str:
        """Send a trivial request and describe the outcome."""
        lines = [f"Testing connection using model: {self._settings.model_name}"]
        try:
            reply = self.get_advice("Hello, just testing the API connection.")
            lines.append(f"API test result: {reply}")
        except AdviceError as e:
            lines.append(f"Connection test failed: {e}")
            if e.__cause__ is not None:
                lines.append(f"Cause: {e.__cause__}")
        return "\n".join(lines)
