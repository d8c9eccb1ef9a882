"""Callback contract for incremental advice responses."""

from typing import Optional


class StreamCallback:
    """
    Receives an advice response as it is produced.

    Subclasses must implement on_token. The other hooks default to no-ops.
    """

    def on_token(self, token: str) -> None:
        """A fragment of generated text."""
        raise NotImplementedError

    def on_complete(self) -> None:
        """The response finished normally."""

    def on_error(self, error: str) -> None:
        """The response failed; `error` is a human-readable message."""

    def on_retry(self) -> None:
        """Streaming failed and a full response follows; discard earlier tokens."""


class CollectingCallback(StreamCallback):
    """Accumulates the response text, for callers that want the whole answer."""

    def __init__(self):
        self.tokens: list[str] = []
        self.completed = False
        self.error: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(self.tokens)

    def on_token(self, token: str) -> None:
        self.tokens.append(token)

    def on_complete(self) -> None:
        self.completed = True

    def on_error(self, error: str) -> None:
        self.error = error

    def on_retry(self) -> None:
        self.tokens.clear()
