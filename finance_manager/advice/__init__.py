"""AI advice package."""

from finance_manager.advice.callbacks import CollectingCallback, StreamCallback
from finance_manager.advice.channel import AdviceChannel, AdviceMessage, MessageKind
from finance_manager.advice.consultant import (
    AdviceConsultant,
    AdviceError,
    AdviceNotConfiguredError,
    AdviceRequestError,
)
from finance_manager.advice.prompt import build_advice_prompt

__all__ = [
    "AdviceChannel",
    "AdviceConsultant",
    "AdviceError",
    "AdviceMessage",
    "AdviceNotConfiguredError",
    "AdviceRequestError",
    "CollectingCallback",
    "MessageKind",
    "StreamCallback",
    "build_advice_prompt",
]
