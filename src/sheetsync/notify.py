"""
User facing notification channel.  A notifier is any callable that takes a
message string, the default just logs it as a warning.
"""
from typing import Callable
import logging

Notifier = Callable[[str], None]

def log_notifier(message: str) -> None:
    logging.getLogger("sheetsync").warning(message)

class CollectingNotifier():
    """Keeps every message, handy for tests and for batching up a summary"""
    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def __len__(self) -> int:
        return len(self.messages)

    def clear(self) -> None:
        self.messages = []
