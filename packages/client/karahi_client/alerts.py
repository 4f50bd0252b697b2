"""
Alert sinks for the pollers.

Pollers decide *when* to alert; a Notifier decides *how*. The terminal
implementation rings the bell and prints; other front-ends (desktop
notifications, a web socket push) implement the same three methods.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Protocol, TextIO, runtime_checkable

from karahi_schemas import OrderSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tone:
    """One phase of a synthesized chime."""

    frequency_hz: float
    duration_s: float


# New-order chime: a short low tone followed by a longer high one
CHIME_TONES: tuple[Tone, ...] = (
    Tone(frequency_hz=880.0, duration_s=0.15),
    Tone(frequency_hz=1318.5, duration_s=0.3),
)


@runtime_checkable
class Notifier(Protocol):
    """Where poller alerts go."""

    def chime(self, tones: tuple[Tone, ...] = CHIME_TONES) -> None:
        """Play an audible alert."""
        ...

    def toast(self, title: str, message: str) -> None:
        """Show a short-lived message."""
        ...

    def celebrate(self, order: OrderSchema) -> None:
        """One-shot celebration for a completed order."""
        ...


class TerminalNotifier:
    """
    Notifier that writes to a text stream.

    Each chime phase is one terminal bell; toasts and celebrations are
    printed lines.
    """

    BELL = "\a"

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def chime(self, tones: tuple[Tone, ...] = CHIME_TONES) -> None:
        phases = ", ".join(f"{t.frequency_hz:g}Hz/{t.duration_s:g}s" for t in tones)
        logger.debug("Chime: %s", phases)
        self._write(self.BELL * len(tones))

    def toast(self, title: str, message: str) -> None:
        logger.info("%s: %s", title, message)
        self._write(f"[{title}] {message}\n")

    def celebrate(self, order: OrderSchema) -> None:
        self._write(f"*** Order {order.order_number} is ready for pickup! ***\n")
