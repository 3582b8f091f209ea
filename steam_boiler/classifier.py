"""
Message classification for one cycle's inbound mailbox.

Sensor readings must arrive exactly once per cycle. A reading that is
missing and a reading that arrives twice are both unusable, so
:func:`extract_only_match` collapses them into ``None``. :func:`classify`
keeps the distinction for callers that want to report it.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set

from steam_boiler.messages import Message, MessageKind

logger = logging.getLogger(__name__)


class ExtractionStatus(Enum):
    FOUND = "found"
    ABSENT = "absent"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class Extraction:
    """Outcome of looking for the single message of a kind."""
    kind: MessageKind
    status: ExtractionStatus
    matches: tuple = ()

    @property
    def message(self) -> Optional[Message]:
        """The message when exactly one matched, otherwise ``None``."""
        return self.matches[0] if self.status is ExtractionStatus.FOUND else None


def extract_all_matches(kind: MessageKind, incoming: Iterable[Message]) -> List[Message]:
    """Find every message of ``kind``, in the order received.

    Args:
        kind: Kind of message to look for
        incoming: Mailbox (or any iterable of messages) to search

    Returns:
        List of matches, possibly empty
    """
    return [message for message in incoming if message.kind is kind]


def classify(kind: MessageKind, incoming: Iterable[Message]) -> Extraction:
    """Look for the single message of ``kind`` and report what was found."""
    matches = tuple(extract_all_matches(kind, incoming))
    if not matches:
        status = ExtractionStatus.ABSENT
    elif len(matches) == 1:
        status = ExtractionStatus.FOUND
    else:
        status = ExtractionStatus.AMBIGUOUS
    return Extraction(kind, status, matches)


def extract_only_match(kind: MessageKind, incoming: Iterable[Message]) -> Optional[Message]:
    """Find the message of ``kind`` if it is the only one.

    Args:
        kind: Kind of message to look for
        incoming: Mailbox (or any iterable of messages) to search

    Returns:
        The matching message, or None if there was not exactly one match
    """
    return classify(kind, incoming).message


@dataclass
class CycleReadings:
    """Everything the controller needs from one inbound mailbox."""

    level: Extraction
    steam: Extraction
    pump_states: List[Message] = field(default_factory=list)
    pump_control_states: List[Message] = field(default_factory=list)
    stop_requested: bool = False
    units_waiting: bool = False
    steam_repaired: bool = False
    level_repaired: bool = False
    repaired_pumps: Set[int] = field(default_factory=set)
    repaired_pump_controls: Set[int] = field(default_factory=set)

    @property
    def level_value(self) -> Optional[float]:
        message = self.level.message
        return message.value if message is not None else None

    @property
    def steam_value(self) -> Optional[float]:
        message = self.steam.message
        return message.value if message is not None else None

    @classmethod
    def from_mailbox(cls, incoming: Iterable[Message]) -> "CycleReadings":
        """Classify an inbound mailbox.

        Args:
            incoming: The cycle's inbound messages

        Returns:
            Classified readings; the mailbox is not modified
        """
        incoming = list(incoming)

        readings = cls(
            level=classify(MessageKind.LEVEL, incoming),
            steam=classify(MessageKind.STEAM, incoming),
            pump_states=extract_all_matches(MessageKind.PUMP_STATE, incoming),
            pump_control_states=extract_all_matches(MessageKind.PUMP_CONTROL_STATE, incoming),
            stop_requested=extract_only_match(MessageKind.STOP, incoming) is not None,
            units_waiting=extract_only_match(MessageKind.STEAM_BOILER_WAITING, incoming) is not None,
            steam_repaired=extract_only_match(MessageKind.STEAM_REPAIRED, incoming) is not None,
            level_repaired=extract_only_match(MessageKind.LEVEL_REPAIRED, incoming) is not None,
            repaired_pumps={m.pump for m in extract_all_matches(MessageKind.PUMP_REPAIRED, incoming)},
            repaired_pump_controls={
                m.pump for m in extract_all_matches(MessageKind.PUMP_CONTROL_REPAIRED, incoming)
            },
        )

        for extraction in (readings.level, readings.steam):
            if extraction.status is ExtractionStatus.AMBIGUOUS:
                logger.warning(
                    f"{len(extraction.matches)} {extraction.kind.value} messages in one cycle, "
                    f"treating reading as missing"
                )

        return readings
