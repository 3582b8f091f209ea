"""
Message catalogue and mailboxes exchanged with the physical units.

Each message kind has a fixed wire name. The suffix of the wire name tells
which parameters the kind carries: ``_n`` a pump index, ``_b`` a boolean
state, ``_v`` a floating point reading and ``_m`` a mode announcement.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from steam_boiler.exceptions import MessageError


class Mode(IntEnum):
    """Mode values announced to the physical units with ``MODE_m``."""
    INITIALISATION = 0
    NORMAL = 1
    DEGRADED = 2
    RESCUE = 3
    EMERGENCY_STOP = 4


class MessageKind(Enum):
    """Every kind of message, keyed by its wire name."""

    # Physical units -> controller
    STOP = "STOP"
    STEAM_BOILER_WAITING = "STEAM_BOILER_WAITING"
    PHYSICAL_UNITS_READY = "PHYSICAL_UNITS_READY"
    LEVEL = "LEVEL_v"
    STEAM = "STEAM_v"
    PUMP_STATE = "PUMP_STATE_n_b"
    PUMP_CONTROL_STATE = "PUMP_CONTROL_STATE_n_b"
    PUMP_REPAIRED = "PUMP_REPAIRED_n"
    PUMP_CONTROL_REPAIRED = "PUMP_CONTROL_REPAIRED_n"
    LEVEL_REPAIRED = "LEVEL_REPAIRED"
    STEAM_REPAIRED = "STEAM_REPAIRED"
    PUMP_FAILURE_ACKNOWLEDGEMENT = "PUMP_FAILURE_ACKNOWLEDGEMENT_n"
    PUMP_CONTROL_FAILURE_ACKNOWLEDGEMENT = "PUMP_CONTROL_FAILURE_ACKNOWLEDGEMENT_n"
    LEVEL_FAILURE_ACKNOWLEDGEMENT = "LEVEL_FAILURE_ACKNOWLEDGEMENT"
    STEAM_OUTCOME_FAILURE_ACKNOWLEDGEMENT = "STEAM_OUTCOME_FAILURE_ACKNOWLEDGEMENT"

    # Controller -> physical units
    MODE = "MODE_m"
    PROGRAM_READY = "PROGRAM_READY"
    VALVE = "VALVE"
    OPEN_PUMP = "OPEN_PUMP_n"
    CLOSE_PUMP = "CLOSE_PUMP_n"
    PUMP_FAILURE_DETECTION = "PUMP_FAILURE_DETECTION_n"
    PUMP_CONTROL_FAILURE_DETECTION = "PUMP_CONTROL_FAILURE_DETECTION_n"
    LEVEL_FAILURE_DETECTION = "LEVEL_FAILURE_DETECTION"
    STEAM_FAILURE_DETECTION = "STEAM_FAILURE_DETECTION"
    PUMP_REPAIRED_ACKNOWLEDGEMENT = "PUMP_REPAIRED_ACKNOWLEDGEMENT_n"
    PUMP_CONTROL_REPAIRED_ACKNOWLEDGEMENT = "PUMP_CONTROL_REPAIRED_ACKNOWLEDGEMENT_n"
    LEVEL_REPAIRED_ACKNOWLEDGEMENT = "LEVEL_REPAIRED_ACKNOWLEDGEMENT"
    STEAM_REPAIRED_ACKNOWLEDGEMENT = "STEAM_REPAIRED_ACKNOWLEDGEMENT"

    @property
    def parameters(self) -> Tuple[str, ...]:
        """Names of the parameters a message of this kind carries."""
        if self.value.endswith("_n_b"):
            return ("pump", "state")
        if self.value.endswith("_n"):
            return ("pump",)
        if self.value.endswith("_v"):
            return ("value",)
        if self.value.endswith("_m"):
            return ("mode",)
        return ()

    @classmethod
    def from_wire(cls, name: str) -> "MessageKind":
        """Look up a kind by wire name (``LEVEL_v``) or member name (``LEVEL``).

        Raises:
            MessageError: If no kind has that name
        """
        try:
            return cls(name)
        except ValueError:
            pass
        try:
            return cls[name]
        except KeyError:
            raise MessageError(f"Unknown message kind: {name}", kind=name)


PARAMETER_NAMES = ("pump", "value", "state", "mode")


@dataclass(frozen=True)
class Message:
    """A single message with the parameters its kind requires.

    Example:
        >>> Message(MessageKind.LEVEL, value=512.0)
        >>> Message(MessageKind.PUMP_STATE, pump=2, state=True)
        >>> Message(MessageKind.MODE, mode=Mode.NORMAL)
    """
    kind: MessageKind
    pump: Optional[int] = None
    value: Optional[float] = None
    state: Optional[bool] = None
    mode: Optional[Mode] = None

    def __post_init__(self):
        if not isinstance(self.kind, MessageKind):
            raise MessageError(f"Not a message kind: {self.kind!r}")

        expected = self.kind.parameters
        for name in PARAMETER_NAMES:
            present = getattr(self, name) is not None
            if present and name not in expected:
                raise MessageError(
                    f"{self.kind.value} does not carry a {name} parameter",
                    kind=self.kind.value,
                )
            if not present and name in expected:
                raise MessageError(
                    f"{self.kind.value} requires a {name} parameter",
                    kind=self.kind.value,
                )

        # Normalise numeric types coming from YAML or JSON
        if self.value is not None:
            object.__setattr__(self, "value", float(self.value))
        if self.pump is not None:
            if isinstance(self.pump, bool) or int(self.pump) != self.pump:
                raise MessageError(f"Pump index must be an integer, got {self.pump!r}",
                                   kind=self.kind.value)
            object.__setattr__(self, "pump", int(self.pump))
        if self.state is not None:
            object.__setattr__(self, "state", bool(self.state))
        if self.mode is not None and not isinstance(self.mode, Mode):
            object.__setattr__(self, "mode", _parse_mode(self.mode))

    def __str__(self) -> str:
        args = [getattr(self, name) for name in self.kind.parameters]
        if not args:
            return self.kind.value
        rendered = ", ".join(a.name if isinstance(a, Mode) else str(a) for a in args)
        return f"{self.kind.value}({rendered})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary keyed by wire name and parameters."""
        data: Dict[str, Any] = {"kind": self.kind.value}
        for name in self.kind.parameters:
            value = getattr(self, name)
            data[name] = value.name if isinstance(value, Mode) else value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        """Build a message from a dictionary produced by :meth:`to_dict`.

        Raises:
            MessageError: If the kind is unknown or parameters do not match
        """
        if not isinstance(data, dict):
            raise MessageError(f"Message must be a mapping, got {data!r}")
        if "kind" not in data:
            raise MessageError(f"Message has no kind: {data!r}")
        unknown = set(data) - {"kind"} - set(PARAMETER_NAMES)
        if unknown:
            raise MessageError(f"Unknown message fields: {sorted(unknown)}",
                               kind=str(data["kind"]))
        kind = MessageKind.from_wire(str(data["kind"]))
        params = {name: data.get(name) for name in PARAMETER_NAMES}
        return cls(kind, **params)


def _parse_mode(raw: Any) -> Mode:
    if isinstance(raw, str):
        try:
            return Mode[raw.upper()]
        except KeyError:
            raise MessageError(f"Unknown mode: {raw}", kind=MessageKind.MODE.value)
    try:
        return Mode(raw)
    except ValueError:
        raise MessageError(f"Unknown mode: {raw}", kind=MessageKind.MODE.value)


class Mailbox:
    """Ordered collection of messages for one cycle and one direction."""

    def __init__(self, messages: Optional[Iterable[Message]] = None):
        self._messages: List[Message] = []
        for message in messages or ():
            self.send(message)

    def send(self, message: Message) -> None:
        """Append a message.

        Raises:
            MessageError: If ``message`` is not a :class:`Message`
        """
        if not isinstance(message, Message):
            raise MessageError(f"Not a message: {message!r}")
        self._messages.append(message)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __repr__(self) -> str:
        return f"Mailbox([{', '.join(str(m) for m in self._messages)}])"
