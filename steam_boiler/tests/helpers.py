"""
Shared builders for controller tests.
"""

from typing import Iterable, List, Optional, Sequence

from steam_boiler.config import BoilerCharacteristics
from steam_boiler.controller import SteamBoilerController
from steam_boiler.messages import Mailbox, Message, MessageKind, Mode
from steam_boiler.state_machine import OperatingMode

# Normal band 400..600 (target 500), limits 50..950, two 10 l/s pumps
TEST_CHARACTERISTICS = BoilerCharacteristics(
    capacity=1000.0,
    minimal_limit_level=50.0,
    maximal_limit_level=950.0,
    minimal_normal_level=400.0,
    maximal_normal_level=600.0,
    maximal_steam_rate=10.0,
    pump_capacities=[10.0, 10.0],
)


def cycle_messages(level: Optional[float] = 500.0,
                   steam: Optional[float] = 0.0,
                   pump_states: Sequence[bool] = (False, False),
                   pump_control_states: Optional[Sequence[bool]] = None,
                   extra: Iterable[Message] = ()) -> Mailbox:
    """Build an inbound mailbox with the usual per-cycle reports."""
    if pump_control_states is None:
        pump_control_states = pump_states

    messages: List[Message] = []
    if level is not None:
        messages.append(Message(MessageKind.LEVEL, value=level))
    if steam is not None:
        messages.append(Message(MessageKind.STEAM, value=steam))
    for pump, state in enumerate(pump_states):
        messages.append(Message(MessageKind.PUMP_STATE, pump=pump, state=state))
    for pump, state in enumerate(pump_control_states):
        messages.append(Message(MessageKind.PUMP_CONTROL_STATE, pump=pump, state=state))
    messages.extend(extra)
    return Mailbox(messages)


def kinds(mailbox: Iterable[Message]) -> List[MessageKind]:
    return [message.kind for message in mailbox]


def announcements(mailbox: Iterable[Message]) -> List[Mode]:
    return [message.mode for message in mailbox if message.kind is MessageKind.MODE]


def clock(controller: SteamBoilerController, incoming: Mailbox) -> Mailbox:
    """Run one cycle and return what the controller sent."""
    outgoing = Mailbox()
    controller.clock(incoming, outgoing)
    return outgoing


def run_to_normal(controller: SteamBoilerController, level: float = 500.0) -> None:
    """Take a fresh controller through initialization into NORMAL."""
    off = [False] * controller.characteristics.number_of_pumps
    clock(controller, cycle_messages(level, 0.0, off, extra=[Message(MessageKind.STEAM_BOILER_WAITING)]))
    clock(controller, cycle_messages(level, 0.0, off))
    assert controller.mode is OperatingMode.NORMAL
