"""
Steam Boiler Controller Python Library

Decision core of a cyclic steam boiler control loop: once per sampling
interval it reads the physical units' reports, decides the operating mode,
detects equipment and sensor failures and commands the pumps and valve.

This library provides:
- Message catalogue and per-cycle mailboxes
- Boiler characteristics with validation and YAML loading
- Operating mode state machine
- Failure detectors with the repair acknowledgement protocol
- Pump subset allocation
- Trace replay harness

Example:
    >>> from steam_boiler import BoilerCharacteristics, Mailbox, SteamBoilerController
    >>> controller = SteamBoilerController(BoilerCharacteristics())
    >>> outgoing = Mailbox()
    >>> controller.clock(incoming, outgoing)
    >>> print(controller.status_message)
"""

__version__ = "1.0.0"
__author__ = "Steam Boiler Team"

from steam_boiler.config import BoilerCharacteristics
from steam_boiler.controller import ControllerState, SteamBoilerController
from steam_boiler.messages import Mailbox, Message, MessageKind, Mode
from steam_boiler.state_machine import Event, OperatingMode, next_mode
from steam_boiler.exceptions import (
    BoilerError,
    ConfigurationError,
    MessageError,
    TransitionError,
    TraceError,
)

__all__ = [
    'BoilerCharacteristics',
    'ControllerState',
    'SteamBoilerController',
    'Mailbox',
    'Message',
    'MessageKind',
    'Mode',
    'Event',
    'OperatingMode',
    'next_mode',
    'BoilerError',
    'ConfigurationError',
    'MessageError',
    'TransitionError',
    'TraceError',
]
