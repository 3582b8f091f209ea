"""
Initialization Sequencer

While the controller waits for the physical units, it fills or drains the
tank until the level sits inside the normal band, then declares the program
ready.
"""

import logging
from typing import Optional

from steam_boiler.config import BoilerCharacteristics
from steam_boiler.messages import Mailbox, Message, MessageKind, Mode

logger = logging.getLogger(__name__)


def initialise(level: float,
               units_ready: bool,
               characteristics: BoilerCharacteristics,
               outgoing: Mailbox) -> bool:
    """
    Run one initialization cycle

    Args:
        level: Current water level
        units_ready: True if the physical units reported they are waiting
        characteristics: Boiler characteristics
        outgoing: Mailbox for commands

    Returns:
        True if the level is inside the normal band and the program is ready
    """
    outgoing.send(Message(MessageKind.MODE, mode=Mode.INITIALISATION))

    if not units_ready:
        return False

    if level > characteristics.maximal_normal_level:
        logger.debug(f"Level {level} above normal band, opening valve")
        outgoing.send(Message(MessageKind.VALVE))
        return False

    if level < characteristics.minimal_normal_level:
        logger.debug(f"Level {level} below normal band, opening all pumps")
        for pump in range(characteristics.number_of_pumps):
            outgoing.send(Message(MessageKind.OPEN_PUMP, pump=pump))
        return False

    outgoing.send(Message(MessageKind.PROGRAM_READY))
    for pump in range(characteristics.number_of_pumps):
        outgoing.send(Message(MessageKind.CLOSE_PUMP, pump=pump))
    logger.info(f"Level {level} inside normal band, program ready")
    return True


def initial_readings_valid(level: float,
                           steam: Optional[float],
                           characteristics: BoilerCharacteristics) -> bool:
    """
    Sanity check on readings taken before the boiler starts

    No steam can be produced yet, and the level has to be physically
    possible for the tank.
    """
    if steam is None or steam != 0:
        return False
    return 0 <= level <= characteristics.capacity
