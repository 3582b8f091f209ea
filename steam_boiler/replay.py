"""
Trace replay for the steam boiler controller.

Drives a controller through a recorded sequence of inbound mailboxes, one
per clock signal, and reports what it sent back. Traces are YAML documents:

    characteristics:
      capacity: 1000
      minimal_limit_level: 50
      maximal_limit_level: 950
      minimal_normal_level: 400
      maximal_normal_level: 600
      maximal_steam_rate: 10
      pump_capacities: [10, 10, 10, 10]
    cycle_duration: 5
    cycles:
      - - {kind: STEAM_BOILER_WAITING}
        - {kind: LEVEL_v, value: 500}
        - {kind: STEAM_v, value: 0}
        - {kind: PUMP_STATE_n_b, pump: 0, state: false}
        ...

Usage:
    python -m steam_boiler.replay trace.yaml -v
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from steam_boiler.config import BoilerCharacteristics
from steam_boiler.controller import DEFAULT_CYCLE_DURATION, SteamBoilerController
from steam_boiler.exceptions import BoilerError, TraceError
from steam_boiler.messages import Mailbox, Message
from steam_boiler.state_machine import OperatingMode

logger = logging.getLogger(__name__)


@dataclass
class Trace:
    """A loaded replay trace."""
    characteristics: BoilerCharacteristics
    cycles: List[List[Message]]
    cycle_duration: float = DEFAULT_CYCLE_DURATION


@dataclass
class CycleRecord:
    """What happened on one clock signal."""
    cycle: int
    incoming: List[Message]
    outgoing: List[Message]
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cycle': self.cycle,
            'status': self.status,
            'incoming': [m.to_dict() for m in self.incoming],
            'outgoing': [m.to_dict() for m in self.outgoing],
        }


def parse_cycles(raw_cycles: Any) -> List[List[Message]]:
    """Convert raw cycle data into lists of messages.

    Raises:
        TraceError: If the cycles are not a list of lists of message mappings
    """
    if not isinstance(raw_cycles, list):
        raise TraceError("Trace 'cycles' must be a list")

    cycles = []
    for number, raw in enumerate(raw_cycles, start=1):
        if raw is None:
            raw = []
        if not isinstance(raw, list):
            raise TraceError(f"Cycle {number} must be a list of messages")
        try:
            cycles.append([Message.from_dict(entry) for entry in raw])
        except (BoilerError, TypeError, ValueError) as e:
            raise TraceError(f"Cycle {number}: {e}")
    return cycles


def load_trace(path: Union[str, Path]) -> Trace:
    """Load a replay trace from YAML.

    Args:
        path: Trace file

    Returns:
        Parsed trace

    Raises:
        TraceError: If the file cannot be read or is malformed
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise TraceError(f"Failed to read trace {path}: {e}")

    if not isinstance(data, dict):
        raise TraceError(f"Trace {path} must be a mapping")

    try:
        characteristics = BoilerCharacteristics.from_dict(data.get('characteristics') or {})
    except BoilerError as e:
        raise TraceError(f"Trace {path}: {e}")

    cycle_duration = data.get('cycle_duration', DEFAULT_CYCLE_DURATION)
    if not isinstance(cycle_duration, (int, float)) or cycle_duration <= 0:
        raise TraceError(f"Trace {path}: cycle_duration must be a positive number")

    cycles = parse_cycles(data.get('cycles', []))
    logger.info(f"Loaded trace {path}: {len(cycles)} cycles, "
                f"{characteristics.number_of_pumps} pumps")
    return Trace(characteristics, cycles, float(cycle_duration))


def run_cycles(controller: SteamBoilerController,
               cycles: Sequence[Sequence[Message]],
               stop_on_emergency: bool = False) -> List[CycleRecord]:
    """Feed each inbound batch to the controller, one clock signal each.

    Args:
        controller: Controller to drive
        cycles: Inbound messages for each cycle
        stop_on_emergency: Stop replaying once the controller is in emergency stop

    Returns:
        One record per cycle that was run
    """
    records = []
    for messages in cycles:
        incoming = Mailbox(messages)
        outgoing = Mailbox()
        controller.clock(incoming, outgoing)

        records.append(CycleRecord(
            cycle=controller.state.cycle,
            incoming=list(incoming),
            outgoing=list(outgoing),
            status=controller.status_message,
        ))

        if stop_on_emergency and controller.mode is OperatingMode.EMERGENCY_STOP:
            logger.info(f"Replay stopped at cycle {controller.state.cycle}: emergency stop")
            break

    return records


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line interface"""
    import argparse

    parser = argparse.ArgumentParser(description='Replay a steam boiler trace through the controller')
    parser.add_argument('trace', help='YAML trace file')
    parser.add_argument('--stop-on-emergency', action='store_true',
                        help='Stop once the controller enters emergency stop')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')

    args = parser.parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        trace = load_trace(args.trace)
    except TraceError as e:
        logger.error(str(e))
        return 2

    controller = SteamBoilerController(trace.characteristics, trace.cycle_duration)
    records = run_cycles(controller, trace.cycles, stop_on_emergency=args.stop_on_emergency)

    for record in records:
        print(f"\n=== Cycle {record.cycle} [{record.status}] ===")
        for message in record.outgoing:
            print(f"  {message}")

    return 1 if controller.mode is OperatingMode.EMERGENCY_STOP else 0


if __name__ == '__main__':
    raise SystemExit(main())
