"""
Contiguous allocation simulator comparing classical placement strategies.

Expose high-level classes for building experiments quickly.
"""

from .address_space import AddressSpace
from .block_interval import BlockInterval, Gap
from .errors import AllocationSimError, BlockNotFoundError, InvalidConfigurationError
from .instructions import Allocate, Compact, Deallocate, InstructionQueue, InstructionType
from .simulator import InstructionOutcome, Simulator, SimulatorState
from .strategies import BestFit, FirstFit, PlacementStrategy, StrategyType, WorstFit, strategy_for

__all__ = [
    "AddressSpace",
    "BlockInterval",
    "Gap",
    "AllocationSimError",
    "BlockNotFoundError",
    "InvalidConfigurationError",
    "Allocate",
    "Compact",
    "Deallocate",
    "InstructionQueue",
    "InstructionType",
    "InstructionOutcome",
    "Simulator",
    "SimulatorState",
    "PlacementStrategy",
    "FirstFit",
    "BestFit",
    "WorstFit",
    "StrategyType",
    "strategy_for",
]
