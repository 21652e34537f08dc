from __future__ import annotations


class AllocationSimError(Exception):
    """Base class for simulator errors."""


class InvalidConfigurationError(AllocationSimError, ValueError):
    """Raised for non-positive sizes, dimensions or step counts and malformed scripts."""


class BlockNotFoundError(AllocationSimError, KeyError):
    def __init__(self, block_id: int) -> None:
        super().__init__(block_id)
        self.block_id = block_id

    def __str__(self) -> str:
        return f"Block {self.block_id} is not allocated"
