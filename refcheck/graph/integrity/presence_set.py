"""
Presence Set.

Dense, growable bit array recording which numeric IDs have been seen:
- O(1) membership test
- Amortized O(1) insertion with chunked growth
- Memory proportional to the largest ID, not to the number of IDs

IDs are indexed by their absolute value. Negative placeholder IDs therefore
share a slot with their positive counterpart. This is a known precision
trade-off of the check, kept deliberately.
"""

import structlog

logger = structlog.get_logger(__name__)

# Growth step in bits (128 KiB of backing storage per chunk)
DEFAULT_CHUNK_BITS = 1024 * 1024

# Minimum zero-fill step while growing, in bytes
_FILL_STEP_BYTES = 64 * 1024


class PresenceSet:
    """
    Growable bit set keyed by non-negative integer ID.

    Usage:
        ```python
        nodes = PresenceSet()
        nodes.mark(42)

        assert nodes.contains(42)
        assert 43 not in nodes
        ```
    """

    __slots__ = ("_bits", "_chunk_bits", "_name")

    def __init__(self, chunk_bits: int = DEFAULT_CHUNK_BITS, name: str = "ids") -> None:
        if chunk_bits <= 0 or chunk_bits % 8:
            raise ValueError(
                f"chunk_bits must be a positive multiple of 8, got {chunk_bits}"
            )
        self._bits = bytearray()
        self._chunk_bits = chunk_bits
        self._name = name

    @property
    def capacity(self) -> int:
        """Number of addressable IDs."""
        return len(self._bits) * 8

    @property
    def chunk_bits(self) -> int:
        return self._chunk_bits

    @property
    def nbytes(self) -> int:
        return len(self._bits)

    def mark(self, object_id: int) -> None:
        """Record an ID as present."""
        index = abs(object_id)
        if index >= self.capacity:
            self._grow(index)
        self._bits[index >> 3] |= 1 << (index & 7)

    def contains(self, object_id: int) -> bool:
        """Check whether an ID was ever marked."""
        index = abs(object_id)
        if index >= self.capacity:
            return False
        return bool(self._bits[index >> 3] & (1 << (index & 7)))

    def __contains__(self, object_id: int) -> bool:
        return self.contains(object_id)

    def _grow(self, index: int) -> None:
        """Extend storage so that index is addressable, rounded up to a chunk."""
        chunks = index // self._chunk_bits + 1
        new_capacity = chunks * self._chunk_bits
        target = new_capacity // 8
        # Zero-fill in bounded steps so no temporary spans the whole growth
        step = max(self._chunk_bits // 8, _FILL_STEP_BYTES)
        while len(self._bits) < target:
            self._bits.extend(bytes(min(step, target - len(self._bits))))

        logger.debug(
            "Presence set grown",
            presence_set=self._name,
            capacity=new_capacity,
            nbytes=len(self._bits),
        )
