"""Single-pass pairwise reduction of one Merkle tree level.

A PairReducer turns an ordered sequence of blocks into the next level up:

    [A, B, C, D] -> [H(A, B), H(C, D)]
    [A, B, C]    -> [H(A, B), H(C, C)]

An odd trailing block is paired with itself. Pairing depends on arrival
order across the whole level, so a level must go through one reducer in
one pass; partial results from separate reducers cannot be merged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

Block = bytes
Digest = Callable[[bytes, bytes], bytes]


class ReductionError(Exception):
    """Base exception for level reduction errors."""

    pass


class MisuseError(ReductionError):
    """The begin/step/finish protocol was called out of order."""

    pass


class DigestFailure(ReductionError):
    """The digest function could not produce a result."""

    pass


@dataclass
class ReductionState:
    """Transient state of one reduction pass."""

    pending: Block | None = None  # Odd block still waiting for its partner
    output: list[Block] = field(default_factory=list)


class PairReducer:
    """Reduce one level of blocks to the next by hashing adjacent pairs."""

    def __init__(self, digest: Digest):
        self.digest = digest
        self._state: ReductionState | None = None
        self._failed = False

    @property
    def in_pass(self) -> bool:
        """True between begin() and finish()."""
        return self._state is not None

    def begin(self) -> None:
        """Start a new pass with no pending block."""
        self._check_usable("begin")
        if self._state is not None:
            raise MisuseError("begin() called before the previous pass was finished")
        self._state = ReductionState()

    def step(self, block: bytes | bytearray | memoryview) -> None:
        """
        Feed the next block of the level.

        The first block of a pair is held as pending; the second one is
        hashed together with it (pending first) and appended to the output.

        Raises:
            MisuseError: If called outside a pass
            DigestFailure: If the digest function fails
        """
        state = self._require_state("step")
        if not isinstance(block, (bytes, bytearray, memoryview)):
            raise TypeError(f"Block must be bytes-like, got {type(block).__name__}")
        block = bytes(block)

        if state.pending is None:
            state.pending = block
            return

        state.output.append(self._combine(state.pending, block))
        state.pending = None

    def finish(self) -> tuple[Block, ...]:
        """
        End the pass and return the next level.

        A pending block left over from an odd-length level is hashed with
        itself. The reducer is ready for a new begin() afterwards.

        Raises:
            MisuseError: If called outside a pass
            DigestFailure: If the digest function fails
        """
        state = self._require_state("finish")

        if state.pending is not None:
            state.output.append(self._combine(state.pending, state.pending))
            state.pending = None

        self._state = None
        return tuple(state.output)

    @staticmethod
    def merge(left: tuple[Block, ...], right: tuple[Block, ...]) -> tuple[Block, ...]:
        """Levels are not mergeable: always returns ``left`` unchanged.

        Pairing is position-dependent across the whole level, so two halves
        reduced independently never combine into the correct level. Do not
        split a level across reducers.
        """
        return left

    def _combine(self, first: Block, second: Block) -> Block:
        try:
            result = self.digest(first, second)
        except DigestFailure:
            self._failed = True
            raise
        except Exception as e:
            self._failed = True
            raise DigestFailure(f"Digest failed: {e}") from e

        if not isinstance(result, (bytes, bytearray)):
            self._failed = True
            raise DigestFailure(
                f"Digest returned {type(result).__name__}, expected bytes"
            )
        return bytes(result)

    def _require_state(self, operation: str) -> ReductionState:
        self._check_usable(operation)
        if self._state is None:
            raise MisuseError(f"{operation}() called without a preceding begin()")
        return self._state

    def _check_usable(self, operation: str) -> None:
        if self._failed:
            raise MisuseError(
                f"{operation}() called on a reducer whose pass failed; discard it"
            )


def reduce_level(blocks: Iterable[bytes], digest: Digest) -> tuple[Block, ...]:
    """Run one full pass over ``blocks`` with a fresh reducer."""
    reducer = PairReducer(digest)
    reducer.begin()
    for block in blocks:
        reducer.step(block)
    return reducer.finish()
