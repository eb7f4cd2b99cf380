"""Citation aggregation across cooperating workers.

Every worker keeps its own CitationRegistry with the same references added
in the same order. Before printing the bibliography, collect_citations()
merges the cited flags of all workers so that a reference cited anywhere
counts as cited everywhere.

The transport is pluggable: anything implementing Communicator can be used.
SerialCommunicator covers single process runs and LocalWorkerGroup connects
worker threads of one process.
"""

import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from loguru import logger

from .config import config
from .exceptions import AggregationMismatchError
from .registry import CitationRegistry


class Communicator(ABC):
    """A worker's view of a group taking part in collective calls."""

    @property
    @abstractmethod
    def rank(self) -> int:
        """Index of this worker in its group."""
        pass

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of workers in the group."""
        pass

    @abstractmethod
    def allreduce_max(self, values: Sequence[int]) -> List[int]:
        """
        Element-wise maximum over the sequences of all workers.

        Collective: blocks until every worker of the group has called it.

        Raises:
            AggregationMismatchError: The workers passed sequences of
                different lengths
        """
        pass


class SerialCommunicator(Communicator):
    """Group consisting of the calling worker only."""

    @property
    def rank(self) -> int:
        return 0

    @property
    def size(self) -> int:
        return 1

    def allreduce_max(self, values: Sequence[int]) -> List[int]:
        return [int(value) for value in values]


class LocalWorkerGroup:
    """
    In-process group of workers, one thread per worker.

    Usage:
        group = LocalWorkerGroup(3)
        # in worker thread `rank`:
        collect_citations(registry, group.communicator(rank))
    """

    def __init__(self, size: int, timeout: Optional[float] = None):
        """
        Args:
            size: Number of workers
            timeout: Seconds to wait for the other workers (None waits
                forever, defaults to AGGREGATION_TIMEOUT)
        """
        if size < 1:
            raise ValueError(f"Worker group needs at least one worker, got {size}")
        if timeout is None and config.AGGREGATION_TIMEOUT > 0:
            timeout = config.AGGREGATION_TIMEOUT
        self.size = size
        self.timeout = timeout
        self._barrier = threading.Barrier(size)
        self._contributions: List[List[int]] = [[] for _ in range(size)]

    def communicator(self, rank: int) -> 'LocalCommunicator':
        if rank < 0 or rank >= self.size:
            raise ValueError(f"Rank {rank} outside group of size {self.size}")
        return LocalCommunicator(self, rank)

    def _wait(self, rank: int) -> None:
        try:
            self._barrier.wait(self.timeout)
        except threading.BrokenBarrierError as exc:
            # Leave the group usable for the next round
            self._barrier.reset()
            raise AggregationMismatchError(
                f"Worker {rank} gave up waiting for the group of {self.size}", cause=exc
            )

    def allreduce_max(self, rank: int, values: Sequence[int]) -> List[int]:
        self._contributions[rank] = [int(value) for value in values]
        self._wait(rank)

        # Every worker reduces on its own; nobody writes until the second barrier.
        lengths = sorted({len(contribution) for contribution in self._contributions})
        result = None
        if len(lengths) == 1:
            result = [max(column) for column in zip(*self._contributions)]
        self._wait(rank)

        if result is None:
            raise AggregationMismatchError(
                f"Workers contributed sequences of different lengths {lengths}"
            )
        return result


class LocalCommunicator(Communicator):
    """Communicator handed to one worker of a LocalWorkerGroup."""

    def __init__(self, group: LocalWorkerGroup, rank: int):
        self._group = group
        self._rank = rank

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def size(self) -> int:
        return self._group.size

    def allreduce_max(self, values: Sequence[int]) -> List[int]:
        return self._group.allreduce_max(self._rank, values)


def collect_citations(registry: CitationRegistry, communicator: Communicator) -> int:
    """
    Check for each reference whether any worker marked it as cited.

    All workers must call this together, with registries holding the same
    number of references. Afterwards every worker has identical cited flags.

    Args:
        registry: This worker's registry
        communicator: This worker's handle on the group

    Returns:
        Number of references cited after aggregation

    Raises:
        AggregationMismatchError: The workers disagree on the reference count
    """
    flags = [1 if ref.cited else 0 for ref in registry]
    reduced = communicator.allreduce_max(flags)
    if len(reduced) != len(flags):
        raise AggregationMismatchError(
            f"Reduction returned {len(reduced)} flags for {len(flags)} references"
        )

    for ref, flag in zip(registry, reduced):
        ref.cited = flag > 0

    cited = sum(1 for flag in reduced if flag > 0)
    logger.debug(
        f"Worker {communicator.rank}/{communicator.size}: "
        f"{cited} of {len(flags)} references cited"
    )
    return cited
