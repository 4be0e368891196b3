"""Split a star range into fixed-size chunks that each fit under the search cap."""

from collections.abc import Iterator
from dataclasses import dataclass

from ..exceptions import InvalidRangeError
from ..models import DEFAULT_CHUNK_CAPACITY, DEFAULT_CHUNK_SIZE, Chunk, StarRange


def _require_positive_int(name: str, value) -> int:
    if value is None:
        raise InvalidRangeError(f"{name} is missing")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRangeError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidRangeError(f"{name} must be positive, got {value}")
    return value


def validate_range(min_stars, max_stars) -> StarRange:
    low = _require_positive_int("min_stars", min_stars)
    high = _require_positive_int("max_stars", max_stars)
    if low >= high:
        raise InvalidRangeError(f"min_stars ({low}) must be less than max_stars ({high})")
    return StarRange(low, high)


@dataclass(frozen=True)
class ChunkPlan:
    """Contiguous chunks covering a star range. Iterating twice yields the same chunks."""

    star_range: StarRange
    chunk_size: int
    capacity: int = DEFAULT_CHUNK_CAPACITY

    def __iter__(self) -> Iterator[Chunk]:
        current = self.star_range.low
        while current <= self.star_range.high:
            high = min(current + self.chunk_size - 1, self.star_range.high)
            yield Chunk(current, high, self.capacity)
            current = high + 1

    def __len__(self) -> int:
        span = self.star_range.high - self.star_range.low + 1
        return -(-span // self.chunk_size)


def plan_chunks(
    min_stars,
    max_stars,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    capacity: int = DEFAULT_CHUNK_CAPACITY,
) -> ChunkPlan:
    """Validate inputs and plan the chunks. Raises InvalidRangeError on bad input."""
    star_range = validate_range(min_stars, max_stars)
    _require_positive_int("chunk_size", chunk_size)
    _require_positive_int("capacity", capacity)
    return ChunkPlan(star_range, chunk_size, capacity)
