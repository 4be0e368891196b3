"""Data models and constants for star-range collection."""

from dataclasses import dataclass

GITHUB_SEARCH_RESULT_LIMIT = 1000  # GitHub Search API hard limit per query

DEFAULT_CHUNK_SIZE = 500  # stars per chunk
DEFAULT_CHUNK_CAPACITY = GITHUB_SEARCH_RESULT_LIMIT
PAGE_SIZE = 100  # GitHub maximum for `first`

# Fixed-delay retry settings (seconds)
MAX_ATTEMPTS = 3
RETRY_DELAY = 3.0
SUCCESS_DELAY = 1.0

MAX_LABEL_LENGTH = 100  # sheet names are capped
MASTER_LABEL = "AllRepos_{low}_to_{high}"

COLUMNS = ("url", "starCount", "homepageUrl", "lastActivity", "cursorAtFetch")


@dataclass(frozen=True)
class StarRange:
    low: int
    high: int


@dataclass(frozen=True)
class Chunk:
    low: int
    high: int
    capacity: int = DEFAULT_CHUNK_CAPACITY

    def __str__(self) -> str:
        return f"{self.low}..{self.high}"


@dataclass(frozen=True)
class PageCursor:
    end_cursor: str | None = None
    has_next_page: bool = True


@dataclass(frozen=True)
class RepositoryRecord:
    """One repository returned by search, tagged with the cursor that led to it."""

    url: str
    star_count: int
    homepage_url: str | None
    last_activity: str | None
    cursor_at_fetch: str | None = None

    @classmethod
    def from_node(cls, node: dict, cursor: str | None) -> "RepositoryRecord":
        return cls(
            url=node["url"],
            star_count=node.get("stargazerCount") or 0,
            homepage_url=node.get("homepageUrl") or None,
            last_activity=node.get("updatedAt"),
            cursor_at_fetch=cursor,
        )

    def to_row(self) -> list:
        return [self.url, self.star_count, self.homepage_url, self.last_activity, self.cursor_at_fetch]


@dataclass(frozen=True)
class SheetKey:
    """Structural identity of a sheet, independent of its display name."""

    kind: str
    low: int
    high: int

    @classmethod
    def chunk(cls, low: int, high: int) -> "SheetKey":
        return cls("chunk", low, high)

    @classmethod
    def master(cls, low: int, high: int) -> "SheetKey":
        return cls("master", low, high)


@dataclass(frozen=True)
class Sheet:
    """Handle to a sheet in a SheetStore."""

    id: int
    key: SheetKey
    name: str


@dataclass(frozen=True)
class ChunkResult:
    chunk: Chunk
    key: SheetKey
    label: str
    reported_total_count: int
    fetched_count: int
    last_cursor: str | None = None
    degraded_reason: str | None = None

    @property
    def degraded(self) -> bool:
        return self.degraded_reason is not None

    @property
    def truncated(self) -> bool:
        return self.fetched_count >= self.chunk.capacity and self.reported_total_count > self.fetched_count


def master_label(low: int, high: int) -> str:
    return MASTER_LABEL.format(low=low, high=high)
