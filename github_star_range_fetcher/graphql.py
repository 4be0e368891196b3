"""GraphQL client and search query helpers for GitHub repository search."""

import time
from dataclasses import dataclass, field

import httpx

from .exceptions import ApiPayloadError
from .models import PageCursor
from .settings import get_settings

GRAPHQL_URL = "https://api.github.com/graphql"

SEARCH_QUERY = """
query SearchRepositories($searchQuery: String!, $first: Int!, $after: String) {
  search(query: $searchQuery, type: REPOSITORY, first: $first, after: $after) {
    repositoryCount
    pageInfo {
      endCursor
      hasNextPage
    }
    edges {
      node {
        ... on Repository {
          url
          homepageUrl
          stargazerCount
          updatedAt
        }
      }
    }
  }
}
"""


@dataclass
class SearchPage:
    total_count: int
    cursor: PageCursor
    nodes: list[dict] = field(default_factory=list)


def build_search_request(search_query: str, first: int, after: str | None = None) -> dict:
    """Build the request payload for one page of repository search."""
    return {
        "query": SEARCH_QUERY,
        "variables": {"searchQuery": search_query, "first": first, "after": after},
    }


def parse_search_page(body: dict) -> SearchPage:
    """Extract count, page info and repository nodes from a search response.

    Raises ApiPayloadError if the body carries GraphQL errors or no search data.
    """
    errors = body.get("errors")
    if errors:
        raise ApiPayloadError(errors)

    search = (body.get("data") or {}).get("search")
    if search is None:
        raise ApiPayloadError([{"message": "response has no search data"}])

    page_info = search.get("pageInfo") or {}
    # Edges can hold empty nodes for non-repository hits
    nodes = [edge["node"] for edge in search.get("edges") or [] if edge and edge.get("node")]
    return SearchPage(
        total_count=search.get("repositoryCount") or 0,
        cursor=PageCursor(
            end_cursor=page_info.get("endCursor"),
            has_next_page=bool(page_info.get("hasNextPage")),
        ),
        nodes=nodes,
    )


class GraphQLClient:
    """Thin httpx client for the GitHub GraphQL endpoint. No retry here."""

    def __init__(self, token: str | None = None, timeout: float = 30.0):
        token = token or get_settings().github_token
        if not token:
            raise RuntimeError("GITHUB_TOKEN is not set")
        self._client = httpx.Client(
            headers={
                "Authorization": f"bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )
        self.queries = 0
        self.total_query_time = 0.0

    @property
    def avg_query_time(self) -> float:
        return self.total_query_time / self.queries if self.queries else 0

    def post(self, payload: dict) -> httpx.Response:
        t0 = time.time()
        try:
            return self._client.post(GRAPHQL_URL, json=payload)
        finally:
            self.total_query_time += time.time() - t0
            self.queries += 1

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
