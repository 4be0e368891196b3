from .fetch_chunk import fetch_chunk
from .fetch_star_ranges import RunResult, fetch_star_ranges
from .plan_chunks import ChunkPlan, plan_chunks

__all__ = ["ChunkPlan", "RunResult", "fetch_chunk", "fetch_star_ranges", "plan_chunks"]
