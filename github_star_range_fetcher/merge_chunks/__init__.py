from .merge_chunks import MergeResult, merge_chunks

__all__ = ["MergeResult", "merge_chunks"]
