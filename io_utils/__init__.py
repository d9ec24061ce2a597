from .logs import JSONFormatter, setup_logging
from .read import iter_verbatim_records
from .write import summarize_issues, write_jsonl, write_manifest

__all__ = [
    "JSONFormatter",
    "setup_logging",
    "iter_verbatim_records",
    "summarize_issues",
    "write_jsonl",
    "write_manifest",
]
