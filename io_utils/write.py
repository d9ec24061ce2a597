from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable
import json

from dwc.record import InterpretedRecord


def write_manifest(output_dir: Path, meta: Dict[str, Any]) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = output_dir / "manifest.json"
    manifest_path.write_text(json.dumps(meta, indent=2))


def write_jsonl(output_dir: Path, records: Iterable[InterpretedRecord], append: bool = False) -> int:
    """Write interpreted records to ``interpreted.jsonl``, returning the count."""
    output_dir.mkdir(parents=True, exist_ok=True)
    jsonl_path = output_dir / "interpreted.jsonl"
    mode = "a" if append and jsonl_path.exists() else "w"
    count = 0
    with jsonl_path.open(mode) as f:
        for record in records:
            f.write(json.dumps(record.to_dict()) + "\n")
            count += 1
    return count


def summarize_issues(records: Iterable[InterpretedRecord]) -> Dict[str, int]:
    """Count how many records carry each issue."""
    counts: Counter = Counter()
    for record in records:
        counts.update(issue.value for issue in record.issues)
    return dict(sorted(counts.items()))
