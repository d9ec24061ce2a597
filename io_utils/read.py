import json
import logging
from pathlib import Path
from typing import Iterator

from dwc.record import VerbatimRecord

logger = logging.getLogger(__name__)


def iter_verbatim_records(path: Path) -> Iterator[VerbatimRecord]:
    """Yield verbatim records from a JSON Lines file.

    Each line is a flat object of term names to values, optionally with an
    ``extensions`` object mapping extension row types to lists of rows.
    Blank lines are skipped.  A line that is not a JSON object raises
    ``ValueError`` naming the line number.
    """
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                raw = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}:{line_no}: invalid JSON: {e}") from e
            if not isinstance(raw, dict):
                raise ValueError(f"{path}:{line_no}: expected a JSON object")
            record = VerbatimRecord.from_dict(raw)
            if record.key is None:
                record = record.model_copy(update={"key": str(line_no)})
            yield record
