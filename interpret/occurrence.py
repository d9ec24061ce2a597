"""Record level interpretation.

:class:`OccurrenceInterpreter` runs the temporal, location and taxonomy
interpreters over one verbatim record, building a fresh
:class:`~dwc.record.InterpretedRecord`.  Records are independent of each
other so batches are fanned out over a thread pool; the only state shared
between workers is the taxonomy lookup cache.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional

from dwc.record import InterpretedRecord, VerbatimRecord
from qc.gbif import GbifGeocoder, build_taxonomy_matcher
from qc.protocols import Geocoder, TaxonomyMatcher

from .coordinates import CoordinateInterpreter
from .location import LocationInterpreter
from .taxonomy import TaxonomyInterpreter
from .temporal import TemporalInterpreter

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


class OccurrenceInterpreter:
    """Interpret verbatim records into interpreted records."""

    def __init__(
        self,
        temporal: TemporalInterpreter,
        location: LocationInterpreter,
        taxonomy: TaxonomyInterpreter,
        workers: int = DEFAULT_WORKERS,
    ):
        self.temporal = temporal
        self.location = location
        self.taxonomy = taxonomy
        self.workers = workers

    def interpret(self, verbatim: VerbatimRecord) -> InterpretedRecord:
        record = InterpretedRecord(key=verbatim.key)
        self.temporal.interpret_temporal(verbatim, record)
        self.location.interpret_location(verbatim, record)
        self.taxonomy.interpret_taxonomy(verbatim, record)
        logger.debug(f"Interpreted record {record.key} with {len(record.issues)} issues")
        return record

    def interpret_all(
        self, records: Iterable[VerbatimRecord], workers: Optional[int] = None
    ) -> List[InterpretedRecord]:
        """Interpret ``records`` in parallel, returning results in input order."""

        records = list(records)
        workers = workers or self.workers
        if workers <= 1 or len(records) <= 1:
            return [self.interpret(record) for record in records]

        logger.info(f"Interpreting {len(records)} records with {workers} workers")
        with ThreadPoolExecutor(max_workers=min(workers, len(records))) as executor:
            return list(executor.map(self.interpret, records))


def build_interpreter(
    cfg: Dict[str, Any],
    geocoder: Optional[Geocoder] = None,
    matcher: Optional[TaxonomyMatcher] = None,
) -> OccurrenceInterpreter:
    """Wire the interpreters together from configuration.

    ``geocoder`` and ``matcher`` default to the GBIF backed clients; the
    matcher is wrapped in the shared lookup cache.
    """

    geocoder = geocoder if geocoder is not None else GbifGeocoder.from_config(cfg)
    matcher = matcher if matcher is not None else build_taxonomy_matcher(cfg)
    section = cfg.get("interpretation", {})
    return OccurrenceInterpreter(
        temporal=TemporalInterpreter.from_config(cfg),
        location=LocationInterpreter.from_config(cfg, CoordinateInterpreter(geocoder)),
        taxonomy=TaxonomyInterpreter(matcher),
        workers=int(section.get("workers", DEFAULT_WORKERS)),
    )


__all__ = ["OccurrenceInterpreter", "build_interpreter", "DEFAULT_WORKERS"]
