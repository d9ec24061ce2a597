"""Date interpretation.

The recorded (event) date is reconciled from atomic year/month/day fields
and a free text date.  The identification and last-modified dates are
parsed independently.  Each is bounded by a configurable earliest year and
by the current time.
"""

from __future__ import annotations

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from dwc.issues import IssueCode
from dwc.record import InterpretedRecord, VerbatimRecord
from dwc.terms import Term

from .result import Confidence, ParseOutcome
from .values import DateYMD

logger = logging.getLogger(__name__)

DEFAULT_MIN_YEAR = 1600

# Full dates, tried in order.  Day-first is tried before month-first.
FULL_DATE_FORMATS = [
    "%Y%m%d",        # "19990719"
    "%Y/%m/%d",      # "1999/07/19"
    "%Y.%m.%d",      # "1999.7.19"
    "%d-%m-%Y",      # "19-07-1999"
    "%m-%d-%Y",      # "07-19-1999"
    "%d/%m/%Y",      # "19/7/1999"
    "%m/%d/%Y",      # "7/19/1999"
    "%d.%m.%Y",      # "19.7.1999"
    "%m.%d.%Y",      # "7.19.1999"
    "%d %B %Y",      # "15 July 1969"
    "%d %b %Y",      # "15 Jul 1969"
    "%d-%b-%Y",      # "15-Jul-1969"
    "%B %d, %Y",     # "July 15, 1969"
    "%b %d, %Y",     # "Jul 15, 1969"
    "%B %d %Y",      # "July 15 1969"
    "%b %d %Y",      # "Jul 15 1969"
]

# Day-first format and the month-first reading of the same layout
AMBIGUOUS_FORMATS: Dict[str, str] = {
    "%d-%m-%Y": "%m-%d-%Y",
    "%d/%m/%Y": "%m/%d/%Y",
    "%d.%m.%Y": "%m.%d.%Y",
}

YEAR_MONTH_FORMATS = [
    "%Y-%m",         # "1999-07"
    "%Y/%m",         # "1999/07"
    "%m/%Y",         # "07/1999"
    "%B %Y",         # "July 1969"
    "%b %Y",         # "Jul 1969"
]

_YEAR_RE = re.compile(r"^\d{4}$")
_INT_RE = re.compile(r"^\d{1,4}(?:\.0+)?$")

_MONTH_NAMES: Dict[str, int] = {}
for _number in range(1, 13):
    _MONTH_NAMES[calendar.month_name[_number].lower()] = _number
    _MONTH_NAMES[calendar.month_abbr[_number].lower()] = _number


@dataclass(frozen=True)
class ParsedDate:
    """A free text date: the resolved parts and, when complete, the moment."""

    ymd: DateYMD
    confidence: Confidence = Confidence.DEFINITE
    moment: Optional[datetime] = None


def _strptime(value: str, fmt: str) -> Optional[datetime]:
    try:
        return datetime.strptime(value, fmt)
    except ValueError:
        return None


def parse_date_text(text: Optional[str]) -> Optional[ParsedDate]:
    """Parse free text into a (possibly partial) date, or ``None``."""

    if text is None:
        return None
    value = " ".join(text.split())
    if not value:
        return None

    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return ParsedDate(DateYMD(moment.year, moment.month, moment.day), moment=moment)
    except ValueError:
        pass

    for fmt in FULL_DATE_FORMATS:
        moment = _strptime(value, fmt)
        if moment is None:
            continue
        confidence = Confidence.DEFINITE
        alternative = AMBIGUOUS_FORMATS.get(fmt)
        if alternative is not None:
            other = _strptime(value, alternative)
            if other is not None and other != moment:
                logger.debug(f"Ambiguous day/month order in {value!r}, reading as day first")
                confidence = Confidence.PROBABLE
        return ParsedDate(DateYMD(moment.year, moment.month, moment.day), confidence, moment)

    for fmt in YEAR_MONTH_FORMATS:
        moment = _strptime(value, fmt)
        if moment is not None:
            return ParsedDate(DateYMD(moment.year, moment.month, None))

    if _YEAR_RE.match(value):
        return ParsedDate(DateYMD(int(value), None, None))
    return None


def parse_int(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    value = text.strip()
    if not _INT_RE.match(value):
        return None
    return int(float(value))


def parse_month(text: Optional[str]) -> Optional[int]:
    """Numeric month or an English month name; ``0`` is returned as is."""

    if text is None:
        return None
    value = text.strip().lower().rstrip(".")
    if value in _MONTH_NAMES:
        return _MONTH_NAMES[value]
    return parse_int(value)


def _days_in_month(year: Optional[int], month: int) -> int:
    # without a year, allow 29 February
    return calendar.monthrange(year if year is not None else 2000, month)[1]


def _is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


class TemporalInterpreter:
    """Interpret recorded, identified and modified dates."""

    def __init__(
        self,
        recorded_min_year: int = DEFAULT_MIN_YEAR,
        identified_min_year: int = DEFAULT_MIN_YEAR,
        modified_min_year: int = DEFAULT_MIN_YEAR,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.recorded_min_year = recorded_min_year
        self.identified_min_year = identified_min_year
        self.modified_min_year = modified_min_year
        self._clock = clock

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "TemporalInterpreter":
        section = cfg.get("interpretation", {})
        return cls(
            recorded_min_year=int(section.get("recorded_min_year", DEFAULT_MIN_YEAR)),
            identified_min_year=int(section.get("identified_min_year", DEFAULT_MIN_YEAR)),
            modified_min_year=int(section.get("modified_min_year", DEFAULT_MIN_YEAR)),
        )

    def interpret_recorded_date(
        self,
        year: Optional[str],
        month: Optional[str],
        day: Optional[str],
        date_text: Optional[str],
    ) -> ParseOutcome[DateYMD]:
        """Reconcile atomic date parts with a free text date.

        The free text wins: atomic parts that disagree with it are dropped.
        Atomic parts only fill in what partial free text leaves open.
        """

        if all(_is_blank(value) for value in (year, month, day, date_text)):
            return ParseOutcome.fail()

        atomic_year = parse_int(year)
        atomic_month = parse_month(month)
        atomic_day = parse_int(day)

        parsed = parse_date_text(date_text)
        confidence = Confidence.DEFINITE
        if parsed is not None:
            confidence = parsed.confidence
            y, m, d = parsed.ymd.year, parsed.ymd.month, parsed.ymd.day
            year_conflict = atomic_year is not None and atomic_year != y
            if year_conflict:
                logger.debug(f"Atomic year {atomic_year} disagrees with {date_text!r}, dropped")
            month_conflict = False
            if m is None:
                if atomic_month is not None and 1 <= atomic_month <= 12 and not year_conflict:
                    m = atomic_month
            elif atomic_month is not None and atomic_month != m:
                month_conflict = True
                logger.debug(f"Atomic month {atomic_month} disagrees with {date_text!r}, dropped")
            if d is None and m is not None and not (year_conflict or month_conflict):
                d = atomic_day
        else:
            if not _is_blank(date_text):
                logger.debug(f"Unparsable date text {date_text!r}, using atomic fields")
            y, m, d = atomic_year, atomic_month, atomic_day
            if m is not None and not 1 <= m <= 12:
                # an invalid month takes the day with it
                m, d = None, None

        if d is not None:
            limit = _days_in_month(y, m) if m is not None else 31
            if not 1 <= d <= limit:
                d = None

        ymd = DateYMD(y, m, d)
        if ymd.is_empty:
            return ParseOutcome.fail([IssueCode.RECORDED_DATE_INVALID])

        if y is not None and not self.recorded_min_year <= y <= self._clock().year:
            logger.debug(f"Recorded year {y} outside [{self.recorded_min_year}, now]")
            return ParseOutcome.fail([IssueCode.RECORDED_DATE_UNLIKELY])

        return ParseOutcome.success(ymd, confidence)

    def _interpret_moment(
        self, text: Optional[str], min_year: int, unlikely: IssueCode
    ) -> ParseOutcome[datetime]:
        parsed = parse_date_text(text)
        if parsed is None or parsed.ymd.date is None:
            return ParseOutcome.fail()

        moment = parsed.moment
        if moment is None:
            moment = datetime(parsed.ymd.year, parsed.ymd.month, parsed.ymd.day)
        comparable = _naive_utc(moment)
        if comparable < datetime(min_year, 1, 1) or comparable > _naive_utc(self._clock()):
            return ParseOutcome.fail([unlikely])
        return ParseOutcome.success(moment, parsed.confidence)

    def interpret_identified_date(self, text: Optional[str]) -> ParseOutcome[datetime]:
        return self._interpret_moment(text, self.identified_min_year, IssueCode.IDENTIFIED_DATE_UNLIKELY)

    def interpret_modified_date(self, text: Optional[str]) -> ParseOutcome[datetime]:
        return self._interpret_moment(text, self.modified_min_year, IssueCode.MODIFIED_DATE_UNLIKELY)

    def interpret_temporal(self, verbatim: VerbatimRecord, record: InterpretedRecord) -> None:
        """Fill the date fields of ``record`` from ``verbatim``."""

        recorded = self.interpret_recorded_date(
            verbatim.value(Term.year),
            verbatim.value(Term.month),
            verbatim.value(Term.day),
            verbatim.value(Term.eventDate),
        )
        if recorded.is_successful:
            record.year = recorded.payload.year
            record.month = recorded.payload.month
            record.day = recorded.payload.day
            record.eventDate = recorded.payload.date
        record.add_issues(recorded.issues)

        identified = self.interpret_identified_date(verbatim.value(Term.dateIdentified))
        if identified.is_successful:
            record.dateIdentified = identified.payload
        record.add_issues(identified.issues)

        modified = self.interpret_modified_date(verbatim.value(Term.modified))
        if modified.is_successful:
            record.modified = modified.payload
        record.add_issues(modified.issues)


__all__ = [
    "TemporalInterpreter",
    "ParsedDate",
    "parse_date_text",
    "parse_int",
    "parse_month",
    "FULL_DATE_FORMATS",
    "YEAR_MONTH_FORMATS",
]
