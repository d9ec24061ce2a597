"""Interpretation of verbatim occurrence records.

The interpreters live in their own modules and are imported from there:

``interpret.coordinates``
    Latitude/longitude parsing, sign and axis correction, country checks.
``interpret.temporal``
    Recorded, identified and modified dates.
``interpret.taxonomy``
    Name assembly and matching against the reference taxonomy.
``interpret.location``
    Country, coordinates, continent, elevation and depth for one record.
``interpret.occurrence``
    Runs all of the above per record.
"""

from .result import Confidence, OutcomeStatus, ParseOutcome

__all__ = ["Confidence", "OutcomeStatus", "ParseOutcome"]
