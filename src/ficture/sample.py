"""Per-cell sample type."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Sample:
    """Elevation and moisture at a single point on the map.

    Both factors are usually normalized to [0, 1] by the pipeline, but the
    type itself does not enforce a range.
    """

    elevation: float
    moisture: float
