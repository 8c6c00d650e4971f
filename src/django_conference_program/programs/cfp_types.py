"""Bookkeeping of which call-for-papers categories a program already has."""

from collections.abc import Iterable, Sequence
from typing import Any

EVENTS = "events"
BOOTHS = "booths"
TRACKS = "tracks"

CFP_TYPES: tuple[str, ...] = (EVENTS, BOOTHS, TRACKS)


class CfpTypeRegistry:
    """View over a program's CFPs keyed by their ``cfp_type``.

    Args:
        cfps: The program's existing CFP records (anything with a
            ``cfp_type`` attribute).
        types: The canonical, ordered set of categories.
    """

    def __init__(self, cfps: Iterable[Any], types: Sequence[str] = CFP_TYPES) -> None:
        self.types = tuple(types)
        self._by_type: dict[str, Any] = {}
        for cfp in cfps:
            self._by_type.setdefault(cfp.cfp_type, cfp)

    def existing_types(self) -> list[str]:
        return [cfp_type for cfp_type in self.types if cfp_type in self._by_type]

    def remaining_types(self) -> list[str]:
        """Categories without a CFP yet, in canonical order."""
        return [cfp_type for cfp_type in self.types if cfp_type not in self._by_type]

    def get(self, cfp_type: str) -> Any | None:
        return self._by_type.get(cfp_type)

    def primary_cfp(self) -> Any | None:
        """The CFP for events, or ``None`` when the program has none."""
        return self.get(EVENTS)
