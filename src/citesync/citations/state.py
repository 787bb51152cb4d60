"""In-memory citation state shared by the reconciler and the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

from citesync.schemas.citations import Citation, Mode


@dataclass
class CitationState:
    """Citation store, position index and mode of one open document.

    ``store[i]`` is the citation of the slot at ordinal ``i``; the position
    index maps each citationID to that ordinal. The two are replaced
    together by whoever rebuilds them.

    Attributes:
        mode: Rendering discipline reported by the processor
        style_id: Style sent on initialize
        locale_id: Locale sent on initialize
        store: Citations in document order
        position_index: citationID -> slot ordinal
    """

    mode: Mode = Mode.NOTE
    style_id: str = "american-medical-association"
    locale_id: str = "en-US"
    store: list[Citation] = field(default_factory=list)
    position_index: dict[str, int] = field(default_factory=dict)

    def citation_for(self, citation_id: str) -> Citation | None:
        """Return the stored citation carrying a citationID, None if absent."""
        return next((c for c in self.store if c.citationID == citation_id), None)

    def replace(self, store: list[Citation], position_index: dict[str, int]) -> None:
        """Swap in a rebuilt store and position index."""
        self.store = list(store)
        self.position_index = dict(position_index)

    def reindex(self, position_index: dict[str, int]) -> None:
        """Adopt a position index rebuilt from slot order, reordering the store to match.

        Citations with no slot in the new index keep their relative order
        after the placed ones.
        """
        placed = sorted(
            (c for c in self.store if c.citationID in position_index),
            key=lambda c: position_index[c.citationID],
        )
        unplaced = [c for c in self.store if c.citationID not in position_index]
        self.replace(placed + unplaced, position_index)

    def snapshot(self) -> tuple[list[Citation], dict[str, int], Mode]:
        """Copy of (store, position index, mode)."""
        return list(self.store), dict(self.position_index), self.mode
