"""Ordered anchor container: the unit of persistence and code generation."""

from __future__ import annotations

import logging
import uuid
from typing import Iterable, Iterator, List, Optional, Tuple

from .handle import AnchorPoint, Handle, HandleRef

logger = logging.getLogger(__name__)


class Path:
    """Ordered, insertion-order-significant sequence of anchors.

    A curve segment exists between every adjacent pair ``(path[i], path[i+1])``;
    a path with fewer than two anchors has nothing to render. Anchor ids are
    unique within a path.

    The path is also the single owner of the drag alias: while a drag gesture
    is active, :attr:`dragged` names the locked handle by identity.
    """

    def __init__(self, anchors: Iterable[AnchorPoint] = ()) -> None:
        self._anchors: List[AnchorPoint] = []
        self.dragged: Optional[HandleRef] = None
        for anchor in anchors:
            self.append(anchor)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._anchors)

    def __iter__(self) -> Iterator[AnchorPoint]:
        return iter(self._anchors)

    def __getitem__(self, index: int) -> AnchorPoint:
        return self._anchors[index]

    @property
    def ids(self) -> List[uuid.UUID]:
        return [anchor.id for anchor in self._anchors]

    def is_empty(self) -> bool:
        return not self._anchors

    def segments(self) -> Iterator[Tuple[int, AnchorPoint, AnchorPoint]]:
        """Yield ``(index, start, end)`` for every renderable segment."""
        for idx in range(len(self._anchors) - 1):
            yield idx, self._anchors[idx], self._anchors[idx + 1]

    def index_of(self, anchor_id: uuid.UUID) -> Optional[int]:
        for idx, anchor in enumerate(self._anchors):
            if anchor.id == anchor_id:
                return idx
        return None

    def anchor(self, anchor_id: uuid.UUID) -> Optional[AnchorPoint]:
        idx = self.index_of(anchor_id)
        return None if idx is None else self._anchors[idx]

    def resolve(self, ref: HandleRef) -> Optional[Tuple[AnchorPoint, Handle]]:
        """Look up the anchor and handle a reference points at."""
        anchor = self.anchor(ref.anchor_id)
        if anchor is None:
            return None
        return anchor, anchor.handle(ref.slot)

    # ------------------------------------------------------------------
    # Mutation helpers
    # ------------------------------------------------------------------
    def append(self, anchor: AnchorPoint) -> None:
        self.insert(len(self._anchors), anchor)

    def insert(self, index: int, anchor: AnchorPoint) -> None:
        if self.index_of(anchor.id) is not None:
            raise ValueError(f"Anchor {anchor.id} is already part of the path")
        self._anchors.insert(index, anchor)

    def remove_at(self, index: int) -> AnchorPoint:
        """Remove and return the anchor at ``index``; later anchors shift down."""
        anchor = self._anchors.pop(index)
        self._release_if_dragged(anchor)
        return anchor

    def truncate(self, index: int) -> List[AnchorPoint]:
        """Keep anchors ``[0, index)`` and return the removed tail."""
        removed = self._anchors[index:]
        del self._anchors[index:]
        for anchor in removed:
            self._release_if_dragged(anchor)
        return removed

    def clear(self) -> None:
        self._anchors.clear()
        self.dragged = None

    def clear_hover(self) -> None:
        for anchor in self._anchors:
            for _, handle in anchor.handles():
                handle.hovered = False

    def _release_if_dragged(self, anchor: AnchorPoint) -> None:
        if self.dragged is not None and self.dragged.anchor_id == anchor.id:
            logger.debug("Dropping drag lock on removed anchor %s", anchor.id)
            self.dragged = None

    def __repr__(self) -> str:
        return f"Path({', '.join(str(anchor) for anchor in self._anchors)})"
