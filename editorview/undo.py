import logging
from dataclasses import dataclass
from typing import Any, Optional

from diff_match_patch import diff_match_patch

from .constants import EditorConstants
from .markup import Point

logger = logging.getLogger(__name__)


class PatchCodec:
    """Reversible text patches backed by diff-match-patch."""

    def __init__(self):
        self._dmp = diff_match_patch()

    def make(self, from_text: str, to_text: str) -> list[Any]:
        return self._dmp.patch_make(from_text, to_text)

    def apply(self, patches: list[Any], text: str) -> tuple[str, bool]:
        patched, results = self._dmp.patch_apply(patches, text)
        return patched, all(results)


@dataclass
class UndoPatch:
    cursor: Point
    patches: list[Any]


class UndoManager:
    def __init__(self, max_entries: int = EditorConstants.UNDO_LIMIT, codec: Optional[PatchCodec] = None):
        self._undo_stack: list[UndoPatch] = []
        self._redo_stack: list[UndoPatch] = []
        self._max_entries = max_entries
        self._codec = codec or PatchCodec()

    def clear(self):
        self._undo_stack.clear()
        self._redo_stack.clear()

    def clear_redo(self):
        self._redo_stack.clear()

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def record(self, prev_content: str, new_content: str, prev_cursor: Point) -> bool:
        """Push a patch restoring ``prev_content`` if the content changed."""
        if new_content == prev_content:
            return False
        self._undo_stack.append(UndoPatch(prev_cursor, self._codec.make(new_content, prev_content)))
        # Cap history
        if len(self._undo_stack) > self._max_entries:
            self._undo_stack.pop(0)
        return True

    def undo(self, current: str, cursor: Point) -> Optional[tuple[str, Point]]:
        """Revert the latest change to ``current``.

        Returns the restored content and cursor, or None when there is nothing
        to undo or the patch no longer applies. The entry is consumed either way.
        """
        if not self._undo_stack:
            return None
        entry = self._undo_stack.pop()
        restored, ok = self._codec.apply(entry.patches, current)
        if not ok:
            logger.debug("undo patch failed to apply")
            return None
        self._redo_stack.append(UndoPatch(cursor, self._codec.make(restored, current)))
        return restored, entry.cursor

    def redo(self, current: str) -> Optional[tuple[str, Point]]:
        if not self._redo_stack:
            return None
        entry = self._redo_stack.pop()
        restored, ok = self._codec.apply(entry.patches, current)
        if not ok:
            logger.debug("redo patch failed to apply")
            return None
        return restored, entry.cursor
