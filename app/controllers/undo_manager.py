"""
UndoManager - Bounded undo/redo history for circuit edits.

Executing a command through the manager records it; undoing moves it to
the redo history, and any fresh command discards what could be redone.
"""

import logging
from collections import deque
from typing import Optional

from controllers.commands import Command

logger = logging.getLogger(__name__)


class UndoManager:
    """
    Runs commands and keeps the last ``max_depth`` of them undoable.

    The oldest entry is dropped once the history is full.
    """

    def __init__(self, max_depth: int = 100):
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth!r}")
        self.max_depth = max_depth
        self._undo_stack: deque[Command] = deque(maxlen=max_depth)
        self._redo_stack: list[Command] = []

    def execute(self, command: Command) -> None:
        """Run ``command`` and record it; clears the redo history."""
        command.execute()
        self._undo_stack.append(command)
        self._redo_stack.clear()
        logger.debug("Executed: %s", command.get_description())

    def undo(self) -> bool:
        """
        Undo the most recent command.

        Returns:
            False if there was nothing to undo.
        """
        if not self._undo_stack:
            return False
        command = self._undo_stack.pop()
        command.undo()
        self._redo_stack.append(command)
        logger.debug("Undid: %s", command.get_description())
        return True

    def redo(self) -> bool:
        """
        Re-run the most recently undone command.

        Returns:
            False if there was nothing to redo.
        """
        if not self._redo_stack:
            return False
        command = self._redo_stack.pop()
        command.execute()
        self._undo_stack.append(command)
        logger.debug("Redid: %s", command.get_description())
        return True

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def get_undo_description(self) -> Optional[str]:
        return self._undo_stack[-1].get_description() if self._undo_stack else None

    def get_redo_description(self) -> Optional[str]:
        return self._redo_stack[-1].get_description() if self._redo_stack else None

    def history(self) -> list[str]:
        """Descriptions of the undoable commands, oldest first."""
        return [command.get_description() for command in self._undo_stack]

    def clear(self) -> None:
        """Drop all history (after a load or clear)."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    def get_undo_count(self) -> int:
        return len(self._undo_stack)

    def get_redo_count(self) -> int:
        return len(self._redo_stack)
