from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Iterable, List, Optional

from loguru import logger


class Command(ABC):
    description = ""

    @abstractmethod
    def execute(self):
        """Execute the command."""
        pass

    @abstractmethod
    def undo(self):
        """Undo the command."""
        pass

    def __repr__(self):
        return f"<{type(self).__name__}>"


class CommandBatch:
    """
    Ordered group of commands recorded as one undoable action.
    Insertion order is execution order; undo walks it backwards.
    """
    def __init__(self, commands: Iterable[Command] = (), description: str = ""):
        self.commands: List[Command] = list(commands)
        self.description = description or ", ".join(
            c.description for c in self.commands if c.description
        )

    def add(self, command: Command):
        self.commands.append(command)

    def __iter__(self):
        return iter(self.commands)

    def __reversed__(self):
        return reversed(self.commands)

    def __len__(self):
        return len(self.commands)

    def __bool__(self):
        return bool(self.commands)

    def __repr__(self):
        return f"<CommandBatch {self.description!r} ({len(self.commands)} commands)>"


class CommandHistory:
    """
    Two stacks of batches: executed (undo_stack) and undone (redo_stack).

    record/undo/redo either finish completely or leave the stacks and the
    edited state as they were: if a command raises, the commands already run
    in that step are rolled back and the exception propagates.
    """
    def __init__(self, max_len: Optional[int] = None, on_change: Optional[Callable] = None,
                 before_change: Optional[Callable] = None):
        self.max_len = max_len
        self.undo_stack = deque(maxlen=max_len)
        self.redo_stack = deque(maxlen=max_len)
        self.on_change = on_change
        # Runs before any mutation so in-progress gestures can back out first
        self.before_change = before_change

    @property
    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.redo_stack) > 0

    @property
    def undo_description(self) -> str:
        return self.undo_stack[-1].description if self.undo_stack else ""

    @property
    def redo_description(self) -> str:
        return self.redo_stack[-1].description if self.redo_stack else ""

    def record(self, *items) -> bool:
        """
        Execute a batch (or loose commands, grouped into one batch) and push it.

        Returns False without touching anything when there is nothing to record.
        """
        if len(items) == 1 and isinstance(items[0], CommandBatch):
            batch = items[0]
        else:
            for item in items:
                if not isinstance(item, Command):
                    raise TypeError(f"Cannot record {item!r}: pass one CommandBatch or Command objects")
            batch = CommandBatch(items)

        if not batch:
            logger.debug("History: empty batch not recorded")
            return False

        self._about_to_change()
        self._run(batch, forward=True)
        self.undo_stack.append(batch)
        self.redo_stack.clear()  # Branching history is discarded
        logger.debug(f"History: recorded {batch!r}")
        self._changed()
        return True

    def undo(self) -> bool:
        if not self.undo_stack:
            return False

        self._about_to_change()
        batch = self.undo_stack[-1]
        self._run(batch, forward=False)
        self.undo_stack.pop()
        self.redo_stack.append(batch)
        logger.debug(f"History: undone {batch!r}")
        self._changed()
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False

        self._about_to_change()
        batch = self.redo_stack[-1]
        self._run(batch, forward=True)
        self.redo_stack.pop()
        self.undo_stack.append(batch)
        logger.debug(f"History: redone {batch!r}")
        self._changed()
        return True

    def replace_history(self, undo_stack: Iterable[CommandBatch], redo_stack: Iterable[CommandBatch]):
        """Swap both stacks wholesale, e.g. when the active document changes."""
        self._about_to_change()
        self.undo_stack = deque(undo_stack, maxlen=self.max_len)
        self.redo_stack = deque(redo_stack, maxlen=self.max_len)
        logger.debug(f"History: replaced ({len(self.undo_stack)} undo, {len(self.redo_stack)} redo)")
        self._changed()

    def snapshot(self):
        """Copies of both stacks, bottom first, suitable for replace_history."""
        return list(self.undo_stack), list(self.redo_stack)

    def clear(self):
        self._about_to_change()
        self.undo_stack.clear()
        self.redo_stack.clear()
        logger.debug("History: cleared")
        self._changed()

    def _run(self, batch: CommandBatch, forward: bool):
        commands = list(batch) if forward else list(reversed(batch))
        done = []
        try:
            for command in commands:
                if forward:
                    command.execute()
                else:
                    command.undo()
                done.append(command)
        except Exception as e:
            action = "execute" if forward else "undo"
            logger.error(f"History: failed to {action} {command!r} in {batch!r}: {e}")
            # Put back whatever already ran so no partial step is visible
            for finished in reversed(done):
                if forward:
                    finished.undo()
                else:
                    finished.execute()
            raise

    def _about_to_change(self):
        if self.before_change is not None:
            self.before_change()

    def _changed(self):
        if self.on_change is not None:
            self.on_change()
