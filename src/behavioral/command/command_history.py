from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

__all__ = [
    "CommandError",
    "EditError",
    "CommandResult",
    "EditorBuffer",
    "Command",
    "InsertText",
    "DeleteText",
    "MacroCommand",
    "CommandHistory",
]


# ==========================
# Module: command_history
# Purpose: Encapsulate edits of a text buffer as Commands and record them in a
#          LIFO history supporting single-step undo.
# Not thread-safe: callers sharing a history/buffer pair across threads must
# guard execute()/undo() with one lock.
# ==========================


# ---------- Errors & Result ----------

class CommandError(RuntimeError):
    """
    Raised when a command cannot complete successfully.
    """


class EditError(CommandError):
    """
    Raised when a buffer edit is invalid (e.g., deleting more than the buffer holds).
    """


@dataclass
class CommandResult:
    """
    Outcome of executing a command through the history.

    :param success: Whether the command executed and was recorded.
    :param error: The failure, if any.
    """
    success: bool
    error: Optional[BaseException] = None


# ---------- Receiver ----------

@dataclass
class EditorBuffer:
    """
    Text receiver holding an ordered sequence of characters.

    Only commands should call `append`/`truncate`.
    """
    content: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """
        :return: Buffer content as a string.
        """
        return "".join(self.content)

    def __len__(self) -> int:
        return len(self.content)

    def append(self, s: str) -> None:
        """
        Appends text at the end of the buffer.

        :param s: Text to append.
        """
        self.content.extend(s)

    def truncate(self, count: int) -> str:
        """
        Removes the last `count` characters.

        :param count: Number of characters to remove.
        :return: The removed text (for undo).
        :raises EditError: If `count` is negative or exceeds the buffer length.
        """
        if count < 0:
            raise EditError(f"Cannot remove a negative number of characters ({count}).")
        if count > len(self.content):
            raise EditError(f"Cannot remove {count} chars from a buffer of {len(self.content)}.")
        if count == 0:
            return ""
        removed = "".join(self.content[-count:])
        del self.content[-count:]
        return removed


# ---------- Commands ----------

class Command(ABC):
    """
    Base interface for reversible actions.

    A command is applied at most once at a time: execute() on an applied
    command raises CommandError, and undo() on one that is not applied is a no-op.

    :param description: Human-readable description of the command.
    """

    def __init__(self, description: str) -> None:
        self._description = description
        self._executed = False

    @property
    def description(self) -> str:
        """
        Returns a short, human-readable description of the command.

        :return: Command description string.
        """
        return self._description

    @property
    def executed(self) -> bool:
        """
        :return: True if the command's effect is currently applied.
        """
        return self._executed

    def _ensure_not_executed(self) -> None:
        if self._executed:
            raise CommandError(f"Command '{self._description}' is already applied.")

    @abstractmethod
    def execute(self) -> None:
        """
        Applies the command to its receiver. Must set `self._executed = True`
        on success.

        :raises CommandError: If the command cannot be applied or is already
                              applied. The receiver must be left unchanged.
        """

    @abstractmethod
    def undo(self) -> None:
        """
        Reverts exactly the effect of the last execute(). Safe to call only
        if `self.executed` is True.
        """


class InsertText(Command):
    """
    Appends text to the end of a buffer.

    :param buffer: Target buffer.
    :param text: Text to insert.
    """

    def __init__(self, buffer: EditorBuffer, text: str) -> None:
        super().__init__(description=f"Insert '{text}'")
        self._buffer = buffer
        self._text = text
        self._inserted_length = 0

    def execute(self) -> None:
        """Append and remember how many characters were added."""
        self._ensure_not_executed()
        self._buffer.append(self._text)
        self._inserted_length = len(self._text)
        self._executed = True

    def undo(self) -> None:
        """Remove exactly the appended characters."""
        if not self._executed:
            return
        self._buffer.truncate(self._inserted_length)
        self._inserted_length = 0
        self._executed = False


class DeleteText(Command):
    """
    Removes the last `count` characters of a buffer.

    :param buffer: Target buffer.
    :param count: Number of characters to delete.
    """

    def __init__(self, buffer: EditorBuffer, count: int) -> None:
        super().__init__(description=f"Delete {count} chars")
        self._buffer = buffer
        self._count = count
        self._deleted = ""

    def execute(self) -> None:
        """Delete and remember removed text for undo (may raise EditError)."""
        self._ensure_not_executed()
        self._deleted = self._buffer.truncate(self._count)
        self._executed = True

    def undo(self) -> None:
        """Re-append the previously deleted text."""
        if not self._executed:
            return
        self._buffer.append(self._deleted)
        self._deleted = ""
        self._executed = False


class MacroCommand(Command):
    """
    Executes a list of commands atomically: if any step fails, the steps
    already executed are undone in reverse order.

    :param description: Short description for the macro.
    :param items: Ordered list of commands to execute.
    """

    def __init__(self, description: str = "Macro", items: Optional[List[Command]] = None) -> None:
        super().__init__(description=description)
        self._items: List[Command] = list(items) if items else []
        self._executed_count = 0

    def add(self, cmd: Command) -> None:
        """
        Appends a command to the macro.

        :param cmd: Command to add.
        """
        self._items.append(cmd)

    def execute(self) -> None:
        """
        Executes sub-commands in order. On any failure, rolls back the executed
        ones; a CommandError is re-raised as CommandError for the macro, any
        other exception propagates unchanged.
        """
        self._ensure_not_executed()
        self._executed_count = 0
        try:
            for cmd in self._items:
                cmd.execute()
                self._executed_count += 1
        except BaseException as exc:  # rollback on any failure
            for cmd in reversed(self._items[: self._executed_count]):
                try:
                    cmd.undo()
                except CommandError as undo_exc:
                    logger.warning("Undo failed for '%s': %r", cmd.description, undo_exc)
            self._executed_count = 0
            if not isinstance(exc, CommandError):
                raise
            raise CommandError(f"Macro '{self.description}' rolled back due to failure.") from exc
        self._executed = True

    def undo(self) -> None:
        """Undo in reverse order only the commands that were executed."""
        if not self._executed:
            return
        for cmd in reversed(self._items[: self._executed_count]):
            cmd.undo()
        self._executed_count = 0
        self._executed = False


# ---------- Invoker ----------

class CommandHistory:
    """
    Executes commands and records the applied ones for undo.

    The stack always holds exactly the commands whose effects are applied,
    most recent last.
    """

    def __init__(self) -> None:
        self._stack: List[Command] = []

    def execute(self, cmd: Command) -> CommandResult:
        """
        Executes a command and records it on success.

        A command failing with CommandError is not recorded; the failure is
        returned instead of raised.

        :param cmd: Command to execute.
        :return: CommandResult describing the outcome.
        """
        try:
            cmd.execute()
        except CommandError as exc:
            logger.warning("Command '%s' failed and was not recorded: %s", cmd.description, exc)
            return CommandResult(success=False, error=exc)
        self._stack.append(cmd)
        logger.debug("Executed: %s (history size %d)", cmd.description, len(self._stack))
        return CommandResult(success=True)

    def undo(self) -> bool:
        """
        Undoes the most recent command, if any.

        :return: True if a command was undone; False if there was nothing to undo.
        """
        if not self._stack:
            logger.info("Nothing to undo")
            return False
        cmd = self._stack.pop()
        cmd.undo()
        logger.debug("Undone: %s (history size %d)", cmd.description, len(self._stack))
        return True

    def clear(self) -> None:
        """
        Forgets all recorded commands. The buffer is left as it is.
        """
        self._stack.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._stack)

    @property
    def stack(self) -> List[Command]:
        """
        :return: Copy of the recorded commands, oldest first.
        """
        return list(self._stack)

    @property
    def descriptions(self) -> List[str]:
        return [cmd.description for cmd in self._stack]

    def __len__(self) -> int:
        return len(self._stack)
