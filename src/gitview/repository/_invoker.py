"""Coalescing git subprocess runner.

This module provides GitInvoker, the only place gitview spawns git. Identical
invocations that overlap in time share one subprocess and one result.
"""

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, final

import anyio
import anyio.abc

from gitview.exceptions import CommandFailedError, CommandStartError

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

# Separator for ledger keys; cannot occur inside a command-line argument
_KEY_SEPARATOR: Final = "\0"


def invocation_key(args: Sequence[str]) -> str:
    """Build the canonical ledger key for an argument list."""
    return _KEY_SEPARATOR.join(args)


@dataclass(slots=True)
class _Flight:
    """One in-progress invocation and the outcome its waiters will share."""

    done: anyio.Event = field(default_factory=anyio.Event)
    output: bytes | None = None
    error: Exception | None = None
    waiters: int = 1

    def outcome(self) -> bytes:
        if self.error is not None:
            # Every waiter raises the same instance; start each from a fresh traceback
            raise self.error.with_traceback(None)
        if self.output is None:  # pragma: no cover - set before done fires
            msg = "git invocation finished without a result"
            raise RuntimeError(msg)
        return self.output


async def _drain(stream: anyio.abc.ByteReceiveStream, buffer: bytearray) -> None:
    """Append everything received on a stream to a buffer."""
    try:
        async for chunk in stream:
            buffer.extend(chunk)
    except anyio.ClosedResourceError:
        # Stream closed, which is expected on process exit
        pass


@final
class GitInvoker:
    """Runs git with fixed location arguments, coalescing identical calls.

    Attributes:
        spawn_count: Number of subprocesses started so far.
    """

    __slots__ = ("_executable", "_flights", "_logger", "_prefix", "spawn_count")

    def __init__(
        self,
        prefix_args: Sequence[str],
        *,
        executable: str = "git",
        logger: "FilteringBoundLogger",  # noqa: UP037
    ) -> None:
        """Initialize the invoker.

        Args:
            prefix_args: Arguments placed before every subcommand, such as
                --git-dir and --work-tree.
            executable: Name or path of the git binary.
            logger: Logger for spawn and exit events.
        """
        self._executable = executable
        self._prefix = tuple(prefix_args)
        self._logger = logger
        self._flights: dict[str, _Flight] = {}
        self.spawn_count = 0

    @property
    def in_flight(self) -> int:
        """Number of distinct invocations currently running."""
        return len(self._flights)

    def command_for(self, args: Sequence[str]) -> list[str]:
        """Return the full argument vector that would be executed."""
        return [self._executable, *self._prefix, *args]

    async def run(self, args: Sequence[str]) -> bytes:
        """Run git with the given arguments and return its standard output.

        If an invocation with the same arguments is already running, waits for
        it and returns its result instead of starting another process.

        Args:
            args: Subcommand and its arguments.

        Returns:
            The raw bytes git wrote to standard output.

        Raises:
            CommandFailedError: If git exits with a non-zero status.
            CommandStartError: If git cannot be spawned.
        """
        key = invocation_key(args)
        flight = self._flights.get(key)
        if flight is not None:
            flight.waiters += 1
            self._logger.debug("git.coalesced", args=list(args), waiters=flight.waiters)
            await flight.done.wait()
            return flight.outcome()

        # Registered before the first await so concurrent callers find it
        flight = _Flight()
        self._flights[key] = flight
        try:
            # Once issued, an invocation always runs to completion
            with anyio.CancelScope(shield=True):
                flight.output = await self._spawn(args)
        except Exception as e:  # noqa: BLE001
            flight.error = e
        finally:
            del self._flights[key]
            flight.done.set()
        return flight.outcome()

    async def _spawn(self, args: Sequence[str]) -> bytes:
        command = self.command_for(args)
        self.spawn_count += 1
        self._logger.debug("git.spawn", command=command)

        try:
            process = await anyio.open_process(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            msg = f"Failed to start {self._executable}: {e}"
            raise CommandStartError(msg, command=command, cause=e) from e

        stdout = bytearray()
        stderr = bytearray()
        async with process:
            async with anyio.create_task_group() as tg:
                if process.stdout is not None:
                    tg.start_soon(_drain, process.stdout, stdout)
                if process.stderr is not None:
                    tg.start_soon(_drain, process.stderr, stderr)
                exit_code = await process.wait()

        self._logger.debug(
            "git.exit", command=command, exit_code=exit_code, stdout_bytes=len(stdout)
        )
        if exit_code != 0:
            error_text = stderr.decode("utf-8", errors="replace")
            msg = f"{' '.join(command)}\n{error_text}"
            raise CommandFailedError(
                msg,
                command=command,
                exit_code=exit_code,
                stderr=error_text,
                stdout=bytes(stdout),
            )
        return bytes(stdout)
