"""Unit tests for GitInvoker.

These tests substitute small shell scripts for git so that process output,
exit status and timing are under the test's control.
"""

import json
import stat
import traceback
from pathlib import Path

import anyio
import pytest
from structlog.typing import FilteringBoundLogger

from gitview.exceptions import CommandFailedError, CommandStartError
from gitview.repository import GitInvoker, invocation_key

PREFIX = ("--git-dir=/repo/.git",)


def write_script(path: Path, body: str) -> Path:
    """Write an executable /bin/sh script and return its path."""
    _ = path.write_text(f"#!/bin/sh\n{body}")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def read_events(log_file: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in log_file.read_text().splitlines()]


@pytest.fixture
def spawn_log(tmp_path: Path) -> Path:
    """File each fake git appends a line to when it starts."""
    return tmp_path / "spawns.txt"


@pytest.fixture
def echo_git(tmp_path: Path, spawn_log: Path) -> Path:
    """Fake git that prints its arguments, one per line, after a short delay."""
    return write_script(
        tmp_path / "echo-git",
        f"echo started >> '{spawn_log}'\nsleep 0.2\nprintf '%s\\n' \"$@\"\n",
    )


@pytest.fixture
def failing_git(tmp_path: Path, spawn_log: Path) -> Path:
    """Fake git that reports a missing path and exits 128."""
    return write_script(
        tmp_path / "failing-git",
        f"echo started >> '{spawn_log}'\n"
        "sleep 0.1\n"
        "echo partial\n"
        "echo \"fatal: path 'x' does not exist in 'HEAD'\" >&2\n"
        "exit 128\n",
    )


def spawned(spawn_log: Path) -> int:
    if not spawn_log.exists():
        return 0
    return len(spawn_log.read_text().splitlines())


class TestInvocationKey:
    def test_distinguishes_argument_boundaries(self) -> None:
        assert invocation_key(["show", "a b"]) != invocation_key(["show", "a", "b"])

    def test_equal_for_equal_arguments(self) -> None:
        assert invocation_key(("show", "HEAD:x")) == invocation_key(["show", "HEAD:x"])


class TestCommandFor:
    def test_places_prefix_before_subcommand(
        self, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable="/usr/bin/git", logger=logger)

        command = invoker.command_for(["show", "HEAD:README"])

        assert command == [
            "/usr/bin/git",
            "--git-dir=/repo/.git",
            "show",
            "HEAD:README",
        ]


@pytest.mark.anyio
class TestRun:
    async def test_returns_stdout_bytes(
        self, echo_git: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(echo_git), logger=logger)

        output = await invoker.run(["show", "HEAD:README"])

        assert output == b"--git-dir=/repo/.git\nshow\nHEAD:README\n"
        assert invoker.spawn_count == 1
        assert invoker.in_flight == 0

    async def test_non_zero_exit_raises_command_failed(
        self, failing_git: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(failing_git), logger=logger)

        with pytest.raises(CommandFailedError) as exc_info:
            _ = await invoker.run(["show", "HEAD:x"])

        err = exc_info.value
        assert err.exit_code == 128
        assert err.stderr == "fatal: path 'x' does not exist in 'HEAD'\n"
        assert err.stdout == b"partial\n"
        assert err.command == (str(failing_git), *PREFIX, "show", "HEAD:x")
        assert str(err).startswith(f"{failing_git} --git-dir=/repo/.git show HEAD:x\n")
        assert "does not exist" in str(err)

    async def test_missing_executable_raises_command_start(
        self, tmp_path: Path, logger: FilteringBoundLogger
    ) -> None:
        missing = tmp_path / "no-such-git"
        invoker = GitInvoker(PREFIX, executable=str(missing), logger=logger)

        with pytest.raises(CommandStartError) as exc_info:
            _ = await invoker.run(["show", "HEAD:x"])

        assert isinstance(exc_info.value.cause, OSError)
        assert invoker.in_flight == 0

    async def test_sequential_calls_spawn_each_time(
        self, echo_git: Path, spawn_log: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(echo_git), logger=logger)

        first = await invoker.run(["show", "HEAD:a"])
        second = await invoker.run(["show", "HEAD:a"])

        assert first == second
        assert invoker.spawn_count == 2
        assert spawned(spawn_log) == 2


@pytest.mark.anyio
class TestCoalescing:
    async def test_identical_concurrent_calls_share_one_process(
        self, echo_git: Path, spawn_log: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(echo_git), logger=logger)
        results: list[bytes] = []

        async def call() -> None:
            results.append(await invoker.run(["show", "v1:src/app.py"]))

        async with anyio.create_task_group() as tg:
            for _ in range(5):
                tg.start_soon(call)

        assert results == [b"--git-dir=/repo/.git\nshow\nv1:src/app.py\n"] * 5
        assert invoker.spawn_count == 1
        assert spawned(spawn_log) == 1
        assert invoker.in_flight == 0

    async def test_different_arguments_run_separately(
        self, echo_git: Path, spawn_log: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(echo_git), logger=logger)
        results: dict[str, bytes] = {}

        async def call(key: str) -> None:
            results[key] = await invoker.run(["show", key])

        async with anyio.create_task_group() as tg:
            tg.start_soon(call, "HEAD:a")
            tg.start_soon(call, "HEAD:b")
            tg.start_soon(call, "HEAD:a")

        assert results["HEAD:a"].endswith(b"HEAD:a\n")
        assert results["HEAD:b"].endswith(b"HEAD:b\n")
        assert invoker.spawn_count == 2
        assert spawned(spawn_log) == 2

    async def test_failure_is_delivered_to_every_waiter(
        self, failing_git: Path, spawn_log: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(failing_git), logger=logger)
        errors: list[CommandFailedError] = []

        async def call() -> None:
            try:
                _ = await invoker.run(["show", "HEAD:x"])
            except CommandFailedError as e:
                errors.append(e)

        async with anyio.create_task_group() as tg:
            for _ in range(3):
                tg.start_soon(call)

        assert len(errors) == 3
        assert all(e.exit_code == 128 for e in errors)
        assert spawned(spawn_log) == 1
        assert invoker.in_flight == 0

    async def test_shared_failure_traceback_does_not_grow(
        self, failing_git: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(failing_git), logger=logger)
        depths: list[int] = []

        async def call() -> None:
            try:
                _ = await invoker.run(["show", "HEAD:x"])
            except CommandFailedError as e:
                depths.append(len(traceback.extract_tb(e.__traceback__)))

        async with anyio.create_task_group() as tg:
            for _ in range(4):
                tg.start_soon(call)

        assert len(depths) == 4
        assert len(set(depths)) == 1

    async def test_ledger_entry_removed_after_completion(
        self, echo_git: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(echo_git), logger=logger)
        seen_in_flight: list[int] = []

        async def observe() -> None:
            await anyio.sleep(0.05)
            seen_in_flight.append(invoker.in_flight)

        async with anyio.create_task_group() as tg:
            tg.start_soon(invoker.run, ["show", "HEAD:a"])
            tg.start_soon(observe)

        assert seen_in_flight == [1]
        assert invoker.in_flight == 0

    async def test_cancelled_waiter_does_not_stop_shared_process(
        self, echo_git: Path, spawn_log: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(echo_git), logger=logger)
        results: list[bytes] = []

        async def leader() -> None:
            results.append(await invoker.run(["show", "HEAD:a"]))

        async with anyio.create_task_group() as tg:
            tg.start_soon(leader)
            await anyio.sleep(0)
            with anyio.move_on_after(0.05):
                _ = await invoker.run(["show", "HEAD:a"])

        assert results == [b"--git-dir=/repo/.git\nshow\nHEAD:a\n"]
        assert spawned(spawn_log) == 1


@pytest.mark.anyio
class TestLogging:
    async def test_logs_spawn_exit_and_coalesced(
        self, echo_git: Path, log_file: Path, logger: FilteringBoundLogger
    ) -> None:
        invoker = GitInvoker(PREFIX, executable=str(echo_git), logger=logger)

        async with anyio.create_task_group() as tg:
            tg.start_soon(invoker.run, ["show", "HEAD:a"])
            tg.start_soon(invoker.run, ["show", "HEAD:a"])

        events = read_events(log_file)
        names = [e["event"] for e in events]
        assert names.count("git.spawn") == 1
        assert names.count("git.exit") == 1
        assert names.count("git.coalesced") == 1

        exit_event = next(e for e in events if e["event"] == "git.exit")
        assert exit_event["exit_code"] == 0
        assert exit_event["level"] == "debug"
