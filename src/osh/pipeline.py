"""Parse command units and launch them with I/O redirection and pipes."""

import os
import subprocess
import sys
from collections.abc import Iterator
from dataclasses import dataclass

from osh.tokenizer import PIPE


@dataclass
class Command:
    """A single command unit with its redirections.

    pipe_argv holds the second stage when the unit contains a pipe.
    """

    argv: list[str]
    stdin_file: str | None = None
    stdout_file: str | None = None
    background: bool = False
    pipe_argv: list[str] | None = None


@dataclass
class LaunchResult:
    """Outcome of launching one program.

    pid is None when no process could be created. returncode stays None
    for a detached child, which is never waited on here.
    """

    argv: list[str]
    pid: int | None = None
    returncode: int | None = None
    detached: bool = False
    process: subprocess.Popen | None = None


def split_background(tokens: list[str]) -> list[tuple[list[str], bool]]:
    """Split tokens on standalone '&' into (tokens, background) chunks.

    Every chunk closed by '&' runs in the background. The token after '>'
    or '<' is always a path, even when it is '&', and everything from the
    first '|' on belongs to the pipe's second stage.

    Example: ['ls', '&', 'whoami'] -> [(['ls'], True), (['whoami'], False)]
    """
    chunks: list[tuple[list[str], bool]] = []
    current: list[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]

        match token:
            case "|":
                current.extend(tokens[i:])
                break
            case "&":
                chunks.append((current, True))
                current = []
                i += 1
            case ">" | "<":
                current.extend(tokens[i : i + 2])
                i += 2
            case _:
                current.append(token)
                i += 1

    chunks.append((current, False))
    return chunks


def parse_command(tokens: list[str], background: bool = False) -> Command:
    """Resolve redirections and a pipe in the tokens of one command.

    '>' and '<' consume the token after them as a path; a dangling operator
    at the end is dropped. On '|', the rest of the tokens are taken verbatim
    as the second stage.

    Raises ValueError if a pipe has nothing on one of its sides.
    """
    cmd = Command(argv=[], background=background)

    i = 0
    while i < len(tokens):
        token = tokens[i]

        match token:
            case ">":
                if i + 1 < len(tokens):
                    cmd.stdout_file = tokens[i + 1]
                i += 2
            case "<":
                if i + 1 < len(tokens):
                    cmd.stdin_file = tokens[i + 1]
                i += 2
            case "|":
                if not cmd.argv or i + 1 >= len(tokens):
                    raise ValueError(f"syntax error near unexpected token `{PIPE}'")
                cmd.pipe_argv = tokens[i + 1 :]
                break
            case _:
                cmd.argv.append(token)
                i += 1

    return cmd


def parse_commands(tokens: list[str], background: bool = False) -> Iterator[Command]:
    """Yield the commands of one unit, left to right.

    A standalone '&' ends a command in the background and the remaining
    tokens start a new one; background applies to the last command.
    Commands with an empty argv are skipped. Commands before a malformed
    one are yielded before its ValueError is raised.
    """
    chunks = split_background(tokens)
    last = len(chunks) - 1
    for n, (chunk, chunk_background) in enumerate(chunks):
        cmd = parse_command(chunk, chunk_background or (background and n == last))
        if cmd.argv:
            yield cmd


def execute_command(cmd: Command) -> list[LaunchResult]:
    """Launch a parsed command, returning one result per process."""
    sys.stdout.flush()
    if cmd.pipe_argv is not None:
        return _execute_pipe(cmd.argv, cmd.pipe_argv)
    return [_execute_single(cmd)]


def _execute_single(cmd: Command) -> LaunchResult:
    """Launch a command with optional redirections, waiting unless it runs in the background."""
    try:
        stdin_fh, stdout_fh = _open_redirects(cmd)
    except OSError:
        return LaunchResult(argv=cmd.argv, returncode=1)

    try:
        proc = _spawn(cmd.argv, stdin=stdin_fh, stdout=stdout_fh)
    finally:
        if stdin_fh:
            stdin_fh.close()
        if stdout_fh:
            stdout_fh.close()

    if isinstance(proc, LaunchResult):
        return proc
    if cmd.background:
        return LaunchResult(argv=cmd.argv, pid=proc.pid, detached=True, process=proc)
    return LaunchResult(argv=cmd.argv, pid=proc.pid, returncode=proc.wait(), process=proc)


def _execute_pipe(producer: list[str], consumer: list[str]) -> list[LaunchResult]:
    """Run producer | consumer over one os.pipe() channel and wait for both."""
    read_fd, write_fd = os.pipe()
    try:
        first = _spawn(producer, stdout=write_fd)
        second = _spawn(consumer, stdin=read_fd)
    finally:
        # Close both ends in the parent so the consumer sees EOF
        os.close(read_fd)
        os.close(write_fd)

    results: list[LaunchResult] = []
    for argv, proc in ((producer, first), (consumer, second)):
        if isinstance(proc, LaunchResult):
            results.append(proc)
        else:
            results.append(
                LaunchResult(argv=argv, pid=proc.pid, returncode=proc.wait(), process=proc)
            )
    return results


def _spawn(argv: list[str], stdin=None, stdout=None) -> subprocess.Popen | LaunchResult:
    """Start argv with the given streams, or report why it could not start."""
    try:
        return subprocess.Popen(argv, stdin=stdin, stdout=stdout)
    except FileNotFoundError:
        print(f"osh: command not found: {argv[0]}", file=sys.stderr)
        return LaunchResult(argv=argv, returncode=127)
    except OSError as e:
        print(f"osh: {argv[0]}: {e.strerror}", file=sys.stderr)
        return LaunchResult(argv=argv, returncode=126)


def _open_redirects(cmd: Command) -> tuple:
    """Open file handles for redirections. Returns (stdin_fh, stdout_fh).

    Output files are created with mode 0666 minus the umask.
    """
    stdin_fh = None
    stdout_fh = None

    try:
        if cmd.stdout_file:
            stdout_fh = open(cmd.stdout_file, "w")  # noqa: SIM115
        if cmd.stdin_file:
            stdin_fh = open(cmd.stdin_file)  # noqa: SIM115
    except OSError as e:
        print(f"osh: {e.filename}: {e.strerror}", file=sys.stderr)
        if stdout_fh:
            stdout_fh.close()
        raise

    return stdin_fh, stdout_fh
