"""Main shell loop: prompt, read, parse, dispatch, repeat."""

import argparse
import sys

from pydantic import ValidationError

from osh.builtins import BUILTIN_REGISTRY
from osh.config import ShellConfig, describe_errors
from osh.history import RECALL, History
from osh.pipeline import Command, LaunchResult, execute_command, parse_commands
from osh.tokenizer import split_units, tokenize

EXIT = "exit"

SELF_TEST_LINES = (
    "ls",
    "ls -al",
    "ls & whoami ;",
    "ls > junk.txt",
    "cat < junk.txt",
    "ls | wc",
    "ascii",
)


class Shell:
    """Shell state and main loop."""

    def __init__(self, config: ShellConfig | None = None) -> None:
        self.config = config if config is not None else ShellConfig()
        self.history = History()
        self.jobs: list[LaunchResult] = []

    def run_line(self, line: str) -> list[LaunchResult]:
        """Run every command unit of a line, left to right.

        1. Split on ';' and strip a trailing '&'
        2. Tokenize, resolve redirections and pipes
        3. Dispatch builtins, launch everything else

        A unit that fails to parse or launch never stops the units after it.
        """
        self._reap_jobs()
        results: list[LaunchResult] = []

        for text, background in split_units(line):
            # Commands closed by "&" are launched before a later error in the unit
            try:
                for cmd in parse_commands(tokenize(text), background):
                    if cmd.pipe_argv is None and cmd.argv[0] in BUILTIN_REGISTRY:
                        self._run_builtin(cmd)
                        continue

                    launched = execute_command(cmd)
                    self.jobs.extend(r for r in launched if r.detached)
                    results.extend(launched)
            except ValueError as e:
                print(f"osh: {e}", file=sys.stderr)

        return results

    def _run_builtin(self, cmd: Command) -> int:
        """Run a builtin command, handling stdout redirection."""
        old_stdout = None
        fh = None
        if cmd.stdout_file:
            try:
                fh = open(cmd.stdout_file, "w")  # noqa: SIM115
            except OSError as e:
                print(f"osh: {e.filename}: {e.strerror}", file=sys.stderr)
                return 1
            old_stdout = sys.stdout
            sys.stdout = fh
        try:
            handler = BUILTIN_REGISTRY[cmd.argv[0]]
            return handler(cmd.argv[1:], self)
        finally:
            if old_stdout is not None:
                sys.stdout = old_stdout
            if fh:
                fh.close()

    def _reap_jobs(self) -> None:
        """Forget background children that have already exited."""
        self.jobs = [job for job in self.jobs if job.process.poll() is None]

    def handle_line(self, line: str) -> bool:
        """Process one line of input. Returns False when the shell should exit."""
        line = line.strip()

        if line == RECALL:
            last = self.history.recall()
            if last is None:
                print("No commands in history.")
                return True
            print(f"Executing last command: {last}")
            self.run_line(last)
            return True

        max_line = self.config.max_line
        if max_line is not None and len(line) > max_line:
            print(f"osh: line too long (max {max_line} characters)", file=sys.stderr)
            return True

        self.history.record(line)

        if line == EXIT:
            return False
        if not line:
            return True

        self.run_line(line)
        return True

    def run(self) -> None:
        """Main shell loop."""
        while True:
            try:
                line = input(self.config.prompt)
            except (EOFError, KeyboardInterrupt):
                print()
                print("Exiting shell")
                break

            if not self.handle_line(line):
                break

    def run_self_test(self) -> None:
        """Run a fixed set of lines that exercise every operator."""
        print("*** Running basic tests ***")
        for number, line in enumerate(SELF_TEST_LINES, start=1):
            print(f"* {number}. Testing {line} *")
            self.run_line(line)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="osh",
        description="A small shell with redirection, two-stage pipes and background jobs.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--self-test",
        action="store_true",
        help="run the built-in sample commands and exit",
    )
    mode.add_argument(
        "--interactive",
        action="store_true",
        help="read commands from standard input (the default)",
    )
    parser.add_argument("--prompt", help="prompt string (default: $OSH_PROMPT or 'osh> ')")
    parser.add_argument(
        "--max-line",
        metavar="N",
        help="reject input lines longer than N characters (default: $OSH_MAX_LINE, unlimited)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {
        name: value
        for name, value in (("prompt", args.prompt), ("max_line", args.max_line))
        if value is not None
    }
    try:
        config = ShellConfig(**overrides)
    except ValidationError as e:
        parser.error(describe_errors(e))

    shell = Shell(config)
    if args.self_test:
        shell.run_self_test()
    else:
        shell.run()
