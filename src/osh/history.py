"""Single-slot command history behind the '!!' recall."""

from dataclasses import dataclass

RECALL = "!!"


@dataclass
class History:
    """Remembers the most recent line submitted to the shell."""

    last: str | None = None

    def record(self, line: str) -> None:
        """Store line unless it is empty or is itself a recall."""
        if line and line != RECALL:
            self.last = line

    def recall(self) -> str | None:
        return self.last
