"""Split an input line into command units and tokens."""

SEPARATOR = ";"
BACKGROUND = "&"
PIPE = "|"


def tokenize(text: str) -> list[str]:
    """Split a command unit on whitespace.

    Tabs separate tokens just like spaces, so a unit of only tabs has no
    tokens and launches nothing. There is no quoting or escaping: operators
    must be separated from their neighbours by whitespace to be recognized.
    """
    return text.split()


def split_units(line: str) -> list[tuple[str, bool]]:
    """Split a line on ';' into (unit, background) pairs.

    A unit whose last non-whitespace character is '&' has it stripped and
    is flagged for background execution. Units without any tokens are
    dropped.

    Example: 'ls -l& ; ; pwd' -> [('ls -l', True), (' pwd', False)]
    """
    units: list[tuple[str, bool]] = []
    for segment in line.split(SEPARATOR):
        text = segment.rstrip()
        background = text.endswith(BACKGROUND)
        if background:
            text = text[: -len(BACKGROUND)]
        if tokenize(text):
            units.append((text, background))
    return units
