"""Built-in shell commands."""

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from osh.shell import Shell

BuiltinHandler: TypeAlias = Callable[[list[str], "Shell"], int]

BANNER = (
    "  |\\_/|        ****************************     (\\_/)\n"
    " / @ @ \\       *  \"Purrrfectly pleasant\"  *    (='.'=)\n"
    "( > º < )      *                              *    (\")_(\")\n"
    " `>>x<<´      *                               *\n"
    " /  O  \\     *********************************\n"
)


def builtin_ascii(args: list[str], shell: "Shell") -> int:
    print(BANNER)
    return 0


BUILTIN_REGISTRY: dict[str, BuiltinHandler] = {
    "ascii": builtin_ascii,
}
