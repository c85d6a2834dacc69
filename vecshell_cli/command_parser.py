from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from vecshell_exception_model.exception import UnrecognizedCommandException

UNRECOGNIZED_COMMAND_MESSAGE = "unrecognized command; use `help` to get help"


def tokenize(line: str) -> List[str]:
    """
    Split an input line on the space character.

    Each piece is trimmed of surrounding whitespace and empty pieces are
    dropped, so ``"a  b\\n"`` gives ``["a", "b"]``. There is no quoting: a
    token never contains a space.
    """
    tokens = []
    for piece in line.split(" "):
        piece = piece.strip()
        if piece:
            tokens.append(piece)
    return tokens


@dataclass(frozen=True)
class ParsedCommand:
    """A matched command: its name, bound positional arguments and trailing tokens"""
    name: str
    args: Dict[str, str] = field(default_factory=dict)
    trailing: Tuple[str, ...] = ()

    def __getitem__(self, key: str) -> str:
        return self.args[key]


@dataclass(frozen=True)
class CommandPattern:
    """
    Leading literal tokens followed by a fixed number of positional bindings.

    Attributes:
        name: Command name used to look up its handler.
        literals: Tokens that must appear verbatim at the start of the line.
        params: Names bound, in order, to the tokens after the literals.
        trailing: Whether any number of extra tokens may follow the params.
    """
    name: str
    literals: Tuple[str, ...]
    params: Tuple[str, ...] = ()
    trailing: bool = False

    def match(self, tokens: Sequence[str]) -> Optional[ParsedCommand]:
        prefix = len(self.literals)
        fixed = prefix + len(self.params)
        if len(tokens) < fixed:
            return None
        if len(tokens) > fixed and not self.trailing:
            return None
        if tuple(tokens[:prefix]) != self.literals:
            return None
        return ParsedCommand(
            name=self.name,
            args=dict(zip(self.params, tokens[prefix:fixed])),
            trailing=tuple(tokens[fixed:]),
        )


COMMAND_PATTERNS: Tuple[CommandPattern, ...] = (
    CommandPattern("tenant-new", ("tenant", "new"), ("tenant",)),
    CommandPattern("tenant-get", ("tenant", "get"), ("tenant",)),
    CommandPattern("database-new", ("database", "new"), ("tenant", "database")),
    CommandPattern("database-del", ("database", "del"), ("tenant", "database")),
    CommandPattern("database-get", ("database", "get"), ("tenant", "database")),
    CommandPattern("database-ls", ("database", "ls"), ("tenant",)),
    CommandPattern("collection-new", ("collection", "new"), ("tenant", "database", "collection"), trailing=True),
    CommandPattern("collection-del", ("collection", "del"), ("tenant", "database", "collection")),
    CommandPattern("collection-get", ("collection", "get"), ("tenant", "database", "collection")),
    CommandPattern("collection-ls", ("collection", "ls"), ("tenant", "database")),
    CommandPattern("collection-read", ("collection", "read"), ("tenant", "database", "collection")),
    CommandPattern("help", ("help",)),
    CommandPattern("exit", ("exit",)),
)


def match_command(tokens: Sequence[str]) -> ParsedCommand:
    """
    Match a token sequence against the command grammar.

    Raises:
        UnrecognizedCommandException: if no pattern matches, including for an empty line
    """
    for pattern in COMMAND_PATTERNS:
        command = pattern.match(tokens)
        if command is not None:
            return command
    raise UnrecognizedCommandException(UNRECOGNIZED_COMMAND_MESSAGE, list(tokens))


def parse_line(line: str) -> ParsedCommand:
    return match_command(tokenize(line))
