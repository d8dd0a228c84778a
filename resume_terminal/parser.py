"""Turn an input line into a command and run it against the registry."""

import logging
import re
from typing import List, NamedTuple

from .commands import CommandRegistry, CommandResult
from .vfs import VFS

logger = logging.getLogger(__name__)

# a double-quoted run (quotes dropped) or a run of non-space, non-quote characters
_TOKEN = re.compile(r'"([^"]*)"|[^\s"]+')


class ParsedCommand(NamedTuple):
    command: str
    args: List[str]


def tokenize(line: str) -> List[str]:
    tokens = []
    for m in _TOKEN.finditer(line):
        quoted = m.group(1)
        tokens.append(quoted if quoted is not None else m.group(0))
    return tokens


def parse_command(line: str) -> ParsedCommand:
    """Split ``line`` into a lowercased command name and its arguments.

    ``cd..`` is accepted as ``cd ..``. An unbalanced quote is ignored rather
    than treated as an error.
    """
    line = line.strip()
    if line.lower() == "cd..":
        return ParsedCommand("cd", [".."])
    tokens = tokenize(line)
    if not tokens:
        return ParsedCommand("", [])
    return ParsedCommand(tokens[0].lower(), tokens[1:])


def validate_command(parsed: ParsedCommand, registry: CommandRegistry) -> bool:
    return parsed.command in registry


def execute_command(parsed: ParsedCommand, registry: CommandRegistry, vfs: VFS) -> CommandResult:
    """Run ``parsed`` and return its output with the resulting filesystem.

    This never raises. Unknown commands leave ``vfs`` untouched; a handler
    that fails unexpectedly is logged and reported as an error message.
    """
    command = registry.get(parsed.command)
    if command is None:
        logger.debug("unknown command %r", parsed.command)
        return CommandResult(
            f"Error: '{parsed.command}' is not a valid command. Type 'help' for a list of commands.",
            vfs,
        )
    try:
        return command.action(list(parsed.args), vfs)
    except Exception as e:
        logger.exception("command %r failed", parsed.command)
        return CommandResult(f"Error: '{parsed.command}' failed: {e}", vfs)
