"""Built-in terminal commands.

Every handler takes the argument list and the current filesystem and
returns a ``CommandResult``. Handlers never raise: path problems and
clipboard failures are reported through the output string, and the
filesystem they return is the one they were given unless the command is
``cd``.
"""

import math
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from functools import partial
from types import MappingProxyType
from typing import Callable, List, Mapping, NamedTuple, Optional, Tuple

import pyperclip

from .output import (
    CLEAR_TERMINAL, DIRECTORY, FILE, CoffeeOutput, GrepMatch, GrepOutput,
    GridItem, GridOutput, ListOutput, MatrixOutput, TextOutput, to_json,
)
from .vfs import (
    VFS, Directory, File, PathError, change_directory, format_path,
    get_current_directory, read_file, walk_files,
)


class ParamType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class CommandParameter:
    name: str
    type: ParamType
    required: bool
    description: str


class CommandResult(NamedTuple):
    output: str
    updated_vfs: VFS


CommandAction = Callable[[List[str], VFS], CommandResult]
ClipboardWriter = Callable[[str], None]


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    usage: str
    parameters: Tuple[CommandParameter, ...]
    action: CommandAction

    @property
    def hidden(self) -> bool:
        """Commands without a description are left out of ``help``."""
        return self.description == ""


CommandRegistry = Mapping[str, Command]

ABOUT_TEXT = (
    "ResumeTerminal v1.0\n"
    "An interactive command-line interface for exploring a personal resume.\n"
    "Created with Python, cmd and colorama."
)

# copy <field> -> file under personalInfo/contact
CONTACT_FIELDS: "OrderedDict[str, str]" = OrderedDict([
    ("email", "email.txt"),
    ("phone", "phone.txt"),
    ("website", "website.txt"),
    ("linkedin", "linkedin.txt"),
    ("github", "github.txt"),
])

MATRIX_DEFAULT = (12, 32)
MATRIX_LINES = (4, 32)
MATRIX_COLUMNS = (8, 64)


def _clamp(value: int, bounds: Tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, value))


def _as_number(text: str) -> Optional[int]:
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return int(value)


# ---------- Handlers ----------
def h_help(args: List[str], vfs: VFS, registry: CommandRegistry) -> CommandResult:
    """List visible commands, or describe one command by exact name.

    Hidden commands are left out of the listing but can still be looked up
    directly.
    """
    if not args:
        lines = [f"{cmd.name}: {cmd.description}" for cmd in registry.values() if not cmd.hidden]
        return CommandResult("\n".join(lines), vfs)
    cmd = registry.get(args[0])
    if cmd is None:
        return CommandResult(f"Unknown command: {args[0]}", vfs)
    return CommandResult(f"{cmd.name}: {cmd.description}\nUsage: {cmd.usage}", vfs)


def h_about(args: List[str], vfs: VFS) -> CommandResult:
    return CommandResult(ABOUT_TEXT, vfs)


def h_coffee(args: List[str], vfs: VFS) -> CommandResult:
    return CommandResult(to_json(CoffeeOutput()), vfs)


def h_matrix(args: List[str], vfs: VFS) -> CommandResult:
    """Matrix rain. Usage: matrix [lines] [columns]

    Both numbers must be given; otherwise the defaults (12 x 32) apply.
    """
    lines, columns = MATRIX_DEFAULT
    if len(args) == 2:
        n_lines, n_columns = _as_number(args[0]), _as_number(args[1])
        if n_lines is not None and n_columns is not None:
            lines = _clamp(n_lines, MATRIX_LINES)
            columns = _clamp(n_columns, MATRIX_COLUMNS)
    return CommandResult(to_json(MatrixOutput(lines=lines, columns=columns)), vfs)


def h_cd(args: List[str], vfs: VFS) -> CommandResult:
    path = args[0] if args else "/"
    try:
        updated = change_directory(vfs, path)
    except PathError as e:
        return CommandResult(str(e), vfs)
    return CommandResult(f"Changed directory to {format_path(updated.current_path)}", updated)


def h_ls(args: List[str], vfs: VFS) -> CommandResult:
    try:
        current = get_current_directory(vfs)
    except PathError as e:
        return CommandResult(str(e), vfs)
    items = tuple(
        GridItem(name=name, kind=DIRECTORY if isinstance(node, Directory) else FILE)
        for name, node in current.children.items()
    )
    return CommandResult(to_json(GridOutput(items=items)), vfs)


def h_cat(args: List[str], vfs: VFS) -> CommandResult:
    """Show a file. Multi-line files come back as a list of their non-blank lines."""
    if not args:
        return CommandResult("Usage: cat <filename>", vfs)
    try:
        content = read_file(vfs, args[0])
    except PathError as e:
        return CommandResult(str(e), vfs)
    if "\n" in content:
        items = tuple(line for line in content.split("\n") if line.strip())
        return CommandResult(to_json(ListOutput(items=items)), vfs)
    return CommandResult(to_json(TextOutput(content=content)), vfs)


def h_clear(args: List[str], vfs: VFS) -> CommandResult:
    return CommandResult(CLEAR_TERMINAL, vfs)


def h_pwd(args: List[str], vfs: VFS) -> CommandResult:
    return CommandResult(format_path(vfs.current_path), vfs)


def h_grep(args: List[str], vfs: VFS) -> CommandResult:
    """Case-insensitive search of every file below the current directory.

    One match is reported per matching line. Paths are relative to the
    current directory. Usage: grep <keyword>
    """
    if len(args) != 1:
        return CommandResult("Usage: grep <keyword>", vfs)
    keyword = args[0].lower()
    try:
        current = get_current_directory(vfs)
    except PathError as e:
        return CommandResult(str(e), vfs)
    matches = []
    for path, node in walk_files(current):
        for number, line in enumerate(node.content.split("\n"), start=1):
            if keyword in line.lower():
                matches.append(GrepMatch(path=path, line=number, content=line, keyword=keyword))
    if not matches:
        return CommandResult(f"No matches found for '{keyword}'", vfs)
    return CommandResult(to_json(GrepOutput(matches=tuple(matches))), vfs)


def _tree_lines(directory: Directory, prefix: str = "") -> List[str]:
    lines: List[str] = []
    entries = list(directory.children.values())
    for idx, node in enumerate(entries):
        last = idx == len(entries) - 1
        connector = "└── " if last else "├── "
        is_dir = isinstance(node, Directory)
        lines.append(prefix + connector + node.name + ("/" if is_dir else ""))
        if is_dir:
            lines.extend(_tree_lines(node, prefix + ("    " if last else "│   ")))
    return lines


def h_tree(args: List[str], vfs: VFS) -> CommandResult:
    if args:
        return CommandResult("Usage: tree", vfs)
    try:
        current = get_current_directory(vfs)
    except PathError as e:
        return CommandResult(str(e), vfs)
    lines = [format_path(vfs.current_path)] + _tree_lines(current)
    return CommandResult(to_json(TextOutput(content="\n".join(lines))), vfs)


def h_copy(args: List[str], vfs: VFS, clipboard: ClipboardWriter) -> CommandResult:
    """Copy a contact field to the clipboard. Usage: copy <field>

    Contact details always come from ``/personalInfo/contact``, whatever the
    current directory is.
    """
    if len(args) != 1:
        return CommandResult(
            "Usage: copy <field> (where field is email, phone, website, linkedin, or github)", vfs
        )
    field_name = args[0].lower()
    info = vfs.root.children.get("personalInfo")
    contact = info.children.get("contact") if isinstance(info, Directory) else None
    if not isinstance(contact, Directory):
        return CommandResult("Contact information not found", vfs)
    filename = CONTACT_FIELDS.get(field_name)
    if filename is None:
        return CommandResult(f"Invalid field. Available fields: {', '.join(CONTACT_FIELDS)}", vfs)
    node = contact.children.get(filename)
    if not isinstance(node, File) or not node.content:
        return CommandResult(f"Field not found: {field_name}", vfs)
    try:
        clipboard(node.content)
    except Exception as e:
        return CommandResult(f"Failed to copy to clipboard: {str(e) or 'Unknown error'}", vfs)
    return CommandResult(f"Copied {field_name} to clipboard", vfs)


# ---------- Registry ----------
def _param(name: str, type_: ParamType, required: bool, description: str) -> CommandParameter:
    return CommandParameter(name=name, type=type_, required=required, description=description)


def build_registry(clipboard: Optional[ClipboardWriter] = None) -> CommandRegistry:
    """Create the read-only command registry.

    ``clipboard`` receives the text for ``copy``; it defaults to the system
    clipboard through pyperclip.
    """
    commands: "OrderedDict[str, Command]" = OrderedDict()
    registry = MappingProxyType(commands)
    writer = clipboard if clipboard is not None else pyperclip.copy

    def add(name: str, description: str, usage: str, action: CommandAction,
            *parameters: CommandParameter) -> None:
        commands[name] = Command(name, description, usage, tuple(parameters), action)

    # empty description: hidden from help
    add("coffee", "", "coffee", h_coffee)
    add("help", "Display information about available commands", "help [command]",
        partial(h_help, registry=registry),
        _param("command", ParamType.STRING, False, "Specific command to get help for"))
    add("about", "Display information about this ResumeTerminal", "about", h_about)
    add("matrix", "", "matrix [lines] [columns]", h_matrix,
        _param("lines", ParamType.NUMBER, False, "Number of lines (default 12, min 4, max 32)"),
        _param("columns", ParamType.NUMBER, False, "Number of columns (default 32, min 8, max 64)"))
    add("cd", "Change current directory", "cd <directory> | cd..", h_cd,
        _param("directory", ParamType.STRING, True, "The directory to change to"))
    add("ls", "List contents of current directory", "ls", h_ls)
    add("cat", "Display file contents", "cat <file>", h_cat,
        _param("file", ParamType.STRING, True, "The file to display"))
    add("clear", "Clear the terminal screen", "clear", h_clear)
    add("pwd", "Print current working directory", "pwd", h_pwd)
    add("grep", "Search for a specified pattern within files", "grep <keyword>", h_grep,
        _param("keyword", ParamType.STRING, True, "The search term to look for in files"))
    add("tree", "Display the directory structure in a tree format", "tree", h_tree)
    add("copy", "Copy contact information to clipboard", "copy <field>",
        partial(h_copy, clipboard=writer),
        _param("field", ParamType.STRING, True,
               "The field to copy (email, phone, website, linkedin, github)"))
    return registry
