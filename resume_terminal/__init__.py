"""ResumeTerminal: explore a resume from a simulated shell."""

from .commands import Command, CommandResult, build_registry
from .loader import load_resume
from .models import ResumeDocument
from .parser import ParsedCommand, execute_command, parse_command
from .session import TerminalSession
from .vfs import VFS, PathError, build_vfs

__version__ = "1.0.0"

__all__ = [
    "Command", "CommandResult", "build_registry", "load_resume",
    "ResumeDocument", "ParsedCommand", "execute_command", "parse_command",
    "TerminalSession", "VFS", "PathError", "build_vfs",
]
