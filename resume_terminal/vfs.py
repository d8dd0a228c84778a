"""Virtual filesystem built from a resume.

The filesystem is a value: every navigation function returns a new ``VFS``
and nodes are never modified after the tree is built. Paths are tuples of
segments; the empty tuple is the root directory.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .models import ResumeDocument

logger = logging.getLogger(__name__)


class PathError(Exception):
    """A path that does not lead to the expected file or directory.

    The message is shown to the user as is.
    """


@dataclass(frozen=True)
class File:
    name: str
    content: str = ""


@dataclass(frozen=True)
class Directory:
    name: str
    children: Mapping[str, "Node"] = field(default_factory=lambda: MappingProxyType({}))


Node = Union[File, Directory]


@dataclass(frozen=True)
class VFS:
    root: Directory
    current_path: Tuple[str, ...] = ()


# ---------- Building ----------
def _file(name: str, content: str) -> File:
    return File(name=name, content=content)


def _dir(name: str, *nodes: Node) -> Directory:
    # names are unique among siblings; a later node with the same name wins
    return Directory(name=name, children=MappingProxyType({n.name: n for n in nodes}))


def sanitize_segment(text: str) -> str:
    """Turn free text (a company name) into a safe path segment.

    >>> sanitize_segment("Contoso Ltd.")
    'Contoso_Ltd.'
    """
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", text.strip())
    cleaned = re.sub(r"_+", "_", cleaned).strip("_")
    return cleaned or "company"


def _experience_dir(doc: ResumeDocument) -> Directory:
    jobs = []
    for index, exp in enumerate(doc.experience, start=1):
        jobs.append(_dir(
            f"{sanitize_segment(exp.company)}_{index}",
            _file("position.txt", exp.position),
            _file("location.txt", exp.location),
            _file("startDate.txt", exp.start_date),
            _file("endDate.txt", exp.end_date),
            _file("responsibilities.txt", "\n".join(exp.responsibilities)),
        ))
    return _dir("experience", *jobs)


def _personal_info_dir(doc: ResumeDocument) -> Directory:
    info = doc.personal_info
    contact_files = []
    for key in ("email", "phone", "website", "linkedin", "github"):
        value = getattr(info.contact, key)
        if value is not None:
            contact_files.append(_file(f"{key}.txt", value))
    return _dir(
        "personalInfo",
        _file("name.txt", info.name),
        _file("title.txt", info.title),
        _dir("contact", *contact_files),
    )


def _build_root(doc: ResumeDocument) -> Directory:
    projects = [
        _file(f"project{i}.txt", f"{p.name}\n{p.description}")
        for i, p in enumerate(doc.projects, start=1)
    ]
    return _dir(
        "/",
        _personal_info_dir(doc),
        _file("about.txt", doc.about),
        _experience_dir(doc),
        _dir(
            "skills",
            _file("technical.txt", ", ".join(doc.skills.technical)),
            _file("soft.txt", ", ".join(doc.skills.soft)),
        ),
        _dir("projects", *projects),
        _dir(
            "education",
            _file("university.txt", doc.education.university),
            _file("certifications.txt", "\n".join(doc.education.certifications)),
        ),
    )


def empty_vfs() -> VFS:
    """A filesystem with nothing but an empty root directory."""
    return VFS(root=_dir("/"))


def build_vfs(doc: Union[ResumeDocument, Mapping[str, Any], None]) -> VFS:
    """Project a resume into a fresh filesystem positioned at the root.

    ``doc`` may also be a raw mapping, which is validated first. A missing or
    malformed document never raises: the failure is logged and an empty
    filesystem is returned so the terminal stays usable.
    """
    if doc is None:
        logger.error("no resume document available; starting with an empty filesystem")
        return empty_vfs()
    try:
        if not isinstance(doc, ResumeDocument):
            doc = ResumeDocument.model_validate(doc)
        return VFS(root=_build_root(doc))
    except ValidationError as e:
        logger.error("invalid resume document: %s", e)
    except (AttributeError, TypeError) as e:
        logger.error("could not build filesystem from resume: %s", e)
    return empty_vfs()


# ---------- Navigation ----------
def format_path(segments: Tuple[str, ...]) -> str:
    return "/" + "/".join(segments)


def _walk(root: Directory, segments: Tuple[str, ...]) -> Optional[Directory]:
    """Follow ``segments`` from ``root``; ``None`` if any step is not a directory."""
    node: Node = root
    for segment in segments:
        if not isinstance(node, Directory):
            return None
        node = node.children.get(segment)
        if node is None:
            return None
    return node if isinstance(node, Directory) else None


def get_current_directory(vfs: VFS) -> Directory:
    current = _walk(vfs.root, vfs.current_path)
    if current is None:
        raise PathError("Invalid path")
    return current


def resolve_path(vfs: VFS, path: str) -> Tuple[str, ...]:
    """Resolve ``path`` against the current directory without checking existence.

    ``"/"`` is the root. A leading ``/`` makes the rest absolute. ``..`` drops
    one segment and stops at the root; ``.`` and empty segments are ignored.
    """
    if path == "/":
        return ()
    resolved: List[str] = [] if path.startswith("/") else list(vfs.current_path)
    for part in path.split("/"):
        if not part or part == ".":
            continue
        if part == "..":
            if resolved:
                resolved.pop()
            continue
        resolved.append(part)
    return tuple(resolved)


def change_directory(vfs: VFS, path: str) -> VFS:
    new_path = resolve_path(vfs, path)
    if _walk(vfs.root, new_path) is None:
        raise PathError(f"Directory not found: {path}")
    return replace(vfs, current_path=new_path)


def list_directory(vfs: VFS) -> List[str]:
    return list(get_current_directory(vfs).children)


def read_file(vfs: VFS, name: str) -> str:
    """Return the content of ``name`` in the current directory.

    Directories and empty files are reported as not found.
    """
    current = get_current_directory(vfs)
    node = current.children.get(name)
    if not isinstance(node, File) or not node.content:
        raise PathError(f"File not found: {name}")
    return node.content


def walk_files(directory: Directory, prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[str, File]]:
    """Yield ``(relative_path, file)`` for every file below ``directory``, depth first."""
    for name, node in directory.children.items():
        path = prefix + (name,)
        if isinstance(node, Directory):
            yield from walk_files(node, path)
        else:
            yield "/".join(path), node
