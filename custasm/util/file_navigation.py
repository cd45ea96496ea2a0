"""Resolution of relative file names inside a project."""

from __future__ import annotations

from pathlib import PurePath

from custasm.util.source import AsmError, Span

STD_PATH_PREFIX = "<std>/"


def is_std_path(path: str) -> bool:
    return path.startswith(STD_PATH_PREFIX)


def filename_validate_relative(filename: str, span: Span | None = None) -> None:
    """Reject file names that carry a drive prefix."""
    if PurePath(filename).drive:
        raise AsmError("invalid filename", span)


def filename_navigate(current: str, relative: str, span: Span | None = None) -> str:
    """Resolve ``relative`` against the directory of ``current``."""
    if is_std_path(relative):
        return relative

    current = current.replace("\\", "/")
    nav = relative.replace("\\", "/")

    filename_validate_relative(nav, span)

    components = current.split("/")[:-1]
    if nav.startswith("/"):
        components = []

    relative_components = [part for part in nav.split("/") if part and part != "."]
    if not relative_components:
        raise AsmError("invalid filename", span)
    components.extend(relative_components)

    resolved: list[str] = []
    for part in components:
        if part == "..":
            if not resolved:
                raise AsmError("cannot navigate out of project directory", span)
            resolved.pop()
        else:
            resolved.append(part)

    new_filename = "/".join(resolved)
    if not resolved or new_filename in ("", ".", "/"):
        raise AsmError("invalid filename", span)
    return new_filename