"""Access to source files, either in memory or on disk."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from custasm.util.source import AsmError, CharCounter, Span

FILESERVER_MOCK_WRITE_FILENAME_SUFFIX = "_written"


class FileServer(ABC):
    """Maps file names to integer handles and serves their contents."""

    @abstractmethod
    def get_handle(self, filename: str, span: Span | None = None) -> int:
        """Return the handle of a file, raising :class:`AsmError` if missing."""

    @abstractmethod
    def get_filename(self, handle: int) -> str:
        """Return the file name a handle refers to."""

    @abstractmethod
    def get_bytes(self, handle: int, span: Span | None = None) -> bytes:
        """Return the raw contents of a file."""

    @abstractmethod
    def write_bytes(self, filename: str, data: bytes, span: Span | None = None) -> None:
        """Store ``data`` under ``filename``."""

    def get_str(self, handle: int, span: Span | None = None) -> str:
        """Return the contents of a file decoded as UTF-8, replacing bad bytes."""
        return self.get_bytes(handle, span).decode("utf-8", errors="replace")

    def get_excerpt(self, span: Span) -> str:
        """Return the source text covered by ``span``, or "" if unreadable."""
        try:
            chars = self.get_str(span.file_handle)
        except AsmError:
            return ""
        location = span.location()
        if location is None:
            raise ValueError("span has no location")
        return CharCounter(chars).get_excerpt(*location)


class MockFileServer(FileServer):
    """A file server that keeps every file in memory."""

    def __init__(self) -> None:
        self._handles: dict[str, int] = {}
        self._filenames: list[str] = []
        self._files: list[bytes] = []

    def _store(self, filename: str, contents: bytes) -> int:
        handle = self._handles.get(filename)
        if handle is None:
            handle = len(self._handles)
            self._handles[filename] = handle
            self._filenames.append(filename)
            self._files.append(b"")
        self._filenames[handle] = filename
        self._files[handle] = contents
        return handle

    def add(self, filename: str, contents: str | bytes) -> None:
        """Add or replace an in-memory file."""
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        self._store(filename, bytes(contents))

    def add_std_files(self, entries) -> None:
        for filename, contents in entries:
            self.add(filename, contents)

    def get_handle(self, filename: str, span: Span | None = None) -> int:
        handle = self._handles.get(filename)
        if handle is None:
            raise AsmError(f"file not found: `{filename}`", span)
        return handle

    def get_filename(self, handle: int) -> str:
        return self._filenames[handle]

    def get_bytes(self, handle: int, span: Span | None = None) -> bytes:
        return self._files[handle]

    def write_bytes(self, filename: str, data: bytes, span: Span | None = None) -> None:
        """Store the data under the file name with a fixed suffix appended."""
        self._store(filename + FILESERVER_MOCK_WRITE_FILENAME_SUFFIX, bytes(data))


class RealFileServer(FileServer):
    """A file server reading from disk, with optional built-in files."""

    def __init__(self) -> None:
        self._handles: dict[str, int] = {}
        self._filenames: list[str] = []
        self._std_files: dict[int, str] = {}

    def _register(self, filename: str) -> int:
        handle = len(self._handles)
        self._handles[filename] = handle
        self._filenames.append(filename)
        return handle

    def add(self, filename: str, contents: str) -> None:
        """Add or replace a built-in file that is served from memory."""
        handle = self._handles.get(filename)
        if handle is None:
            handle = self._register(filename)
        self._filenames[handle] = filename
        self._std_files[handle] = contents

    def add_std_files(self, entries) -> None:
        for filename, contents in entries:
            self.add(filename, contents)

    def get_handle(self, filename: str, span: Span | None = None) -> int:
        handle = self._handles.get(filename)
        if handle is not None:
            return handle
        if not Path(filename).exists():
            raise AsmError(f"file not found: `{filename}`", span)
        return self._register(filename)

    def get_filename(self, handle: int) -> str:
        return self._filenames[handle]

    def get_bytes(self, handle: int, span: Span | None = None) -> bytes:
        std_contents = self._std_files.get(handle)
        if std_contents is not None:
            return std_contents.encode("utf-8")

        filename = self._filenames[handle]
        try:
            file = open(filename, "rb")
        except OSError as err:
            raise AsmError(f"could not open file `{filename}`: {err}", span) from err
        with file:
            try:
                return file.read()
            except OSError as err:
                raise AsmError(f"could not read file `{filename}`: {err}", span) from err

    def write_bytes(self, filename: str, data: bytes, span: Span | None = None) -> None:
        try:
            file = open(filename, "wb")
        except OSError as err:
            raise AsmError(f"could not create file `{filename}`: {err}", span) from err
        with file:
            try:
                file.write(bytes(data))
            except OSError as err:
                raise AsmError(f"could not write to file `{filename}`: {err}", span) from err