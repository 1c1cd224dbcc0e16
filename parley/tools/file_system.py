"""Local file system tool."""

from __future__ import annotations

from pathlib import Path

from parley.tools.base import BaseTool, action
from parley.utils.logging import get_logger

log = get_logger(__name__)


class FileSystem(BaseTool):
    """Lists, reads and writes files on the host.

    Failures the model can act on (missing paths, permissions) come back as
    text rather than exceptions.
    """

    @action(
        "File System Tool: Lists out the content of a specified directory",
        lambda p: p.property(
            "directory_path", type="string", description="Directory path to list", required=True
        ),
    )
    def list_directory(self, directory_path: str) -> str:
        path = Path(directory_path)
        try:
            entries = sorted(entry.name + ("/" if entry.is_dir() else "") for entry in path.iterdir())
        except FileNotFoundError:
            return f"No such directory: {directory_path}"
        except NotADirectoryError:
            return f"Not a directory: {directory_path}"
        except PermissionError:
            return f"Permission denied: {directory_path}"
        return "\n".join(entries)

    @action(
        "File System Tool: Reads the contents of a file",
        lambda p: p.property(
            "file_path", type="string", description="Path to the file to read from", required=True
        ),
    )
    def read_file(self, file_path: str) -> str:
        try:
            return Path(file_path).read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return f"No such file: {file_path}"
        except IsADirectoryError:
            return f"Is a directory: {file_path}"
        except PermissionError:
            return f"Permission denied: {file_path}"

    @action(
        "File System Tool: Write content to a file",
        lambda p: (
            p.property("file_path", type="string", description="Path to the file to write", required=True),
            p.property("content", type="string", description="Content to write to the file", required=True),
        ),
    )
    def write_to_file(self, file_path: str, content: str) -> str:
        log.info("file_write", path=file_path, chars=len(content))
        try:
            Path(file_path).write_text(content, encoding="utf-8")
        except PermissionError:
            return f"Permission denied: {file_path}"
        except FileNotFoundError:
            return f"No such directory for file: {file_path}"
        return f"Wrote {len(content)} characters to {file_path}"
