"""Markdown source file loading"""

from dataclasses import dataclass
from pathlib import Path

import aiofiles
import aiofiles.os

from mdprompt.errors import SourceLoadError
from mdprompt.utils.error_handler import safe_with_default
from mdprompt.utils.mixins import LoggerMixin

MARKDOWN_SUFFIX = ".md"


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A Markdown source read from disk"""

    path: Path
    text: str
    mtime_ns: int

    @property
    def name(self) -> str:
        return self.path.name


class SourceLoader(LoggerMixin):
    """Read Markdown sources asynchronously"""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def modified_at(self, path: Path) -> int:
        """Return the modification time of ``path`` in nanoseconds"""
        try:
            stat = await aiofiles.os.stat(path)
        except OSError as exc:
            raise SourceLoadError(
                f"Markdown source not found: {exc}", source_name=Path(path).name
            ) from exc
        return stat.st_mtime_ns

    async def read(self, path: str | Path) -> SourceFile:
        """Read a source file.

        Raises
        ------
        SourceLoadError
            If the file is missing, unreadable, or not valid text.
        """
        path = Path(path)
        mtime_ns = await self.modified_at(path)
        try:
            async with aiofiles.open(path, encoding=self.encoding) as f:
                text = await f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceLoadError(
                f"Cannot read markdown source: {exc}", source_name=path.name
            ) from exc

        self.logger.debug("Loaded markdown source", path=str(path), size=len(text))
        return SourceFile(path=path, text=text, mtime_ns=mtime_ns)


@safe_with_default("scan markdown sources", [])
def find_markdown_sources(directory: str | Path, pattern: str = "**/*.md") -> list[Path]:
    """List Markdown files under ``directory`` matching ``pattern``, sorted"""
    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    return sorted(
        path
        for path in root.glob(pattern)
        if path.is_file() and path.suffix == MARKDOWN_SUFFIX
    )
