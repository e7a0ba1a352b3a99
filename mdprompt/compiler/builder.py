"""Write compiled template modules and declarations to disk"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles
import aiofiles.os

from mdprompt.errors import CompilationError
from mdprompt.utils.mixins import LoggerMixin

from .base import GeneratedArtifact
from .engine import CompilerEngine
from .targets import Target, get_target


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Files written for one Markdown source"""

    source: Path
    module_path: Path
    declaration_path: Path
    artifact: GeneratedArtifact


@dataclass
class BuildReport:
    """Outcome of building several sources"""

    built: list[BuildResult] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class ModuleBuilder(LoggerMixin):
    """Compile Markdown files into module and declaration files"""

    def __init__(
        self,
        engine: CompilerEngine | None = None,
        target: str | Target | None = None,
    ):
        self.engine = engine or CompilerEngine(target)
        self.target = self.engine.target if target is None else get_target(target)

    async def build_file(self, path: str | Path, outdir: str | Path) -> BuildResult:
        """Compile ``path`` and write ``<stem><suffix>`` files into ``outdir``"""
        path = Path(path)
        outdir = Path(outdir)

        artifact = await self.engine.compile_file(path, target=self.target)

        await aiofiles.os.makedirs(outdir, exist_ok=True)
        module_path = outdir / f"{path.stem}{self.target.module_suffix}"
        declaration_path = outdir / f"{path.stem}{self.target.declaration_suffix}"

        await self._write(module_path, artifact.code)
        await self._write(declaration_path, self.target.render_declaration(artifact))

        self.logger.info(
            "Built template module",
            source=str(path),
            module=str(module_path),
            static=artifact.is_static,
        )
        return BuildResult(
            source=path,
            module_path=module_path,
            declaration_path=declaration_path,
            artifact=artifact,
        )

    async def build_files(
        self, paths: Iterable[str | Path], outdir: str | Path
    ) -> BuildReport:
        """Build each source in turn; one failure does not stop the others"""
        report = BuildReport()
        paths = [Path(path) for path in paths]
        self.logger.info("Building markdown templates", count=len(paths))

        for path in paths:
            try:
                report.built.append(await self.build_file(path, outdir))
            except (CompilationError, OSError) as exc:
                self.logger.error("Build failed", source=str(path), error=str(exc))
                report.failed[path] = str(exc)

        self.logger.info(
            "Build complete", built=len(report.built), failed=len(report.failed)
        )
        return report

    async def _write(self, path: Path, content: str) -> None:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(content)


async def build_file(
    path: str | Path, outdir: str | Path, target: str | Target | None = None
) -> BuildResult:
    return await ModuleBuilder(target=target).build_file(path, outdir)


async def build_files(
    paths: Iterable[str | Path], outdir: str | Path, target: str | Target | None = None
) -> BuildReport:
    return await ModuleBuilder(target=target).build_files(paths, outdir)
