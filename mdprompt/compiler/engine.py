"""Compiler engine combining the pipeline components"""

from pathlib import Path

from mdprompt.config import get_settings
from mdprompt.errors import PLACEHOLDER_SYNTAX_HINT, CompilationError
from mdprompt.utils.error_handler import critical_operation
from mdprompt.utils.lru_cache import LRUCache
from mdprompt.utils.mixins import LoggerMixin

from .base import GeneratedArtifact, ITextPass, StringifyOptions
from .extractor import PlaceholderExtractor
from .generator import TemplateGenerator
from .loader import SourceLoader
from .passes import get_default_passes
from .stringifier import MarkdownStringifier
from .targets import Target, get_target
from .validator import PlaceholderValidator

# (path, mtime_ns, target, collapse_whitespace, markdown extras, default passes)
ArtifactKey = tuple[str, int, str, bool, tuple[str, ...], tuple[ITextPass, ...]]


class CompilerEngine(LoggerMixin):
    """Markdown source in, generated template module out.

    Each compilation is independent: the engine holds no per-request state,
    only its configured components and a cache of artifacts compiled from
    files with the default options.
    """

    def __init__(
        self,
        target: str | Target | None = None,
        *,
        markdown_extras: list[str] | None = None,
        cache_size: int | None = None,
    ):
        self.target = get_target(target)
        self.stringifier = MarkdownStringifier(markdown_extras)
        self.extractor = PlaceholderExtractor()
        self.validator = PlaceholderValidator()
        self.loader = SourceLoader()
        self.artifact_cache: LRUCache[ArtifactKey, GeneratedArtifact] = LRUCache(
            cache_size or get_settings().cache_size
        )

    async def compile(
        self,
        source: str,
        options: StringifyOptions | None = None,
        *,
        target: str | Target | None = None,
        source_name: str | None = None,
    ) -> GeneratedArtifact:
        """Stringify, extract and generate in one step.

        Raises
        ------
        PassExecutionError
            If a stringifier pass fails; no artifact is produced.
        """
        target = self.target if target is None else get_target(target)

        text = await self.stringifier.stringify(source, options, source_name=source_name)
        placeholders = self.extractor.extract(text)
        self.validator.inspect(placeholders)
        artifact = TemplateGenerator(target).generate(text, placeholders)

        self.logger.info(
            "Compiled markdown template",
            source_name=source_name,
            target=artifact.target,
            placeholders=len(artifact.placeholders),
        )
        return artifact

    @critical_operation("compile markdown file")
    async def compile_file(
        self,
        path: str | Path,
        options: StringifyOptions | None = None,
        *,
        target: str | Target | None = None,
    ) -> GeneratedArtifact:
        """Compile a Markdown file, reusing the cached artifact when unchanged.

        Only compilations with default options are cached. The key covers the
        path, modification time and target, plus the settings and default
        passes those options resolve to, so changing either recompiles.

        Raises
        ------
        SourceLoadError
            If the file cannot be read.
        CompilationError
            If compilation fails; unexpected errors are wrapped with the file
            name.
        """
        path = Path(path)
        target = self.target if target is None else get_target(target)

        key: ArtifactKey | None = None
        if options is None:
            # Pin the settings-derived options so the artifact matches its key
            options = StringifyOptions(
                collapse_whitespace=get_settings().collapse_whitespace,
                extra_passes=get_default_passes(),
            )
            mtime_ns = await self.loader.modified_at(path)
            key = (
                str(path.resolve()),
                mtime_ns,
                target.name,
                options.collapse_whitespace,
                self.stringifier.markdown_extras,
                tuple(options.extra_passes),
            )
            cached = self.artifact_cache.get(key)
            if cached is not None:
                self.logger.debug("Using cached artifact", path=str(path))
                return cached

        source = await self.loader.read(path)
        try:
            artifact = await self.compile(
                source.text, options, target=target, source_name=source.name
            )
        except CompilationError:
            raise
        except Exception as exc:
            message = str(exc)
            hint = PLACEHOLDER_SYNTAX_HINT if "placeholder" in message.lower() else None
            raise CompilationError(message, source_name=source.name, hint=hint) from exc

        if key is not None:
            self.artifact_cache.put(key, artifact)
        return artifact

    def clear_cache(self) -> None:
        self.artifact_cache.clear()


async def compile_markdown(
    source: str,
    options: StringifyOptions | None = None,
    target: str | Target | None = None,
) -> GeneratedArtifact:
    """Compile a Markdown string with a one-off engine"""
    return await CompilerEngine(target).compile(source, options)
