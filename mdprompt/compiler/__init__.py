"""Markdown template compiler"""

from .base import (
    GeneratedArtifact,
    ITextPass,
    Placeholder,
    PlaceholderType,
    StringifyOptions,
    UnknownType,
)
from .builder import BuildReport, BuildResult, ModuleBuilder, build_file, build_files
from .engine import CompilerEngine, compile_markdown
from .extractor import PlaceholderExtractor, extract_placeholders
from .generator import TemplateGenerator, generate_template
from .importer import install_import_hook, uninstall_import_hook
from .loader import SourceLoader, find_markdown_sources
from .passes import (
    PassPipeline,
    freeze_default_passes,
    get_default_passes,
    set_default_passes,
    strip_frontmatter,
    strip_html_comments,
)
from .signature import generate_type_signature
from .stringifier import MarkdownStringifier, stringify
from .targets import PythonTarget, Target, TypeScriptTarget, get_target
from .validator import PlaceholderValidator

__all__ = [
    "BuildReport",
    "BuildResult",
    "CompilerEngine",
    "GeneratedArtifact",
    "ITextPass",
    "MarkdownStringifier",
    "ModuleBuilder",
    "PassPipeline",
    "Placeholder",
    "PlaceholderExtractor",
    "PlaceholderType",
    "PlaceholderValidator",
    "PythonTarget",
    "SourceLoader",
    "StringifyOptions",
    "Target",
    "TemplateGenerator",
    "TypeScriptTarget",
    "UnknownType",
    "build_file",
    "build_files",
    "compile_markdown",
    "extract_placeholders",
    "find_markdown_sources",
    "freeze_default_passes",
    "generate_template",
    "generate_type_signature",
    "get_default_passes",
    "get_target",
    "install_import_hook",
    "set_default_passes",
    "stringify",
    "strip_frontmatter",
    "strip_html_comments",
    "uninstall_import_hook",
]
