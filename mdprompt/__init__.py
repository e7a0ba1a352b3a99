"""mdprompt: compile Markdown with typed placeholders into template modules"""

__version__ = "0.1.0"

from mdprompt.compiler import (
    CompilerEngine,
    GeneratedArtifact,
    Placeholder,
    StringifyOptions,
    compile_markdown,
    extract_placeholders,
    generate_template,
    generate_type_signature,
    stringify,
)
from mdprompt.errors import CompilationError, MdPromptError, PassExecutionError

__all__ = [
    "__version__",
    "CompilationError",
    "CompilerEngine",
    "GeneratedArtifact",
    "MdPromptError",
    "PassExecutionError",
    "Placeholder",
    "StringifyOptions",
    "compile_markdown",
    "extract_placeholders",
    "generate_template",
    "generate_type_signature",
    "stringify",
]
