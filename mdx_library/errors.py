"""Error types raised by the mdx_library build pipeline.

Every error raised by the library derives from MDXBuildError so that
transport layers can separate caller mistakes from internal failures.
"""


class MDXBuildError(Exception):
    """Base class for all build pipeline errors."""


class ConfigurationError(MDXBuildError):
    """Raised when compiler or build options are malformed."""


class DocumentParseError(MDXBuildError):
    """Raised when markup cannot be parsed.

    Attributes:
        path: File the markup came from, when known
        line: 1-based line of the offending construct, when known
    """

    def __init__(self, message: str, path: str | None = None, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line

    def __str__(self) -> str:
        location = self.path or "<source>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.message}"


class FrontmatterError(DocumentParseError):
    """Raised when a front-matter block is not a valid YAML mapping."""


class IncludeResolutionError(MDXBuildError):
    """Raised when an include directive cannot be resolved to a readable file.

    Attributes:
        specifier: The path specifier written in the include directive
        path: The resolved absolute path, if resolution got that far
    """

    def __init__(self, message: str, specifier: str | None = None, path: str | None = None) -> None:
        super().__init__(message)
        self.specifier = specifier
        self.path = path


class CompileError(MDXBuildError):
    """Raised when a syntax tree cannot be turned into a program."""
