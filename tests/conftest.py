"""
Shared pytest fixtures for the mdx-build test suite.

Provides fixtures for:
- Temporary storage directories
- Isolated compiler caches
- Document trees on disk
- Running compiled programs
"""

import tempfile
import textwrap
from collections.abc import Callable
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from mdx_library import CompilerCache


@pytest.fixture
def temp_storage_dir() -> Generator[Path, None, None]:
    """Create temporary storage directory for tests.

    Automatically cleaned up after test completes.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_storage_env(temp_storage_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point MDXBUILD_HOME at a temporary directory.

    Also clears the other MDXBUILD_ variables so the host environment
    cannot leak into settings under test.

    Example:
        >>> def test_with_isolated_storage(mock_storage_env):
        ...     from mdx_library.storage.paths import get_home_dir
        ...     assert get_home_dir() == mock_storage_env.resolve()
    """
    for name in ("MDXBUILD_CONFIG_DIR", "MDXBUILD_LOG_DIR", "MDXBUILD_ENVIRONMENT", "MDXBUILD_PORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MDXBUILD_HOME", str(temp_storage_dir))
    return temp_storage_dir


@pytest.fixture
def compiler_cache() -> CompilerCache:
    """Fresh compiler cache, isolated from the process-wide default."""
    return CompilerCache()


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a document under tmp_path, dedenting its content.

    Example:
        >>> def test_doc(write_doc):
        ...     path = write_doc("docs/a.mdx", "# Hi")
        ...     assert path.read_text() == "# Hi"
    """

    def write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    return write


@pytest.fixture
def docs_dir(write_doc: Callable[[str, str], Path], tmp_path: Path) -> Path:
    """A small document tree with nested and shared includes.

    docs/a.mdx includes b.mdx; docs/nested.mdx includes guide/part.mdx,
    which includes ../shared/footer.mdx.
    """
    write_doc(
        "docs/a.mdx",
        """
        ---
        title: Host
        ---

        # Host

        <include>b.mdx</include>
        """,
    )
    write_doc(
        "docs/b.mdx",
        """
        ---
        title: Included
        ---

        Hello
        """,
    )
    write_doc(
        "docs/nested.mdx",
        """
        # Nested

        <include>guide/part.mdx</include>
        """,
    )
    write_doc(
        "docs/guide/part.mdx",
        """
        Part body

        <include>../shared/footer.mdx</include>
        """,
    )
    write_doc(
        "docs/shared/footer.mdx",
        """
        Footer text
        """,
    )
    return tmp_path / "docs"


def _h(tag: Any, props: dict[str, Any], *children: Any) -> dict[str, Any]:
    return {"tag": tag, "props": props, "children": list(children)}


@pytest.fixture
def run_program() -> Callable[..., Any]:
    """Execute a compiled program and render MDXContent into nested dicts.

    Elements render as ``{"tag": ..., "props": ..., "children": [...]}`` and
    fragments use the tag ``"Fragment"``.
    """

    def run(program: str, output_format: str = "program", **props: Any) -> Any:
        namespace: dict[str, Any] = {}
        if output_format == "function-body":
            exec("def _module():\n" + textwrap.indent(program, "    "), namespace)
            module = namespace["_module"]()
        else:
            exec(program, namespace)
            module = namespace
        components = props.pop("components", None)
        return module["default"](_h, "Fragment", components, **props)

    return run


def _collect_text(rendered: Any) -> str:
    """Concatenate all string children of a rendered element tree."""
    if isinstance(rendered, str):
        return rendered
    if isinstance(rendered, dict):
        return "".join(_collect_text(child) for child in rendered["children"])
    return ""


@pytest.fixture
def collect_text() -> Callable[[Any], str]:
    """Concatenate all string children of a rendered element tree."""
    return _collect_text
