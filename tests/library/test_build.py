"""
Tests for the build_mdx entry point.

Covers compiler caching across builds, include resolution end to end,
option handling and failure behaviour.
"""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from mdx_library import CompilerCache
from mdx_library import DependencyCollector
from mdx_library import MDXOptions
from mdx_library import build_mdx
from mdx_library.build import compiler_options
from mdx_library.build import resolve_format
from mdx_library.compiler import DocumentCompiler
from mdx_library.compiler import SourceFile
from mdx_library.compiler import SyntaxNode
from mdx_library.compiler import create_compiler
from mdx_library.config import BuildSettings
from mdx_library.errors import ConfigurationError
from mdx_library.errors import IncludeResolutionError
from mdx_library.frontmatter import split_frontmatter
from mdx_library.includes import remark_include


@pytest.fixture
def settings() -> BuildSettings:
    return BuildSettings(environment="production")


@pytest.fixture
def construction_count(monkeypatch: pytest.MonkeyPatch) -> list[DocumentCompiler]:
    """Record every compiler constructed by build_mdx."""
    built: list[DocumentCompiler] = []

    def counting(options: Any) -> DocumentCompiler:
        compiler = create_compiler(options)
        built.append(compiler)
        return compiler

    monkeypatch.setattr("mdx_library.build.create_compiler", counting)
    return built


def read_body(path: Path) -> str:
    return split_frontmatter(path.read_text(encoding="utf-8")).content


@pytest.mark.unit
class TestResolveFormat:
    """Test format selection."""

    def test_explicit_format_wins(self) -> None:
        assert resolve_format(MDXOptions(format="md", file_path="/docs/a.mdx")) == "md"

    def test_mdx_extension(self) -> None:
        assert resolve_format(MDXOptions(file_path="/docs/a.mdx")) == "mdx"

    def test_other_extensions_are_markdown(self) -> None:
        assert resolve_format(MDXOptions(file_path="/docs/a.md")) == "md"
        assert resolve_format(MDXOptions(file_path="/docs/README")) == "md"

    def test_default_is_mdx(self) -> None:
        assert resolve_format(MDXOptions()) == "mdx"


@pytest.mark.unit
class TestCompilerOptions:
    """Test construction options assembled for new compilers."""

    def test_defaults_follow_settings(self) -> None:
        values = compiler_options(MDXOptions(), "mdx", BuildSettings(environment="development"))

        assert values["output_format"] == "program"
        assert values["development"] is True
        assert values["format"] == "mdx"
        assert values["remark_plugins"] == [remark_include]

    def test_caller_fields_override_defaults(self, settings: BuildSettings) -> None:
        def plugin(compiler: DocumentCompiler) -> None:
            return None

        options = MDXOptions(output_format="function-body", development=True, remark_plugins=[plugin])

        values = compiler_options(options, "md", settings)

        assert values["output_format"] == "function-body"
        assert values["development"] is True
        assert values["remark_plugins"] == [remark_include, plugin]

    def test_resolved_format_is_applied_last(self, settings: BuildSettings) -> None:
        values = compiler_options(MDXOptions(format="mdx"), "md", settings)

        assert values["format"] == "md"

    def test_reserved_fields_are_not_forwarded(self, settings: BuildSettings) -> None:
        options = MDXOptions(collection="blog", file_path="/a.mdx", frontmatter={"a": 1}, data={"b": 2})

        values = compiler_options(options, "mdx", settings)

        assert not {"collection", "file_path", "frontmatter", "data"} & set(values)


@pytest.mark.unit
class TestCompilerCaching:
    """Test compiler reuse across build calls."""

    @pytest.mark.asyncio
    async def test_same_fingerprint_reuses_compiler(
        self,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
        construction_count: list[DocumentCompiler],
    ) -> None:
        await build_mdx("docs", "h1", "# One", cache=compiler_cache, settings=settings)
        first = compiler_cache.get("docs", "mdx").compiler
        await build_mdx("docs", "h1", "# Two", cache=compiler_cache, settings=settings)

        assert compiler_cache.get("docs", "mdx").compiler is first
        assert construction_count == [first]

    @pytest.mark.asyncio
    async def test_changed_fingerprint_rebuilds_once(
        self,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
        construction_count: list[DocumentCompiler],
    ) -> None:
        await build_mdx("docs", "h1", "# One", cache=compiler_cache, settings=settings)
        old = compiler_cache.get("docs", "mdx").compiler

        await build_mdx("docs", "h2", "# One", cache=compiler_cache, settings=settings)
        await build_mdx("docs", "h2", "# One", cache=compiler_cache, settings=settings)

        new = compiler_cache.get("docs", "mdx").compiler
        assert new is not old
        assert len(construction_count) == 2
        assert compiler_cache.get("docs", "mdx").config_hash == "h2"

    @pytest.mark.asyncio
    async def test_formats_are_cached_separately(
        self,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        await build_mdx("docs", "h", "# A", {"file_path": "/docs/a.mdx"}, cache=compiler_cache, settings=settings)
        await build_mdx("docs", "h", "# B", {"file_path": "/docs/b.md"}, cache=compiler_cache, settings=settings)

        assert sorted(compiler_cache.entries()) == ["docs:md", "docs:mdx"]
        assert compiler_cache.get("docs", "md").compiler.format == "md"

    @pytest.mark.asyncio
    async def test_uses_process_cache_by_default(
        self,
        monkeypatch: pytest.MonkeyPatch,
        settings: BuildSettings,
    ) -> None:
        process_cache = CompilerCache()
        monkeypatch.setattr("mdx_library.build.default_cache", process_cache)

        await build_mdx("docs", "h", "# A", settings=settings)

        assert "docs:mdx" in process_cache

    @pytest.mark.asyncio
    async def test_development_comes_from_settings(self, compiler_cache: CompilerCache) -> None:
        file = await build_mdx(
            "docs",
            "h",
            "# A",
            {"file_path": "/docs/a.mdx"},
            cache=compiler_cache,
            settings=BuildSettings(environment="development"),
        )

        assert "__source" in file.value

    @pytest.mark.asyncio
    async def test_invalid_options_mapping(self, compiler_cache: CompilerCache, settings: BuildSettings) -> None:
        with pytest.raises(ConfigurationError):
            await build_mdx("docs", "h", "# A", {"format": "rst"}, cache=compiler_cache, settings=settings)

        assert len(compiler_cache) == 0


@pytest.mark.unit
class TestBuildWithIncludes:
    """Test include resolution through build_mdx."""

    @pytest.mark.asyncio
    async def test_include_is_spliced_and_reported(
        self,
        docs_dir: Path,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        host = docs_dir / "a.mdx"
        collector = DependencyCollector()

        file = await build_mdx(
            "docs",
            "h",
            read_body(host),
            {"file_path": str(host)},
            dependency_recorder=collector,
            cache=compiler_cache,
            settings=settings,
        )

        heading, spliced = file.tree.children
        assert heading.text_content() == "Host"
        assert spliced.type == "root"
        assert spliced.children[0].type == "paragraph"
        assert spliced.text_content() == "Hello"
        assert collector.paths == [str(docs_dir / "b.mdx")]
        assert "'Hello'" in file.value

    @pytest.mark.asyncio
    async def test_two_includes_report_both_paths(
        self,
        docs_dir: Path,
        write_doc: Callable[[str, str], Path],
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        write_doc("docs/c.mdx", "World\n")
        collector = DependencyCollector()

        file = await build_mdx(
            "docs",
            "h",
            "<include>b.mdx</include>\n\n<include>c.mdx</include>\n",
            {"file_path": str(docs_dir / "two.mdx")},
            dependency_recorder=collector,
            cache=compiler_cache,
            settings=settings,
        )

        assert [child.text_content() for child in file.tree.children] == ["Hello", "World"]
        assert sorted(collector.paths) == sorted([str(docs_dir / "b.mdx"), str(docs_dir / "c.mdx")])

    @pytest.mark.asyncio
    async def test_directive_without_text_specifier_is_left_alone(
        self,
        docs_dir: Path,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        collector = DependencyCollector()

        file = await build_mdx(
            "docs",
            "h",
            "<include>{target}</include>",
            {"file_path": str(docs_dir / "a.mdx")},
            dependency_recorder=collector,
            cache=compiler_cache,
            settings=settings,
        )

        directive = file.tree.children[0]
        assert directive.type == "mdxJsxFlowElement"
        assert directive.name == "include"
        assert [child.type for child in directive.children] == ["mdxTextExpression"]
        assert directive.children[0].value == "target"
        assert collector.paths == []

    @pytest.mark.asyncio
    async def test_missing_include_fails_without_touching_cache(
        self,
        docs_dir: Path,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
        construction_count: list[DocumentCompiler],
    ) -> None:
        options = {"file_path": str(docs_dir / "a.mdx")}

        with pytest.raises(IncludeResolutionError):
            await build_mdx("docs", "h", "<include>nope.mdx</include>", options, cache=compiler_cache, settings=settings)

        entry = compiler_cache.get("docs", "mdx")
        assert entry is not None
        assert entry.config_hash == "h"

        await build_mdx("docs", "h", "# Fine", options, cache=compiler_cache, settings=settings)
        assert len(construction_count) == 1

    @pytest.mark.asyncio
    async def test_includes_without_file_path_fail(
        self,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        with pytest.raises(IncludeResolutionError):
            await build_mdx("docs", "h", "<include>b.mdx</include>", cache=compiler_cache, settings=settings)

    @pytest.mark.asyncio
    async def test_caller_plugins_run_after_includes(
        self,
        docs_dir: Path,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        seen: list[str] = []

        def spy(compiler: DocumentCompiler) -> Callable[..., Any]:
            def transformer(tree: SyntaxNode, file: SourceFile) -> None:
                seen.extend(node.name or "" for node in tree.walk() if node.type == "mdxJsxFlowElement")
                seen.append(tree.text_content())

            return transformer

        await build_mdx(
            "docs",
            "h",
            "<include>b.mdx</include>",
            {"file_path": str(docs_dir / "a.mdx"), "remark_plugins": [spy]},
            cache=compiler_cache,
            settings=settings,
        )

        assert seen == ["Hello"]

    @pytest.mark.asyncio
    async def test_one_missing_sibling_fails_the_build(
        self,
        docs_dir: Path,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        collector = DependencyCollector()

        with pytest.raises(IncludeResolutionError) as exc_info:
            await build_mdx(
                "docs",
                "h",
                "<include>b.mdx</include>\n\n<include>gone.mdx</include>",
                {"file_path": str(docs_dir / "a.mdx")},
                dependency_recorder=collector,
                cache=compiler_cache,
                settings=settings,
            )

        assert exc_info.value.path == str(docs_dir / "gone.mdx")

    @pytest.mark.asyncio
    async def test_circular_include_fails_the_build(
        self,
        write_doc: Callable[[str, str], Path],
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        loop = write_doc("docs/loop.mdx", "<include>loop.mdx</include>\n\n<include>loop.mdx</include>\n")

        with pytest.raises(IncludeResolutionError, match="Circular include"):
            await asyncio.wait_for(
                build_mdx(
                    "docs",
                    "h",
                    read_body(loop),
                    {"file_path": str(loop)},
                    cache=compiler_cache,
                    settings=settings,
                ),
                timeout=5,
            )

    @pytest.mark.asyncio
    async def test_development_locations_point_into_included_file(
        self,
        docs_dir: Path,
        compiler_cache: CompilerCache,
        run_program: Callable[..., Any],
    ) -> None:
        host = docs_dir / "a.mdx"

        file = await build_mdx(
            "docs",
            "h",
            "# Host\n\n<include>b.mdx</include>",
            {"file_path": str(host)},
            cache=compiler_cache,
            settings=BuildSettings(environment="development"),
        )

        rendered = run_program(file.value)
        heading = rendered["children"][0]
        included = rendered["children"][1]["children"][0]
        assert heading["props"]["__source"] == {"fileName": str(host), "lineNumber": 1}
        assert included["props"]["__source"] == {"fileName": str(docs_dir / "b.mdx"), "lineNumber": 5}


@pytest.mark.unit
class TestBuildArtifact:
    """Test the returned file."""

    @pytest.mark.asyncio
    async def test_file_data_carries_metadata(self, compiler_cache: CompilerCache, settings: BuildSettings) -> None:
        seen: dict[str, Any] = {}

        def spy(compiler: DocumentCompiler) -> Callable[..., Any]:
            def transformer(tree: SyntaxNode, file: SourceFile) -> None:
                seen.update(file.data)

            return transformer

        file = await build_mdx(
            "blog",
            "h",
            "# Post",
            MDXOptions(collection="blog", frontmatter={"title": "Post"}, data={"slug": "post"}, remark_plugins=[spy]),
            cache=compiler_cache,
            settings=settings,
        )

        assert seen == {"slug": "post", "frontmatter": {"title": "Post"}, "collection": "blog"}
        assert file.data == seen
        assert "frontmatter = {'title': 'Post'}" in file.value

    @pytest.mark.asyncio
    async def test_repeated_builds_are_identical(
        self,
        docs_dir: Path,
        compiler_cache: CompilerCache,
        settings: BuildSettings,
    ) -> None:
        host = docs_dir / "a.mdx"
        options = {"file_path": str(host)}

        first = await build_mdx("docs", "h", read_body(host), options, cache=compiler_cache, settings=settings)
        second = await build_mdx("docs", "h", read_body(host), options, cache=compiler_cache, settings=settings)

        assert first.value == second.value
        assert first is not second
