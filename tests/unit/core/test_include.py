"""Unit tests for core/include.py"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from dfmark.core.context import RenderContext
from dfmark.core.include import InclusionResolver
from dfmark.core.pipeline import render_text


def _levels(records, text):
    return [r["level"].name for r in records if text in r["message"]]


def test_block_include_renders_file(render, write):
    """A block include is replaced by the rendered HTML of the target."""
    write("a.md", "# A\n")
    assert render("[!INCLUDE[a](a.md)]\n") == "<h1>A</h1>\n"


def test_inline_include_renders_inline(render, write):
    """An inline include renders without a paragraph wrapper."""
    write("b.md", "**bold**\n")
    assert render("Text [!INCLUDE[b](b.md)] end.\n") == "<p>Text <strong>bold</strong> end.</p>\n"


def test_nested_paths_resolve_against_includer(md, tmp_path, write):
    """Relative paths inside an included file resolve from that file's folder."""
    write("docs/a.md", "[!INCLUDE[b](sub/b.md)]\n")
    write("docs/sub/b.md", "[!INCLUDE[c](../c.md)]\n")
    write("docs/c.md", "leaf\n")
    doc = render_text("[!INCLUDE[a](docs/a.md)]\n", "index.md", tmp_path, md)
    assert doc.html == "<p>leaf</p>\n"
    assert doc.dependencies == ["docs/a.md", "docs/c.md", "docs/sub/b.md"]


def test_self_include_is_circular(render, log_records):
    """Including the file being rendered reports a cycle instead of recursing."""
    html = render("[!INCLUDE[me](index.md)]\n")
    assert html == (
        '<div class="dfm-error">Circular dependency found in &quot;index.md&quot;: '
        'index.md --&gt; index.md</div>\n'
    )
    assert _levels(log_records, "Circular dependency") == ["WARNING"]


def test_indirect_cycle_names_the_chain(render, write):
    """a -> b -> a is detected with the full chain in the message."""
    write("a.md", "[!INCLUDE[b](b.md)]\n")
    write("b.md", "before\n\n[!INCLUDE[a](a.md)]\n")
    html = render("[!INCLUDE[a](a.md)]\n")
    assert "<p>before</p>" in html
    assert "index.md --&gt; a.md --&gt; b.md --&gt; a.md" in html


def test_same_file_twice_is_not_a_cycle(render, write):
    """Siblings may include the same file; only ancestors count as cycles."""
    write("shared.md", "shared\n")
    html = render("[!INCLUDE[s](shared.md)]\n\n[!INCLUDE[s](shared.md)]\n")
    assert html == "<p>shared</p>\n<p>shared</p>\n"


def test_missing_file(render, log_records):
    """A missing target renders an error fragment and logs an error."""
    html = render("[!INCLUDE[x](missing.md)]\n")
    assert html == '<div class="dfm-error">Can not find reference missing.md in file index.md</div>\n'
    assert _levels(log_records, "Can not find reference") == ["ERROR"]


def test_missing_inline_file_uses_span(render):
    """Inline include failures render as a span inside the paragraph."""
    html = render("See [!INCLUDE[x](missing.md)] here.\n")
    assert html == (
        '<p>See <span class="dfm-error">Can not find reference missing.md in file index.md</span> here.</p>\n'
    )


@pytest.mark.parametrize("src", ["/etc/passwd.md", "C:/docs/a.md", "~/a.md", "https://example.com/a.md"])
def test_absolute_path_never_read(render, monkeypatch, log_records, src):
    """Absolute paths are rejected before any file access."""
    def _no_read(self, path):
        raise AssertionError(f"read {path}")
    monkeypatch.setattr(RenderContext, "read_text", _no_read)

    html = render(f"[!INCLUDE[x]({src})]\n")
    assert "Absolute path &quot;" in html
    assert "is not supported in file index.md" in html
    assert _levels(log_records, "Absolute path") == ["ERROR"]


def test_outside_root_rejected(render, monkeypatch):
    """A path that climbs above the root is not read."""
    monkeypatch.setattr(RenderContext, "read_text", lambda self, path: pytest.fail(f"read {path}"))
    html = render("[!INCLUDE[x](../up.md)]\n")
    assert "is outside of the working folder" in html


def test_empty_src_renders_raw_text(render):
    """An include with no target renders its own source text, encoded."""
    assert render("[!INCLUDE[<x>]()]\n") == "[!INCLUDE[&lt;x&gt;]()]"


def test_region_selects_marked_lines(render, write):
    """src#name keeps only the lines between the HTML-comment markers."""
    write("part.md", "intro\n<!-- <keep> -->\nkept text\n<!-- </keep> -->\noutro\n")
    assert render("[!INCLUDE[p](part.md#keep)]\n") == "<p>kept text</p>\n"


def test_missing_region(render, write):
    write("part.md", "intro\n")
    html = render("[!INCLUDE[p](part.md#nope)]\n")
    assert html == '<div class="dfm-error">Region nope is not found in part.md#nope</div>\n'


def test_included_yaml_header_dropped(render, write):
    """Only the top-level document renders a YAML header."""
    write("h.md", "---\ntitle: x\n---\nbody\n")
    assert render("[!INCLUDE[h](h.md)]\n") == "<p>body</p>\n"


def test_inline_include_drops_yaml_header(render, write):
    """An inline include renders only the body of a file with a YAML header."""
    write("h.md", "---\ntitle: x\n---\nbody\n")
    assert render("Text [!INCLUDE[h](h.md)] end.\n") == "<p>Text body end.</p>\n"


def test_failed_include_is_not_a_dependency(md, tmp_path):
    doc = render_text("[!INCLUDE[x](missing.md)]\n", "index.md", tmp_path, md)
    assert doc.dependencies == []


def test_render_without_context_raises(md):
    """Rendering an include outside the pipeline has no file stack to resolve against."""
    with pytest.raises(KeyError, match="RenderContext"):
        md.render("[!INCLUDE[a](a.md)]\n")


def test_load_leaves_parent_stack_untouched(md, tmp_path, write):
    """load() renders the target on a pushed context; the caller's stack is unchanged."""
    write("a.md", "a\n")
    context = RenderContext.for_file(tmp_path, "index.md")
    result = InclusionResolver().load("a.md", "[!INCLUDE[a](a.md)]", context, md)
    assert result.succeeded
    assert result.html == "<p>a</p>\n"
    assert context.file_stack == ("index.md",)
    assert context.dependencies == {"a.md"}


def test_concurrent_renders_share_one_parser(md, tmp_path, write):
    """Independent documents rendered in parallel keep separate stacks and dependencies."""
    for i in range(8):
        write(f"part{i}.md", f"part {i}\n")
        write(f"doc{i}.md", f"[!INCLUDE[p](part{i}.md)]\n")

    def _render(i):
        return render_text(f"[!INCLUDE[p](part{i}.md)]\n", f"doc{i}.md", tmp_path, md)

    with ThreadPoolExecutor(max_workers=4) as pool:
        docs = list(pool.map(_render, range(8)))

    for i, doc in enumerate(docs):
        assert doc.html == f"<p>part {i}</p>\n"
        assert doc.dependencies == [f"part{i}.md"]


def test_cycle_through_relative_paths(md, tmp_path, write, log_records):
    """docs/b.md -> ./a.md -> b.md is one cycle error, resolved relative to docs/."""
    write("docs/b.md", "[!INCLUDE[a](./a.md)]\n")
    write("docs/a.md", "[!INCLUDE[b](b.md)]\n")
    doc = render_text("[!INCLUDE[a](./a.md)]\n", "docs/b.md", tmp_path, md)
    assert doc.html.count('class="dfm-error"') == 1
    assert "docs/b.md --&gt; docs/a.md --&gt; docs/b.md" in doc.html
    assert doc.dependencies == ["docs/a.md"]
    assert _levels(log_records, "Circular dependency") == ["WARNING"]
