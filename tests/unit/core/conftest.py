"""Shared fixtures for core unit tests"""

import pytest

from dfmark.core.parse import make_parser
from dfmark.core.pipeline import render_text


CODE_CS = """\
using System;

namespace Demo
{
    class Program
    {
        // <Main>
        static void Main()
        {
            Console.WriteLine("hi");
        }
        // </Main>
    }
}
"""

CODE_PY = """\
import sys

# <setup>
def setup():
    # <inner>
    return sys.argv
    # </inner>
# </setup>
"""


@pytest.fixture(name="md")
def md_fixture():
    return make_parser()


@pytest.fixture(name="render")
def render_fixture(md, tmp_path):
    """Render markdown as if it lived at `path` under tmp_path; returns the HTML."""
    def _render(text: str, path: str = "index.md") -> str:
        return render_text(text, path, tmp_path, md).html
    return _render


@pytest.fixture(name="write")
def write_fixture(tmp_path):
    """Write a file under tmp_path, creating parent folders."""
    def _write(rel: str, content: str):
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p
    return _write


@pytest.fixture(name="code_files")
def code_files_fixture(write):
    write("src/Program.cs", CODE_CS)
    write("src/setup.py", CODE_PY)
