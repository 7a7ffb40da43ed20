"""Unit tests for JinjaViewCompiler."""

from pathlib import Path

import pytest
from jinja2 import Template, TemplateSyntaxError, UndefinedError

from lazyview.compiler import CompilationResult, JinjaViewCompiler, create_environment
from lazyview.exceptions import CompileError


def _render(template, **params) -> str:
    return "".join(template.generate(params))


@pytest.fixture
def source(tmp_path) -> Path:
    path = tmp_path / "views" / "greeting.view.jinja"
    path.parent.mkdir(parents=True)
    path.write_text("Hello {{ name }}!\n", encoding="utf-8")
    return path


@pytest.mark.unit
def test_compile_writes_python_artifact(tmp_path, source):
    """Test that the artifact holds Jinja2-generated Python module source."""
    compiled_path = tmp_path / "compiled" / "greeting.compiled.py"

    result = JinjaViewCompiler().compile(source, compiled_path)

    assert isinstance(result, CompilationResult)
    assert result.source_path == source
    assert result.compiled_path == compiled_path
    assert result.elapsed_time >= 0
    assert compiled_path.exists()
    # Valid Python, not template markup
    compile(compiled_path.read_text(encoding="utf-8"), str(compiled_path), "exec")
    assert "{{" not in compiled_path.read_text(encoding="utf-8")


@pytest.mark.unit
def test_load_round_trip(tmp_path, source):
    """Test that a loaded artifact renders like the source template."""
    compiler = JinjaViewCompiler()
    compiled_path = tmp_path / "greeting.compiled.py"
    compiler.compile(source, compiled_path)

    template = compiler.load(compiled_path)

    assert isinstance(template, Template)
    assert _render(template, name="Ada") == "Hello Ada!\n"


@pytest.mark.unit
def test_load_does_not_read_source(tmp_path, source):
    """Test that a compiled artifact is self-contained."""
    compiler = JinjaViewCompiler()
    compiled_path = tmp_path / "greeting.compiled.py"
    compiler.compile(source, compiled_path)
    source.unlink()

    assert _render(compiler.load(compiled_path), name="Ada") == "Hello Ada!\n"


@pytest.mark.unit
def test_compile_is_idempotent(tmp_path, source):
    """Test that compiling twice yields a usable artifact each time."""
    compiler = JinjaViewCompiler()
    compiled_path = tmp_path / "greeting.compiled.py"

    compiler.compile(source, compiled_path)
    first = compiled_path.read_text(encoding="utf-8")
    compiler.compile(source, compiled_path)

    assert compiled_path.read_text(encoding="utf-8") == first
    assert _render(compiler.load(compiled_path), name="Bo") == "Hello Bo!\n"


@pytest.mark.unit
def test_compile_leaves_no_temp_files(tmp_path, source):
    """Test that publishing the artifact cleans up after itself."""
    compiled_dir = tmp_path / "compiled"
    JinjaViewCompiler().compile(source, compiled_dir / "greeting.compiled.py")

    assert [p.name for p in compiled_dir.iterdir()] == ["greeting.compiled.py"]


@pytest.mark.unit
def test_compile_malformed_source(tmp_path):
    """Test that syntax errors surface as CompileError."""
    broken = tmp_path / "broken.view.jinja"
    broken.write_text("{% if %}oops", encoding="utf-8")
    compiled_path = tmp_path / "broken.compiled.py"

    with pytest.raises(CompileError) as exc_info:
        JinjaViewCompiler().compile(broken, compiled_path)

    assert isinstance(exc_info.value.original_error, TemplateSyntaxError)
    assert exc_info.value.source_path == broken
    assert not compiled_path.exists()


@pytest.mark.unit
def test_compile_missing_source(tmp_path):
    """Test that an unreadable source surfaces as CompileError."""
    with pytest.raises(CompileError):
        JinjaViewCompiler().compile(tmp_path / "nope.view.html", tmp_path / "nope.compiled.py")


@pytest.mark.unit
def test_load_corrupt_artifact(tmp_path):
    """Test that a corrupt artifact surfaces as CompileError."""
    corrupt = tmp_path / "corrupt.compiled.py"
    corrupt.write_text("def (:\n", encoding="utf-8")

    with pytest.raises(CompileError, match="Corrupt compiled view"):
        JinjaViewCompiler().load(corrupt)


@pytest.mark.unit
def test_load_missing_artifact(tmp_path):
    """Test that a missing artifact surfaces as CompileError."""
    with pytest.raises(CompileError, match="Cannot read compiled view"):
        JinjaViewCompiler().load(tmp_path / "missing.compiled.py")


@pytest.mark.unit
def test_autoescape(tmp_path):
    """Test that the autoescape flag is honored by compiled artifacts."""
    source = tmp_path / "escaped.view.html"
    source.write_text("{{ value }}", encoding="utf-8")

    escaping = JinjaViewCompiler(autoescape=True)
    escaping.compile(source, tmp_path / "on.compiled.py")
    raw = JinjaViewCompiler()
    raw.compile(source, tmp_path / "off.compiled.py")

    assert _render(escaping.load(tmp_path / "on.compiled.py"), value="<b>") == "&lt;b&gt;"
    assert _render(raw.load(tmp_path / "off.compiled.py"), value="<b>") == "<b>"


@pytest.mark.unit
def test_environment_is_strict():
    """Test that undefined names fail instead of rendering empty."""
    env = create_environment()

    assert env.keep_trailing_newline
    with pytest.raises(UndefinedError):
        env.from_string("{{ missing }}").render()


@pytest.mark.unit
def test_compile_non_utf8_source(tmp_path):
    """Test that a source that is not valid UTF-8 surfaces as CompileError."""
    latin = tmp_path / "latin.view.html"
    latin.write_bytes(b"caf\xe9 {{ x }}")

    with pytest.raises(CompileError, match="Cannot read view source") as exc_info:
        JinjaViewCompiler().compile(latin, tmp_path / "latin.compiled.py")

    assert isinstance(exc_info.value.original_error, UnicodeDecodeError)
    assert not (tmp_path / "latin.compiled.py").exists()


@pytest.mark.unit
def test_load_non_utf8_artifact(tmp_path):
    """Test that an artifact that is not valid UTF-8 surfaces as CompileError."""
    garbled = tmp_path / "garbled.compiled.py"
    garbled.write_bytes(b"\xff\xfe\x00")

    with pytest.raises(CompileError, match="Cannot read compiled view"):
        JinjaViewCompiler().load(garbled)


@pytest.mark.unit
def test_environment_loader_rooted_at_views_dir(tmp_path):
    """Test that includes and layouts resolve relative to the views root."""
    (tmp_path / "layouts").mkdir()
    (tmp_path / "layouts" / "base.view.jinja").write_text(
        "<main>{% block body %}{% endblock %}</main>", encoding="utf-8"
    )
    page = tmp_path / "page.view.jinja"
    page.write_text(
        '{% extends "layouts/base.view.jinja" %}{% block body %}Hi {{ name }}{% endblock %}',
        encoding="utf-8",
    )
    compiler = JinjaViewCompiler(views_dir=tmp_path)
    compiled_path = tmp_path / "page.compiled.py"
    compiler.compile(page, compiled_path)

    assert _render(compiler.load(compiled_path), name="Ada") == "<main>Hi Ada</main>"
    assert create_environment().loader is None
