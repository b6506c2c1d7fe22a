import io
import zipfile

from rich.console import Console
from typer.testing import CliRunner

from repub.cli import app
from repub.commands.toc import execute_toc

runner = CliRunner()


def test_build_with_options(src_dir, out_dir):
    (src_dir / "intro.md").write_text("# Title\n\n## Sub\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["build", str(src_dir / "intro.md"), "-t", "Book", "-c", "Alice", "-l", "en",
         "-o", str(out_dir)],
    )

    assert result.exit_code == 0, result.output
    epub_path = out_dir / "Book.epub"
    assert zipfile.is_zipfile(epub_path)
    assert not (out_dir / "OEBPS").exists()


def test_build_prompts_for_missing_metadata(src_dir, out_dir):
    (src_dir / "a.md").write_text("# A\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["build", str(src_dir), "-o", str(out_dir), "--bookid", "fixed-id", "-q"],
        input="Prompted\nBob\nja\n",
    )

    assert result.exit_code == 0, result.output
    with zipfile.ZipFile(out_dir / "Prompted.epub") as archive:
        opf = archive.read("OEBPS/package.opf").decode("utf-8")
    assert "<dc:creator>Bob</dc:creator>" in opf
    assert "<dc:language>ja</dc:language>" in opf
    assert '<dc:identifier id="BookId">fixed-id</dc:identifier>' in opf


def test_build_vertical_keep_and_toc_level(src_dir, out_dir):
    (src_dir / "a.md").write_text("# A\n\n## B\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["build", str(src_dir), "-t", "Book", "-c", "Alice", "-l", "ja", "-o", str(out_dir),
         "-v", "-k", "-h", "1"],
    )

    assert result.exit_code == 0, result.output
    assert 'page-progression-direction="rtl"' in (out_dir / "OEBPS" / "package.opf").read_text(
        encoding="utf-8"
    )
    assert 'hidden="hidden"' in (out_dir / "OEBPS" / "navigation.xhtml").read_text(
        encoding="utf-8"
    )


def test_invalid_toc_level_falls_back_with_warning(src_dir, out_dir):
    (src_dir / "a.md").write_text("# A\n\n## B\n\n### C\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["build", str(src_dir), "-t", "Book", "-c", "Alice", "-l", "en", "-o", str(out_dir),
         "-k", "--toc-level", "abc"],
    )

    assert result.exit_code == 0, result.output
    assert "Invalid toc level" in result.output
    nav = (out_dir / "OEBPS" / "navigation.xhtml").read_text(encoding="utf-8")
    assert nav.count('hidden="hidden"') == 1


def test_missing_input_fails(tmp_path, out_dir):
    result = runner.invoke(
        app,
        ["build", str(tmp_path / "missing.md"), "-t", "Book", "-c", "Alice", "-l", "en",
         "-o", str(out_dir)],
    )

    assert result.exit_code == 1
    assert "Error" in result.output
    assert list(out_dir.iterdir()) == []


def test_bookid_with_whitespace_is_rejected(src_dir, out_dir):
    (src_dir / "a.md").write_text("# A\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["build", str(src_dir), "-t", "Book", "-c", "Alice", "-l", "en", "-o", str(out_dir),
         "--bookid", "not valid"],
    )

    assert result.exit_code == 1
    assert "Invalid identifier" in result.output


def test_toc_preview(src_dir):
    (src_dir / "a.md").write_text("# Title\n\n### Deep\n", encoding="utf-8")

    result = runner.invoke(app, ["toc", str(src_dir)])

    assert result.exit_code == 0, result.output
    assert "Title" in result.output
    assert "Deep" in result.output
    assert "(h2)" in result.output


def test_toc_preview_nests_in_reading_order(src_dir):
    (src_dir / "a.md").write_text("# One\n\n## Sub\n", encoding="utf-8")
    (src_dir / "b.md").write_text("# Two\n", encoding="utf-8")
    output = io.StringIO()

    execute_toc(src_dir, 2, Console(file=output, width=120, color_system=None))

    lines = output.getvalue().splitlines()
    one = next(i for i, line in enumerate(lines) if "One" in line)
    sub = next(i for i, line in enumerate(lines) if "Sub" in line)
    two = next(i for i, line in enumerate(lines) if "Two" in line)
    assert one < sub < two
    assert lines[sub].index("Sub") > lines[one].index("One")
    assert lines[two].index("Two") == lines[one].index("One")
