"""Pack a working tree into an EPUB archive."""

import logging
import os
import shutil
import subprocess
import zipfile
from pathlib import Path

from repub.exceptions import IOFailure

log = logging.getLogger(__name__)


def _add_tree(archive: zipfile.ZipFile, root: Path, directory: Path) -> None:
    """Add a directory recursively; each directory entry precedes its contents."""
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        current = Path(dirpath)
        dir_info = zipfile.ZipInfo.from_file(current, current.relative_to(root).as_posix())
        archive.writestr(dir_info, b"", compress_type=zipfile.ZIP_DEFLATED)
        for filename in sorted(filenames):
            file_path = current / filename
            archive.write(
                file_path,
                file_path.relative_to(root).as_posix(),
                compress_type=zipfile.ZIP_DEFLATED,
            )


def pack_epub(root: Path, mimetype: Path, directories: list[Path], epub_path: Path) -> Path:
    """Write the EPUB archive.

    The mimetype entry is written first and stored uncompressed; everything
    else is deflated. An existing archive at ``epub_path`` is replaced.
    """
    try:
        if epub_path.exists():
            epub_path.unlink()
        with zipfile.ZipFile(epub_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.write(mimetype, "mimetype", compress_type=zipfile.ZIP_STORED)
            for directory in directories:
                _add_tree(archive, root, directory)
    except OSError as e:
        epub_path.unlink(missing_ok=True)
        raise IOFailure(f"Cannot write {epub_path}: {e}") from e

    log.info("Packed %s", epub_path)
    return epub_path


def pack_with_zip_command(
    root: Path, mimetype: Path, directories: list[Path], epub_path: Path
) -> Path:
    """Write the EPUB archive with the external ``zip`` utility.

    The mimetype entry is still first and stored. zip picks the method for
    the rest itself, so directory entries and empty files end up stored
    rather than deflated.
    """
    if not shutil.which("zip"):
        raise IOFailure("zip not found on PATH")

    target = epub_path.resolve()
    if epub_path.exists():
        epub_path.unlink()

    commands = [
        ["zip", "-X0q", str(target), mimetype.relative_to(root).as_posix()],
        ["zip", "-Xr9q", str(target)]
        + [directory.relative_to(root).as_posix() for directory in directories],
    ]
    for cmd in commands:
        try:
            result = subprocess.run(cmd, cwd=root, capture_output=True, text=True)
        except OSError as e:
            epub_path.unlink(missing_ok=True)
            raise IOFailure(f"Cannot run {cmd[0]}: {e}") from e
        if result.returncode != 0:
            epub_path.unlink(missing_ok=True)
            detail = result.stderr.strip().splitlines()[:1]
            raise IOFailure(
                f"zip failed (exit {result.returncode})"
                + (f": {detail[0]}" if detail else "")
            )

    log.info("Packed %s with zip", epub_path)
    return epub_path
