"""Editorview CLI entry point.

Allows running via `python -m editorview [FILE]` and provides the console
script defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile

from .constants import EditorConstants
from .version import get_version_string

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    # The session owns the terminal, so logs only ever go to a file
    log_file = os.environ.get(EditorConstants.LOG_FILE_ENV)
    if not log_file:
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def load_file(filename: str) -> str:
    """Read ``filename``; a missing file is an empty document."""
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            return f.read()
    except FileNotFoundError:
        return ""


def save_file(filename: str, content: str) -> None:
    """Write ``content`` to ``filename`` atomically."""
    dir_name = os.path.dirname(filename) or '.'
    base = os.path.basename(filename)
    fd, temp_filename = tempfile.mkstemp(
        prefix=EditorConstants.ATOMIC_SAVE_PREFIX + base,
        suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
        dir=dir_name,
    )
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())  # Ensure data is written to disk
        os.replace(temp_filename, filename)
    except BaseException:
        if os.path.exists(temp_filename):
            os.remove(temp_filename)
        raise


def main() -> None:
    # Very small arg parsing to support version and an optional filename
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return

    _configure_logging()
    filename = args[0] if args else None
    initial = load_file(filename) if filename else ""

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    editor = Editor()
    editor.edit(initial)

    content = editor.content()
    if filename and content != initial:
        try:
            save_file(filename, content)
        except OSError as e:
            logger.warning(f"Could not save {filename}: {e}")
            print(f"Error saving {filename}: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
