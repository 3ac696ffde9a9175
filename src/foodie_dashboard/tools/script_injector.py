"""Inject the console capture script into exported HTML pages.

Run after exporting the dashboard pages to static HTML:

    python -m foodie_dashboard.tools.script_injector build/

Every ``*.html`` file below the directory gets the script tag inserted
right before ``</head>``. Files that already reference the script are left
untouched, so running the tool twice is harmless.
"""

import argparse
import logging
import sys
from pathlib import Path

from foodie_dashboard.observability import configure_logging

logger = logging.getLogger(__name__)

SCRIPT_NAME = "dashboard-console-capture.js"
SCRIPT_TAG = f'<script src="/{SCRIPT_NAME}"></script>'
HEAD_CLOSE = "</head>"
DEFAULT_BUILD_DIR = "build"


def inject_script(file_path: Path) -> bool:
    """Insert the script tag into a single HTML file.

    Args:
        file_path: HTML file to update

    Returns:
        True if the file was modified, False if it was skipped or could not be updated
    """
    try:
        content = file_path.read_text(encoding="utf-8")

        if SCRIPT_NAME in content:
            return False

        if HEAD_CLOSE not in content:
            return False

        file_path.write_text(content.replace(HEAD_CLOSE, f"{SCRIPT_TAG}{HEAD_CLOSE}", 1), encoding="utf-8")
        logger.info(f"Injected console capture script into {file_path.name}")
        return True

    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error injecting script into {file_path}: {e}")
        return False


def walk_dir(root: Path) -> int:
    """Inject the script into every HTML file below ``root``.

    Args:
        root: Directory holding the exported pages

    Returns:
        Number of files modified
    """
    if not root.is_dir():
        logger.info(f"Build directory {root} not found. Script injection skipped.")
        return 0

    return sum(1 for path in sorted(root.rglob("*.html")) if path.is_file() and inject_script(path))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inject the console capture script into exported HTML files")
    parser.add_argument("build_dir", nargs="?", default=DEFAULT_BUILD_DIR, help="Directory of exported pages")
    args = parser.parse_args(argv)

    configure_logging()
    logger.info("Injecting console capture script into HTML files...")
    modified = walk_dir(Path(args.build_dir))
    logger.info(f"Console capture script injection complete ({modified} file(s) updated)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
