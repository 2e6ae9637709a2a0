"""Loading hex text from disk."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

HEX_FILE_FILTER = "Text Files (*.txt);;All Files (*.*)"


def read_hex_file(path) -> str:
    """Read a text file of hex digits. Content is returned trimmed, not validated."""
    path = Path(path)
    contents = path.read_bytes().decode("utf-8", errors="replace")
    logger.info("Loaded %d characters from %s", len(contents), path)
    return contents.strip()
