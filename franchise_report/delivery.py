"""
delivery.py — Report Artifact Delivery.

Saves a rendered artifact to the output directory under the download name
the admin dashboard has always used:

    relatorio_gerencial_<unix_ms>.pdf
    relatorio_gerencial_<unix_ms>.xlsx
    relatorio_gerencial_<unix_ms>.html
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "relatorio_gerencial"


def unix_ms() -> int:
    """Current time as integer milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def artifact_filename(extension: str, timestamp_ms: int,
                      prefix: str = DEFAULT_PREFIX) -> str:
    """Build the download file name.

    >>> artifact_filename("pdf", 1700000000000)
    'relatorio_gerencial_1700000000000.pdf'
    """
    return f"{prefix}_{timestamp_ms}.{extension.lstrip('.')}"


def save_artifact(
    content: bytes,
    extension: str,
    output_dir: Union[str, Path],
    timestamp_ms: Optional[int] = None,
    prefix: str = DEFAULT_PREFIX,
) -> Path:
    """Write a rendered artifact to disk.

    Args:
        content: File content from a renderer.
        extension: File extension without the dot (pdf, xlsx, html).
        output_dir: Directory to save into; created if missing.
        timestamp_ms: Timestamp for the file name; defaults to now.
        prefix: File name prefix.

    Returns:
        Path to the written file.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    stamp = unix_ms() if timestamp_ms is None else timestamp_ms
    path = out / artifact_filename(extension, stamp, prefix)
    path.write_bytes(content)
    logger.info("Saved %s (%d bytes)", path, len(content))
    return path
