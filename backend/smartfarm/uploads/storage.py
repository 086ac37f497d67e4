"""Filesystem layout and naming for stored uploads.

Files are stored in: {root}/{folder}/{uuid}.{ext}
"""
import logging
import uuid
from pathlib import Path
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)


def ensure_layout(root: Union[str, Path], folders: Iterable[str]) -> List[Path]:
    """Create the upload root and each known folder under it.

    Safe to call repeatedly. Filesystem errors (e.g. read-only disk) are not
    caught; the server should not start without somewhere to write.

    Returns:
        The directories that were ensured, root first
    """
    root = Path(root)
    dirs = [root] + [root / folder for folder in folders]
    for directory in dirs:
        directory.mkdir(parents=True, exist_ok=True)
    logger.info(f"Upload layout ready under {root} ({len(dirs) - 1} folders)")
    return dirs


def generate_filename(
    original_name: Optional[str] = None,
    extension: Optional[str] = None,
) -> str:
    """Generate a collision-resistant filename.

    The stem is a random UUID4 (OS CSPRNG). The extension is taken from
    ``extension`` if given, otherwise from the suffix of ``original_name``.

    Examples:
        >>> generate_filename("cat.PNG")      # doctest: +SKIP
        '3f2b...e1.png'
        >>> generate_filename(extension="webp")  # doctest: +SKIP
        '9a0c...44.webp'
    """
    if extension is None and original_name:
        extension = Path(original_name).suffix
    ext = (extension or "").lstrip(".").lower()
    stem = str(uuid.uuid4())
    return f"{stem}.{ext}" if ext else stem
