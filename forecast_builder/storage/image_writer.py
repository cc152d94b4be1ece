"""Writes encoded images to a directory."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileImageWriter:
    def __init__(self, directory: str | Path = "."):
        self.directory = Path(directory)

    def save_file(self, file_name: str, data: bytes) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / file_name
        path.write_bytes(data)
        logger.info("Wrote %s (%d bytes)", path, len(data))
        return path
