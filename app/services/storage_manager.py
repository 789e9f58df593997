from pathlib import Path
from typing import List, Optional

import aiofiles
import aiofiles.os

from app.errors import ErrorKind, Result
from logger_config import setup_logger

logger = setup_logger()


class StorageManager:
    """Flat file storage under a single root directory.

    Every operation maps onto one filesystem call. Names are joined onto the
    root as given, so a name containing path separators or an absolute path
    escapes the root. Filesystem errors are returned as ``Result`` failures
    instead of being raised.
    """

    def __init__(self, storage_dir: Path):
        self.storage_dir = Path(storage_dir)

    def initialize(self):
        """Create the storage directory if needed. Raises RuntimeError if it can't be created."""
        logger.info("Initializing storage manager...")

        existed = self.storage_dir.exists()
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.critical(f"Failed to create storage directory {self.storage_dir}: {e}")
            raise RuntimeError(f"Failed to create storage directory: {self.storage_dir}") from e

        if existed:
            logger.debug(f"Storage directory verified: {self.storage_dir}")
        else:
            logger.info(f"Created storage directory: {self.storage_dir}")

        try:
            file_count = sum(1 for entry in self.storage_dir.iterdir() if entry.is_file())
        except OSError as e:
            logger.warning(f"Could not count stored files in {self.storage_dir}: {e}")
        else:
            logger.info(f"Files currently stored: {file_count}")

    def get_file_path(self, filename: str) -> Path:
        return self.storage_dir / filename

    async def save_file(self, filename: str, data: bytearray) -> Result[str]:
        """Create or truncate the file and write ``data`` to it.

        A failed write leaves whatever was written so far on disk.
        """
        file_path = self.get_file_path(filename)

        try:
            async with aiofiles.open(file_path, "wb") as file:
                await file.write(data)
        except OSError as e:
            logger.error(f"File write error for {file_path}: {e}")
            return Result.failure(ErrorKind.FILE_OPERATION)

        logger.debug(f"Wrote {len(data)} bytes to {file_path}")
        return Result.success(filename)

    async def list_files(self) -> Result[List[str]]:
        """Names of the regular files directly inside the root, sorted."""
        try:
            entries = await aiofiles.os.listdir(self.storage_dir)
        except OSError as e:
            logger.error(f"Error reading directory {self.storage_dir}: {e}")
            return Result.failure(ErrorKind.FILE_OPERATION)

        names = []
        for name in entries:
            if not await aiofiles.os.path.isfile(self.storage_dir / name):
                continue
            # Undecodable names (surrogate escapes) can't be returned as JSON text
            try:
                name.encode("utf-8")
            except UnicodeEncodeError:
                logger.warning(f"Skipping file with undecodable name in {self.storage_dir}")
                continue
            names.append(name)

        names.sort()
        return Result.success(names)

    async def read_file(self, filename: str) -> Result[Optional[bytes]]:
        """Read the whole file into memory. A missing file is a successful ``None``."""
        file_path = self.get_file_path(filename)

        if not await aiofiles.os.path.exists(file_path):
            return Result.success(None)

        try:
            async with aiofiles.open(file_path, "rb") as file:
                contents = await file.read()
        except OSError as e:
            logger.error(f"Error reading file {file_path}: {e}")
            return Result.failure(ErrorKind.FILE_OPERATION)

        return Result.success(contents)

    async def delete_file(self, filename: str) -> Result[bool]:
        """Remove the file. Returns ``False`` as the value when it doesn't exist."""
        file_path = self.get_file_path(filename)

        if not await aiofiles.os.path.exists(file_path):
            return Result.success(False)

        try:
            await aiofiles.os.remove(file_path)
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return Result.failure(ErrorKind.FILE_OPERATION)

        return Result.success(True)
