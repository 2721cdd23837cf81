##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Local-directory storage for raw files such as user pictures.

Files are written under a single root directory (`__storage` by default) that
is created the first time something is uploaded. Callers store the returned
`UploadedFile.path` in a document and hand it back to `delete_object` later.
"""

import base64
import binascii
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from firelite.exceptions import BlobNotFoundError


LOG = logging.getLogger(__name__)

DEFAULT_FILENAME = "file"


@dataclass(frozen=True)
class UploadedFile:
    """
    Where an upload landed.

    Attributes:
        filename: The file's base name.
        content_type: The MIME type given at upload, if any.
        path: The file's location on disk.
    """

    filename: str
    content_type: Optional[str]
    path: Path


def _validate_filename(filename: str) -> str:
    """
    Ensure a file name is a plain base name that stays inside the storage root.

    Raises:
        ValueError: If the name is empty, `.`/`..`, or contains a path separator.
    """
    if not filename or filename in (".", "..") or os.path.basename(filename) != filename or "/" in filename:
        raise ValueError(f"Invalid file name '{filename}': must be a plain base name")
    return filename


class BlobStorage:
    """
    Stores bytes as files in a root directory.

    Attributes:
        root (Path): The directory files are written to.

    Methods:
        upload_bytes: Write bytes to a file.
        upload_string: Decode a base64 string and write the bytes to a file.
        delete_object: Remove a previously uploaded file.
    """

    def __init__(self, root: Union[str, Path] = "__storage"):
        self.root = Path(root)

    def upload_bytes(
        self, data: bytes, filename: Optional[str] = None, content_type: Optional[str] = None
    ) -> UploadedFile:
        """
        Write bytes to a file under the root, replacing any file of the same name.

        Args:
            data: The content to write.
            filename: The file's base name. Defaults to `file`.
            content_type: The MIME type to report back, if any.

        Returns:
            Where the file was written.

        Raises:
            ValueError: If the file name isn't a plain base name.
        """
        name = _validate_filename(filename or DEFAULT_FILENAME)
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / name
        path.write_bytes(data)
        LOG.info(f"Stored {len(data)} byte(s) at '{path}'.")
        return UploadedFile(filename=name, content_type=content_type, path=path)

    def upload_string(
        self, base64_string: str, filename: Optional[str] = None, content_type: Optional[str] = None
    ) -> UploadedFile:
        """
        Decode a base64 string and write the bytes to a file under the root.

        Args:
            base64_string: The base64-encoded content.
            filename: The file's base name. Defaults to `file`.
            content_type: The MIME type to report back, if any.

        Returns:
            Where the file was written.

        Raises:
            ValueError: If the string isn't valid base64 or the file name is invalid.
        """
        try:
            data = base64.b64decode(base64_string, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"Invalid base64 content: {exc}") from exc
        return self.upload_bytes(data, filename=filename, content_type=content_type)

    def delete_object(self, handle: Union[UploadedFile, str, Path]):
        """
        Remove a previously uploaded file.

        Args:
            handle: An `UploadedFile`, a name relative to the root, or an absolute path.

        Raises:
            ValueError: If a relative name resolves to somewhere outside the root.
            BlobNotFoundError: If there is no file at the resolved location.
        """
        if isinstance(handle, UploadedFile):
            path = Path(handle.path)
        else:
            path = Path(handle)
            if not path.is_absolute():
                path = self.root / path
                if not path.resolve().is_relative_to(self.root.resolve()):
                    raise ValueError(f"Invalid file name '{handle}': resolves outside the storage root")

        if not path.is_file():
            raise BlobNotFoundError(f"No stored file at '{path}'.")
        path.unlink()
        LOG.info(f"Deleted stored file '{path}'.")
