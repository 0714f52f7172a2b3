"""
Scoped uploads: a multipart file written to disk for the life of one request.
"""

import logging
import mimetypes
import os
import uuid
from contextlib import contextmanager
from typing import Iterator

from werkzeug.datastructures import FileStorage

DEFAULT_MIMETYPE = "application/octet-stream"


class ScopedUpload:
    def __init__(self, path: str, mimetype: str, filename: str) -> None:
        self.path = path
        self.mimetype = mimetype
        self.filename = filename

    def read(self) -> bytes:
        with open(self.path, "rb") as fh:
            return fh.read()


def declared_mimetype(storage: FileStorage) -> str:
    """
    MIME type sent by the client for this part, else a guess from the filename.
    """
    if storage.mimetype:
        return storage.mimetype
    guessed, _ = mimetypes.guess_type(storage.filename or "")
    return guessed or DEFAULT_MIMETYPE


@contextmanager
def scoped_upload(storage: FileStorage, upload_dir: str) -> Iterator[ScopedUpload]:
    """
    Save `storage` under a unique name in `upload_dir` and remove it on exit.

    The file belongs to the calling request only. Removal runs on every exit
    path; a failed removal is logged and never replaces the caller's outcome.

    Usage:
        with scoped_upload(request.files["audio"], cfg.upload_dir) as upload:
            data = upload.read()
    """
    os.makedirs(upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, uuid.uuid4().hex)
    upload = ScopedUpload(path, declared_mimetype(storage), storage.filename or "")
    try:
        storage.save(path)
        yield upload
    finally:
        if os.path.exists(path):
            try:
                os.remove(path)
            except OSError as e:
                logging.warning(f"Could not delete upload {path} ({upload.filename}): {e}")
