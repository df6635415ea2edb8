###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Target file I/O.

Content is decoded with `surrogateescape` so bytes that are not valid in
the chosen encoding survive a read/write round trip unchanged. No newline
translation happens in either direction.
"""

import codecs
import os
import shutil
import tempfile

from patchkit.core.patches.errors import TargetFileError

DEFAULT_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def check_encoding(encoding: str) -> None:
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise TargetFileError(f"Unknown encoding: {encoding}") from e


def check_target(path: str) -> None:
    """Fail with TargetFileError unless `path` is a readable, writable regular file."""
    if not os.path.isfile(path):
        raise TargetFileError(f"File not found: {path}")
    if not os.access(path, os.R_OK):
        raise TargetFileError(f"File is not readable: {path}")
    if not os.access(path, os.W_OK):
        raise TargetFileError(f"File is not writable: {path}")


def read_text(path: str, encoding: str = DEFAULT_ENCODING) -> str:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise TargetFileError(f"Failed to read {path}: {e}") from e
    return data.decode(encoding, _ERRORS)


def encode_text(content: str, encoding: str = DEFAULT_ENCODING) -> bytes:
    """Raises UnicodeEncodeError for characters the encoding cannot represent."""
    return content.encode(encoding, _ERRORS)


def commit_text(path: str, content: str, encoding: str = DEFAULT_ENCODING) -> None:
    commit_bytes(path, encode_text(content, encoding))


def commit_bytes(path: str, data: bytes) -> None:
    """
    Replace the file at `path` with `data`.

    The data is written to a temporary sibling first and moved over the
    target with os.replace, so readers see either the old or the new file.
    The original permission bits are preserved.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".patchkit-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise TargetFileError(f"Failed to write {path}: {e}") from e
