"""Local hostname resolution."""

import ctypes
import ctypes.util
import os
import socket
from typing import Callable, Optional

from node_telemetry.core.errors import (
    HostnameError,
    HostnameMissingNullError,
    NonUtf8HostnameError,
)

# See netdb.h
MAX_HOSTNAME_LEN = 256


def decode_hostname(buffer: bytes) -> str:
    """
    Decode a NUL-terminated hostname buffer.

    Raises:
        HostnameMissingNullError: if the buffer holds no NUL byte.
        NonUtf8HostnameError: if the bytes before the NUL are not UTF-8.
    """
    end = buffer.find(b"\0")
    if end < 0:
        raise HostnameMissingNullError()
    try:
        return buffer[:end].decode("utf-8")
    except UnicodeDecodeError as e:
        raise NonUtf8HostnameError() from e


def _libc_gethostname(max_len: int) -> bytes:
    libc_name = ctypes.util.find_library("c")
    if libc_name is None:
        # No libc to call (e.g. Windows); the resolver returns decoded text
        return socket.gethostname().encode("utf-8") + b"\0"

    libc = ctypes.CDLL(libc_name, use_errno=True)
    buffer = ctypes.create_string_buffer(max_len + 1)
    if libc.gethostname(buffer, ctypes.c_size_t(max_len)) != 0:
        errno = ctypes.get_errno()
        raise OSError(errno, os.strerror(errno))
    return buffer.raw


def hostname(
    max_len: int = MAX_HOSTNAME_LEN,
    gethostname: Optional[Callable[[int], bytes]] = None,
) -> str:
    """Return the local hostname."""
    fetch = gethostname or _libc_gethostname
    try:
        buffer = fetch(max_len)
    except OSError as e:
        raise HostnameError() from e
    # Only the first max_len + 1 bytes are ours; the terminator must be in them
    return decode_hostname(buffer[: max_len + 1])
