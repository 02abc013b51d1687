"""
Payload Assembly
================

Reads the raw variable data from a binary stream and applies length-prefix
framing when the variable type needs it.

Length-Prefix Framing
---------------------
Programs, strings, equations, pictures and (on the newer models)
application variables are stored on the calculator with a 2-byte
little-endian count of the bytes that follow:

    03 00 01 02 03      <- 3-byte program "01 02 03"

The assembler reserves the 2 bytes before reading, then back-patches them
once the total size is known. The count is truncated to 16 bits: a payload
of 65536 bytes or more wraps around silently (a warning is logged).

Raw mode disables framing, storing the input byte-for-byte.

Example:
    >>> import io
    >>> PayloadAssembler(length_prefix=True).assemble(io.BytesIO(b"\\x01\\x02\\x03"))
    b'\\x03\\x00\\x01\\x02\\x03'
"""

import logging
import struct
from typing import BinaryIO, Optional

# Logger for this module
logger = logging.getLogger(__name__)

# Bytes requested from the stream per read call
READ_CHUNK_SIZE = 64 * 1024

# Size of the length prefix in bytes
LENGTH_PREFIX_SIZE = 2


def read_all(stream: BinaryIO, buffer: Optional[bytearray] = None) -> bytearray:
    """
    Read a binary stream to EOF.

    Args:
        stream: Stream opened in binary mode
        buffer: Optional buffer to append to (defaults to a new one)

    Returns:
        The buffer holding every byte read
    """
    if buffer is None:
        buffer = bytearray()

    while True:
        chunk = stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)

    return buffer


class PayloadAssembler:
    """
    Builds variable data from an input stream.

    Attributes:
        length_prefix: Whether the type calls for a 2-byte length prefix
        raw: Raw mode; suppresses the length prefix regardless of type
        logger: Logger receiving progress and wraparound messages
    """

    def __init__(
        self,
        length_prefix: bool = False,
        raw: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self.length_prefix = length_prefix
        self.raw = raw
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    @property
    def frames_payload(self) -> bool:
        """True if the assembled payload gets a length prefix."""
        return self.length_prefix and not self.raw

    def assemble(self, stream: BinaryIO) -> bytes:
        """
        Read the stream and return the stored variable data.

        Args:
            stream: Input stream opened in binary mode

        Returns:
            The variable data, length prefix included when framed
        """
        buffer = bytearray(LENGTH_PREFIX_SIZE if self.frames_payload else 0)
        read_all(stream, buffer)

        if self.frames_payload:
            count = len(buffer) - LENGTH_PREFIX_SIZE
            if count > 0xFFFF:
                self.logger.warning(
                    f"Payload of {count} bytes exceeds the 16-bit length "
                    f"field; stored length wraps to {count & 0xFFFF}"
                )
            struct.pack_into("<H", buffer, 0, count & 0xFFFF)

        self.logger.debug(
            f"Read {len(buffer)} bytes"
            + (" (with length prefix)" if self.frames_payload else "")
        )
        return bytes(buffer)

    def assemble_bytes(self, data: bytes) -> bytes:
        """Assemble from an in-memory byte string."""
        return frame_payload(data) if self.frames_payload else bytes(data)


def frame_payload(data: bytes) -> bytes:
    """
    Prefix data with its 16-bit little-endian length.

    Example:
        >>> frame_payload(b"AB")
        b'\\x02\\x00AB'
    """
    return struct.pack("<H", len(data) & 0xFFFF) + bytes(data)
