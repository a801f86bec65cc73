import os
from abc import ABC, abstractmethod
from typing import IO, Any, AnyStr, Dict, Optional

from primitive.exceptions import StreamError
from primitive.logs import get_logger
from primitive.utils import ensure_bytes

logger = get_logger()


class StreamInterface(ABC):
    """
    Common interface of byte streams, whether they are backed by a file object or
    by contents held in memory.

    Navigation and write methods return the stream itself, so calls can be
    chained: `stream.rewind().skip(4).read(2)`.
    """

    @abstractmethod
    def get_size(self) -> Optional[int]: ...

    @abstractmethod
    def get_position(self) -> int: ...

    @abstractmethod
    def is_end_of_stream(self) -> bool: ...

    @abstractmethod
    def is_seekable(self) -> bool: ...

    @abstractmethod
    def is_writable(self) -> bool: ...

    @abstractmethod
    def is_readable(self) -> bool: ...

    @abstractmethod
    def seek(self, offset: int) -> "StreamInterface":
        """Moves to the given absolute position."""

    @abstractmethod
    def skip(self, count: int) -> "StreamInterface":
        """Moves forward by the given number of bytes."""

    @abstractmethod
    def ahead(self, offset: int = 0) -> "StreamInterface":
        """Moves to the given position relative to the end of the stream."""

    @abstractmethod
    def rewind(self) -> "StreamInterface": ...

    @abstractmethod
    def write(self, data: AnyStr) -> "StreamInterface": ...

    @abstractmethod
    def read(self, length: Optional[int] = None) -> bytes:
        """
        Reads up to `length` bytes from the current position, or everything up to
        the end of the stream when `length` is None.
        """

    @abstractmethod
    def get_metadata(self, key: Optional[str] = None) -> Any: ...


class Stream(StreamInterface):
    """
    Stream backed by an open binary file object, for example the object returned
    by `open(path, "rb")` or an `io.BytesIO`.
    """

    def __init__(
        self,
        file: IO[bytes],
        size: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        if not all(
            callable(getattr(file, name, None))
            for name in ("read", "write", "seek", "tell")
        ):
            raise StreamError(
                f"Stream argument must be a file object, {type(file).__name__} given"
            )
        if getattr(file, "closed", False):
            raise StreamError("Stream argument must be an open file object")

        self._file = file
        self._size = int(size) if size is not None else None
        self._custom_metadata = dict(metadata or {})
        self._seekable = bool(file.seekable())
        self._readable = bool(file.readable())
        self._writable = bool(file.writable())
        self._uri = getattr(file, "name", None)
        self._end_of_stream = False

    @property
    def file(self) -> IO[bytes]:
        return self._file

    @property
    def closed(self) -> bool:
        return self._file.closed

    def _ensure_available(self) -> IO[bytes]:
        if self._file.closed:
            raise StreamError("Stream is no longer available")
        return self._file

    def _ensure_seekable(self) -> IO[bytes]:
        file = self._ensure_available()
        if not self._seekable:
            raise StreamError("Stream is not seekable")
        return file

    def _seek(self, offset: int, whence: int) -> "Stream":
        file = self._ensure_seekable()
        try:
            file.seek(offset, whence)
        except (OSError, ValueError) as seek_error:
            raise StreamError(
                "Unable to seek to stream position", seek_error
            ) from seek_error
        self._end_of_stream = False
        return self

    def get_size(self) -> Optional[int]:
        if self._file.closed:
            return None
        if self._size is not None:
            return self._size

        try:
            fileno = self._file.fileno()
        except (AttributeError, OSError, ValueError):
            fileno = None

        if fileno is not None:
            if self._writable:
                self._file.flush()
            self._size = os.fstat(fileno).st_size
            return self._size

        if self._seekable:
            position = self._file.tell()
            size = self._file.seek(0, os.SEEK_END)
            self._file.seek(position)
            return size
        return None

    def get_position(self) -> int:
        file = self._ensure_available()
        try:
            return file.tell()
        except (OSError, ValueError) as tell_error:
            raise StreamError(
                "Unable to determine stream position", tell_error
            ) from tell_error

    def is_end_of_stream(self) -> bool:
        file = self._ensure_available()
        if self._seekable:
            size = self.get_size()
            if size is not None:
                return file.tell() >= size
        return self._end_of_stream

    def is_seekable(self) -> bool:
        return self._seekable

    def is_writable(self) -> bool:
        return self._writable

    def is_readable(self) -> bool:
        return self._readable

    def seek(self, offset: int) -> "Stream":
        return self._seek(offset, os.SEEK_SET)

    def skip(self, count: int) -> "Stream":
        return self._seek(count, os.SEEK_CUR)

    def ahead(self, offset: int = 0) -> "Stream":
        return self._seek(offset, os.SEEK_END)

    def rewind(self) -> "Stream":
        return self.seek(0)

    def write(self, data: AnyStr) -> "Stream":
        file = self._ensure_available()
        if not self._writable:
            raise StreamError("Stream is not writable")

        value = ensure_bytes(data)
        self._size = None
        try:
            file.write(value)
        except (OSError, ValueError) as write_error:
            raise StreamError("Unable to write to stream", write_error) from write_error
        return self

    def read(self, length: Optional[int] = None) -> bytes:
        file = self._ensure_available()
        if not self._readable:
            raise StreamError("Stream is not readable")
        if length is not None and length < 0:
            raise StreamError("Length parameter cannot be negative")
        if length == 0:
            return b""

        try:
            data = file.read(-1 if length is None else length)
        except (OSError, ValueError) as read_error:
            raise StreamError("Unable to read from stream", read_error) from read_error

        data = data or b""
        self._end_of_stream = length is None or len(data) < length
        return data

    def get_metadata(self, key: Optional[str] = None) -> Any:
        if self._file.closed:
            return {} if key is None else None

        metadata = {
            "uri": self._uri,
            "mode": getattr(self._file, "mode", None),
            "seekable": self._seekable,
        }
        # custom metadata takes precedence
        metadata.update(self._custom_metadata)

        if key is None:
            return metadata
        return metadata.get(key)

    def close(self) -> None:
        if not self._file.closed:
            logger.debug("Closing stream %s", self._uri or "<anonymous>")
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __bytes__(self) -> bytes:
        try:
            return self.rewind().read()
        except StreamError as stream_error:
            logger.debug("Cannot read the whole stream: %s", stream_error)
            return b""

    def __repr__(self):
        return f"<Stream {self._uri!r}>"


class StringStream(StreamInterface):
    """
    Read-only, seekable stream over contents held in memory. `str` contents are
    encoded to UTF-8.
    """

    def __init__(self, contents: AnyStr):
        try:
            self._contents = ensure_bytes(contents)
        except ValueError as value_error:
            raise StreamError(
                "String stream contents must be str or bytes", value_error
            ) from value_error
        self._metadata = {
            "stream_type": "string",
            "mode": "r",
        }
        self._position = 0

    def get_size(self) -> int:
        return len(self._contents)

    def get_position(self) -> int:
        return self._position

    def is_end_of_stream(self) -> bool:
        return self._position >= self.get_size()

    def is_seekable(self) -> bool:
        return True

    def is_writable(self) -> bool:
        return False

    def is_readable(self) -> bool:
        return True

    def seek(self, offset: int) -> "StringStream":
        if offset < 0 or offset > self.get_size():
            raise StreamError("offset is out of bounds")
        self._position = offset
        return self

    def skip(self, count: int) -> "StringStream":
        if count < 0:
            raise StreamError("Bytes to skip cannot be negative")
        if self._position + count > self.get_size():
            raise StreamError("offset is out of bounds")
        self._position += count
        return self

    def ahead(self, offset: int = 0) -> "StringStream":
        if offset != 0:
            raise StreamError("offset cannot be used with string streams")
        self._position = self.get_size()
        return self

    def rewind(self) -> "StringStream":
        self._position = 0
        return self

    def write(self, data: AnyStr) -> "StringStream":
        raise StreamError("String streams are not writable")

    def read(self, length: Optional[int] = None) -> bytes:
        if length is None:
            data = self._contents[self._position :]
        elif length < 0:
            raise StreamError("Length parameter cannot be negative")
        else:
            data = self._contents[self._position : self._position + length]
        self._position += len(data)
        return data

    def get_metadata(self, key: Optional[str] = None) -> Any:
        if key is None:
            return dict(self._metadata)
        return self._metadata.get(key)

    def __bytes__(self) -> bytes:
        return self._contents

    def __repr__(self):
        return f"<StringStream size={self.get_size()}>"
