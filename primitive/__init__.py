"""
Root module of the library. This module re-exports the most commonly used types
to reduce the verbosity of the imports statements.
"""

__version__ = "1.0.0"

from .exceptions import StashError as StashError
from .exceptions import StreamError as StreamError
from .exceptions import UriError as UriError
from .exceptions import UriErrorKind as UriErrorKind
from .stash import AbstractStash as AbstractStash
from .stash import ArrayStash as ArrayStash
from .stash import Stash as Stash
from .streams import Stream as Stream
from .streams import StreamInterface as StreamInterface
from .streams import StringStream as StringStream
from .uri import DEFAULT_PORTS as DEFAULT_PORTS
from .uri import Uri as Uri
