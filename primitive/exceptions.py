from enum import Enum


class UriErrorKind(Enum):
    MALFORMED_URI = "malformed_uri"
    INVALID_SCHEME = "invalid_scheme"
    INVALID_HOST = "invalid_host"
    INVALID_PORT = "invalid_port"
    PORT_OUT_OF_RANGE = "port_out_of_range"
    INVALID_PATH = "invalid_path"
    INVALID_QUERY_OR_FRAGMENT = "invalid_query_or_fragment"
    INVALID_USER_INFO = "invalid_user_info"


class UriError(Exception):
    def __init__(self, kind: UriErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class StreamError(Exception):
    def __init__(self, message: str, inner_exception=None):
        super().__init__(message)
        self.inner_exception = inner_exception


class StashError(Exception):
    def __init__(self, message: str, key=None):
        super().__init__(message)
        self.key = key
