import copy
import os
import re
from collections.abc import Mapping, MutableSequence
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
from urllib.parse import parse_qsl, quote, quote_plus, urlsplit

from primitive.exceptions import UriError, UriErrorKind
from primitive.logs import get_logger

logger = get_logger()


DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
    "ftp": 21,
    "gopher": 70,
    "nntp": 119,
    "news": 119,
    "telnet": 23,
    "tn3270": 23,
    "imap": 143,
    "pop": 110,
    "ldap": 389,
    "ssh": 22,
}

UNRESERVED_CHARACTERS = r"a-zA-Z0-9_\-\.~"
SUB_DELIMITED_CHARACTERS = r"!\$&'\(\)\*\+,;="

# runs of characters outside the allowed set, or a "%" that does not start a
# valid percent-escape
_ENCODE_PATTERN = re.compile(
    r"(?:[^"
    + UNRESERVED_CHARACTERS
    + SUB_DELIMITED_CHARACTERS
    + r"%:@/]+|%(?![A-Fa-f0-9]{2}))"
)


def _percent_encode(value: str, error_kind: UriErrorKind) -> str:
    # lone surrogates from os.fsdecode map back to their original bytes
    try:
        return _ENCODE_PATTERN.sub(
            lambda match: quote(match.group(0), safe="", errors="surrogateescape"),
            value,
        )
    except UnicodeEncodeError as encode_error:
        raise UriError(
            error_kind, f"The value cannot be percent-encoded ({value!r})"
        ) from encode_error


def marshal_scheme(scheme: Any) -> Optional[str]:
    if scheme is None:
        return None
    if not isinstance(scheme, str):
        raise UriError(UriErrorKind.INVALID_SCHEME, "Scheme must be a string")
    return scheme.lower()


def marshal_host(host: Any) -> str:
    if not isinstance(host, str):
        raise UriError(UriErrorKind.INVALID_HOST, "Host must be a string")
    return host.lower()


def marshal_port(port: Any) -> Optional[int]:
    if port is None:
        return None
    if isinstance(port, bool):
        raise UriError(UriErrorKind.INVALID_PORT, f"Invalid port: {port}")
    try:
        value = int(port)
    except (TypeError, ValueError) as coercion_error:
        raise UriError(
            UriErrorKind.INVALID_PORT, f"Invalid port: {port!r}"
        ) from coercion_error
    if value < 0 or value > 65535:
        raise UriError(
            UriErrorKind.PORT_OUT_OF_RANGE,
            f"Invalid port: {value}, value must be between 0 and 65535",
        )
    return value


def marshal_path(path: Any) -> str:
    if path is None:
        path = "/"
    if not isinstance(path, str):
        raise UriError(UriErrorKind.INVALID_PATH, "Path must be a string or None")
    return _percent_encode(path, UriErrorKind.INVALID_PATH)


def marshal_query_or_fragment(value: Any) -> str:
    if not isinstance(value, str):
        raise UriError(
            UriErrorKind.INVALID_QUERY_OR_FRAGMENT,
            "Query and fragment must be strings",
        )
    return _percent_encode(value, UriErrorKind.INVALID_QUERY_OR_FRAGMENT)


def _marshal_user_info_part(value: Any) -> str:
    if not isinstance(value, str):
        raise UriError(
            UriErrorKind.INVALID_USER_INFO, "User and password must be strings"
        )
    return value


def parse_www_form_urlencoded(content: str) -> dict:
    data = {}
    for key, value in parse_qsl(content, keep_blank_values=True):
        if key in data:
            if isinstance(data[key], str):
                data[key] = [data[key], value]
            else:
                data[key].append(value)
        else:
            data[key] = value
    return data


def _iter_form_pairs(key: str, value: Any) -> Iterator[Tuple[str, Any]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        for child_key, child_value in value.items():
            yield from _iter_form_pairs(f"{key}[{child_key}]", child_value)
    elif isinstance(value, (MutableSequence, tuple)):
        for item in value:
            yield from _iter_form_pairs(key, item)
    else:
        yield key, value


def write_www_form_urlencoded(data: Union[Mapping, List[Tuple[str, Any]]]) -> str:
    """
    Writes a form-encoded string. None values are skipped, sequences become
    repeated keys and nested mappings are written with bracketed keys
    (`a[b]=1`).
    """
    if isinstance(data, list):
        values = data
    else:
        values = data.items()
    contents = []
    for key, value in values:
        for item_key, item in _iter_form_pairs(str(key), value):
            contents.append(quote_plus(item_key) + "=" + quote_plus(str(item)))
    return "&".join(contents)


def split_uri(value: str) -> Dict[str, Any]:
    """
    Splits a URI string into its generic parts: scheme, user, pass, host, port,
    path, query and fragment. Parts that are not present in the value are not
    included in the returned dictionary.
    """
    try:
        parsed = urlsplit(value)
    except ValueError as split_error:
        logger.debug("Cannot split URI %r: %s", value, split_error)
        raise UriError(
            UriErrorKind.MALFORMED_URI, f"The value cannot be parsed as URI ({value})"
        ) from split_error

    parts: Dict[str, Any] = {}

    if parsed.scheme:
        parts["scheme"] = parsed.scheme

    hierarchical_part = value.strip()[len(parsed.scheme) + 1 if parsed.scheme else 0 :]
    if (
        hierarchical_part.startswith("//")
        and not parsed.netloc
        and parsed.scheme != "file"
    ):
        logger.debug("Cannot split URI %r: empty authority", value)
        raise UriError(
            UriErrorKind.MALFORMED_URI, f"The value cannot be parsed as URI ({value})"
        )

    if parsed.netloc:
        user_info, at, host_port = parsed.netloc.rpartition("@")
        if at:
            user, colon, password = user_info.partition(":")
            parts["user"] = user
            if colon:
                parts["pass"] = password

        host, colon, port = host_port.partition(":")
        parts["host"] = host
        if port:
            if not port.isdigit():
                logger.debug("Cannot split URI %r: invalid port", value)
                raise UriError(
                    UriErrorKind.MALFORMED_URI,
                    f"The value cannot be parsed as URI ({value})",
                )
            parts["port"] = int(port)

    if parsed.path:
        parts["path"] = parsed.path
    if parsed.query:
        parts["query"] = parsed.query
    if parsed.fragment:
        parts["fragment"] = parsed.fragment
    return parts


class Uri:
    """
    Immutable URI value. Components are normalized when they are set, every
    `with_*` and `without_*` method returns a new instance, or the same instance
    when the requested value equals the current one.
    """

    DEFAULT_PORTS = DEFAULT_PORTS

    def __init__(self, value: Optional[str] = None):
        self._scheme: Optional[str] = None
        self._user_info: Optional[str] = None
        self._host: Optional[str] = "localhost"
        self._port: Optional[int] = None
        self._default_port: Optional[int] = None
        self._path = "/"
        self._query: Optional[str] = None
        self._fragment: Optional[str] = None

        if value is None or value == "":
            return
        if not isinstance(value, str):
            raise UriError(
                UriErrorKind.MALFORMED_URI,
                f"Expected a URI string; got instead {type(value).__name__}",
            )
        self._marshal_instance(split_uri(value))

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Uri":
        return cls(value)

    @classmethod
    def from_parts(cls, parts: Mapping) -> "Uri":
        """
        Creates an instance from a mapping of URI parts. Supported keys are:
        scheme, user, pass, host, port, path, query, fragment.
        """
        instance = cls()
        instance._marshal_instance(parts)
        return instance

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike]) -> "Uri":
        return cls.from_parts(
            {"scheme": "file", "host": "", "path": os.fsdecode(path)}
        )

    def _marshal_instance(self, parts: Mapping) -> None:
        scheme = marshal_scheme(parts["scheme"]) if "scheme" in parts else None

        user_info = None
        if parts.get("user") is not None:
            user_info = _marshal_user_info_part(parts["user"])
        if parts.get("pass") is not None:
            user_info = (user_info or "") + ":" + _marshal_user_info_part(parts["pass"])

        host = marshal_host(parts["host"]) if parts.get("host") is not None else None
        port = marshal_port(parts.get("port"))

        path = parts.get("path")
        path = marshal_path(None if path == "" else path)

        query = (
            marshal_query_or_fragment(parts["query"])
            if parts.get("query") is not None
            else None
        )
        fragment = (
            marshal_query_or_fragment(parts["fragment"])
            if parts.get("fragment") is not None
            else None
        )

        # components are assigned only once all of them are valid
        self._scheme = scheme
        self._user_info = user_info
        self._host = host
        self._port = port
        self._path = path
        self._query = query
        self._fragment = fragment
        self._calibrate_port()

    def _calibrate_port(self) -> None:
        if self._scheme is None:
            self._default_port = None
        else:
            self._default_port = self.DEFAULT_PORTS.get(self._scheme)

    def _derive(self, **components: Any) -> "Uri":
        instance = copy.copy(self)
        for name, value in components.items():
            setattr(instance, "_" + name, value)
        return instance

    def is_local(self) -> bool:
        return self._scheme == "file"

    def is_remote(self) -> bool:
        return self._scheme != "file" and self._host != "localhost"

    @property
    def scheme(self) -> Optional[str]:
        return self._scheme

    def with_scheme(self, scheme: Optional[str]) -> "Uri":
        scheme = marshal_scheme(scheme)
        if self._scheme == scheme:
            return self
        instance = self._derive(scheme=scheme)
        instance._calibrate_port()
        return instance

    @property
    def authority(self) -> Optional[str]:
        if self._host is None and not self._user_info and self._port is None:
            return None

        authority = self._host or ""
        if self._user_info:
            authority = self._user_info + "@" + authority
        if self._port is not None:
            authority = f"{authority}:{self._port}"
        return authority

    @property
    def user_info(self) -> Optional[str]:
        return self._user_info

    def with_user_info(self, user: str, password: Optional[str] = None) -> "Uri":
        info = _marshal_user_info_part(user)
        # the password is appended only when one is given
        if password is not None:
            info += ":" + _marshal_user_info_part(password)
        if self._user_info == info:
            return self
        return self._derive(user_info=info)

    def without_user_info(self) -> "Uri":
        if self._user_info is None:
            return self
        return self._derive(user_info=None)

    @property
    def host(self) -> Optional[str]:
        return self._host

    def with_host(self, host: str) -> "Uri":
        host = marshal_host(host)
        if self._host == host:
            return self
        return self._derive(host=host)

    @property
    def port(self) -> Optional[int]:
        """
        Returns the explicit port, if set, otherwise the default port of the
        scheme, if the scheme has one.
        """
        if self._port is None:
            return self._default_port
        return self._port

    def does_implement_port(self) -> bool:
        return self._port is not None or self._default_port is not None

    def with_port(self, port: Optional[int]) -> "Uri":
        port = marshal_port(port)
        if self._port == port:
            return self
        return self._derive(port=port)

    def without_port(self) -> "Uri":
        # returns the derived instance, so the port falls back to the scheme default
        if self._port is None:
            return self
        return self._derive(port=None)

    @property
    def path(self) -> str:
        return self._path

    def with_path(self, path: Optional[str]) -> "Uri":
        path = marshal_path(path)
        if self._path == path:
            return self
        return self._derive(path=path)

    def without_path(self) -> "Uri":
        if self._path == "/":
            return self
        return self._derive(path="/")

    @property
    def query(self) -> Optional[str]:
        return self._query

    def query_as_dict(self) -> dict:
        if self._query is None:
            return {}
        return parse_www_form_urlencoded(self._query)

    def with_query(self, query: str) -> "Uri":
        query = marshal_query_or_fragment(query)
        if self._query == query:
            return self
        return self._derive(query=query)

    def with_query_from_dict(self, data: Mapping) -> "Uri":
        query = write_www_form_urlencoded(data)
        if self._query == query:
            return self
        return self._derive(query=query)

    def without_query(self) -> "Uri":
        if self._query is None:
            return self
        return self._derive(query=None)

    @property
    def fragment(self) -> Optional[str]:
        return self._fragment

    def with_fragment(self, fragment: str) -> "Uri":
        fragment = marshal_query_or_fragment(fragment)
        if self._fragment == fragment:
            return self
        return self._derive(fragment=fragment)

    def without_fragment(self) -> "Uri":
        if self._fragment is None:
            return self
        return self._derive(fragment=None)

    def get_uri(self) -> str:
        uri = ""
        if self._scheme is not None:
            uri += self._scheme + ":"

        authority = self.authority
        if authority is not None or self._scheme == "file":
            uri += "//" + (authority or "")

        uri += self._path

        if self._query is not None:
            uri += "?" + self._query
        if self._fragment is not None:
            uri += "#" + self._fragment
        return uri

    @property
    def uri(self) -> str:
        return self.get_uri()

    def _components(self) -> tuple:
        return (
            self._scheme,
            self._user_info,
            self._host,
            self._port,
            self._path,
            self._query,
            self._fragment,
        )

    def __str__(self):
        return self.get_uri()

    def __repr__(self):
        return f"<Uri {self.get_uri()!r}>"

    def __eq__(self, other):
        if isinstance(other, Uri):
            return self._components() == other._components()
        return NotImplemented

    def __hash__(self):
        return hash(self._components())
