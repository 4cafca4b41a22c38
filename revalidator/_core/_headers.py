from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    Any,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)

logger = logging.getLogger("revalidator.core.headers")

__all__ = (
    "Header",
    "Headers",
    "CacheControl",
    "CacheControlDirective",
    "parse_directives",
    "parse_cache_control",
)

"""
HTTP token and quoted-string helpers.

Only the subset of RFC 9110 Section 5.6 needed to split Cache-Control
field values into directives.
"""

SEPARATORS = '()<>@,;:\\"/[]?={} \t'
OWS = " \t"


def is_token(c: str) -> bool:
    """
    Check if character is valid in an HTTP token.

    Per RFC 9110 Section 5.6.2:
    token = 1*tchar
    tchar = "!" / "#" / "$" / "%" / "&" / "'" / "*"
          / "+" / "-" / "." / "^" / "_" / "`" / "|" / "~"
          / DIGIT / ALPHA

    Examples:
        >>> is_token('a')
        True
        >>> is_token('-')
        True
        >>> is_token(',')
        False
        >>> is_token('=')
        False
    """
    if not c:
        return False
    b = ord(c)
    return 31 < b < 127 and c not in SEPARATORS


def is_qd_text(c: str) -> bool:
    r"""
    Check if character is valid inside a quoted-string.

    qdtext = HTAB / SP / %x21 / %x23-5B / %x5D-7E / obs-text
    """
    b = ord(c)
    return b in (0x09, 0x20, 0x21) or 0x23 <= b <= 0x5B or 0x5D <= b <= 0x7E or b >= 0x80


def http_unquote(raw: str) -> Tuple[int, str]:
    r"""
    Unquote the quoted-string at the start of ``raw``.

    Returns a tuple of (consumed characters, unquoted text). When the string is
    not terminated, ``(-1, "")`` is returned.

    Examples:
        >>> http_unquote('"Set-Cookie, Authorization"')
        (27, 'Set-Cookie, Authorization')
        >>> http_unquote('"a\\"b"')
        (6, 'a"b')
        >>> http_unquote('"open')
        (-1, '')
    """
    if not raw or raw[0] != '"':
        return -1, ""

    buf: List[str] = []
    i = 1
    while i < len(raw):
        c = raw[i]
        if c == '"':
            return i + 1, "".join(buf)
        if c == "\\":
            if i + 1 >= len(raw):
                return -1, ""
            buf.append(raw[i + 1])
            i += 2
            continue
        # Invalid characters are kept as '?' instead of failing the element
        buf.append(c if is_qd_text(c) else "?")
        i += 1
    return -1, ""


@dataclass(frozen=True)
class Header:
    name: str
    value: str

    def matches(self, name: str) -> bool:
        return self.name.lower() == name.lower()


HeaderTypes = Union[
    "Headers",
    Mapping[str, Union[str, List[str]]],
    Iterable[Tuple[str, str]],
    None,
]


class Headers(MutableMapping[str, str]):
    """
    Ordered collection of header fields.

    Duplicates are allowed and the order in which fields were added is kept.
    Name lookups are case-insensitive while the stored names keep the casing
    they were added with.

    The mapping interface sees a field name once: reading joins every value
    with ``", "``, assigning replaces every field with that name, and deleting
    drops them all. Use :meth:`add`, :meth:`first` and :meth:`get_all` to
    work with individual fields.
    """

    def __init__(self, headers: HeaderTypes = None) -> None:
        self._fields: List[Header] = []

        if headers is None:
            return
        if isinstance(headers, Headers):
            self._fields = list(headers._fields)
        elif isinstance(headers, Mapping):
            for name, value in headers.items():
                for item in [value] if isinstance(value, str) else value:
                    self._fields.append(Header(name, item))
        else:
            for name, value in headers:
                self._fields.append(Header(name, value))

    @property
    def fields(self) -> List[Header]:
        return list(self._fields)

    def multi_items(self) -> List[Tuple[str, str]]:
        return [(header.name, header.value) for header in self._fields]

    def first(self, name: str) -> Optional[Header]:
        for header in self._fields:
            if header.matches(name):
                return header
        return None

    def get_all(self, name: str) -> List[Header]:
        return [header for header in self._fields if header.matches(name)]

    def get_list(self, name: str) -> Optional[List[str]]:
        values = [header.value for header in self.get_all(name)]
        return values or None

    def add(self, name: str, value: str) -> None:
        self._fields.append(Header(name, value))

    def remove(self, name: str) -> None:
        self._fields = [header for header in self._fields if not header.matches(name)]

    def copy(self) -> "Headers":
        return Headers(self)

    def __getitem__(self, key: str) -> str:
        values = self.get_list(key)
        if values is None:
            raise KeyError(key)
        return ", ".join(values)

    def __setitem__(self, key: str, value: str) -> None:
        self.remove(key)
        self.add(key, value)

    def __delitem__(self, key: str) -> None:
        if self.first(key) is None:
            raise KeyError(key)
        self.remove(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.first(key) is not None

    def __iter__(self) -> Iterator[str]:
        seen = set()
        for header in self._fields:
            lowered = header.name.lower()
            if lowered not in seen:
                seen.add(lowered)
                yield header.name

    def __len__(self) -> int:
        return len({header.name.lower() for header in self._fields})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.multi_items()!r})"

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self.multi_items() == other_headers.multi_items()


class CacheControlDirective(NamedTuple):
    name: str
    value: Optional[str] = None


def _skip(value: str, i: int, chars: str) -> int:
    while i < len(value) and value[i] in chars:
        i += 1
    return i


def _element_end(value: str, i: int) -> int:
    """Index of the next comma outside quoted-strings, or the end of the value."""
    length = len(value)
    while i < length:
        if value[i] == ",":
            return i
        if value[i] == '"':
            eaten, _ = http_unquote(value[i:])
            if eaten == -1:
                return length
            i += eaten
            continue
        i += 1
    return length


def _parse_field_value(value: str) -> List[CacheControlDirective]:
    directives: List[CacheControlDirective] = []
    length = len(value)
    i = 0

    while i < length:
        # Leading whitespace and empty elements
        i = _skip(value, i, OWS + ",")
        if i >= length:
            break

        j = i
        while j < length and is_token(value[j]):
            j += 1

        if j == i:
            end = _element_end(value, i)
            logger.debug(f"Skipping malformed Cache-Control element {value[i:end]!r}")
            i = end
            continue

        name = value[i:j].lower()
        directive_value: Optional[str] = None
        k = _skip(value, j, OWS)

        if k < length and value[k] == "=":
            k = _skip(value, k + 1, OWS)

            if k < length and value[k] == '"':
                eaten, unquoted = http_unquote(value[k:])
                if eaten == -1:
                    logger.debug(f"Skipping Cache-Control element with unterminated quote {value[i:]!r}")
                    break
                directive_value = unquoted
                k += eaten
            else:
                z = k
                while z < length and is_token(value[z]):
                    z += 1
                if z == k:
                    end = _element_end(value, k)
                    logger.debug(f"Skipping Cache-Control element without value {value[i:end]!r}")
                    i = end
                    continue
                directive_value = value[k:z]
                k = z

            k = _skip(value, k, OWS)

        if k < length and value[k] != ",":
            end = _element_end(value, k)
            logger.debug(f"Skipping malformed Cache-Control element {value[i:end]!r}")
            i = end
            continue

        directives.append(CacheControlDirective(name, directive_value))
        i = k

    return directives


def parse_directives(values: Union[str, Iterable[str], None]) -> List[CacheControlDirective]:
    """
    Split Cache-Control field values into directives.

    Accepts a single field value or every value of a header that was sent on
    several lines. Directive names are lower-cased, quoted values are unquoted.
    Elements that cannot be parsed are skipped, so a damaged header never
    hides the directives around it.

    Examples:
        >>> parse_directives("max-age=5, must-revalidate")
        [CacheControlDirective(name='max-age', value='5'), CacheControlDirective(name='must-revalidate', value=None)]
        >>> parse_directives(["no-cache", 'private="Set-Cookie, Authorization"'])
        [CacheControlDirective(name='no-cache', value=None), CacheControlDirective(name='private', value='Set-Cookie, Authorization')]
        >>> parse_directives("max-age=5,,")
        [CacheControlDirective(name='max-age', value='5')]
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]

    directives: List[CacheControlDirective] = []
    for value in values:
        directives.extend(_parse_field_value(value))
    return directives


INT32_MAX = 2147483647

SECONDS_DIRECTIVES = frozenset(
    {
        "max-age",
        "max-stale",
        "min-fresh",
        "s-maxage",
        "stale-if-error",
        "stale-while-revalidate",
    }
)

FLAG_DIRECTIVES = frozenset(
    {
        "immutable",
        "must-revalidate",
        "must-understand",
        "no-store",
        "no-transform",
        "only-if-cached",
        "proxy-revalidate",
        "public",
    }
)

FIELD_NAME_DIRECTIVES = frozenset({"no-cache", "private"})


def parse_seconds(value: str) -> Optional[int]:
    """Parse a delta-seconds value, return None if invalid."""
    try:
        seconds = int(value)
    except ValueError:
        return None
    return min(seconds, INT32_MAX) if seconds >= 0 else None


def parse_field_names(value: str) -> List[str]:
    """Parse comma-separated field names into canonical Title-Case."""
    return [
        "-".join(word.capitalize() for word in field.strip().split("-"))
        for field in value.split(",")
        if field.strip()
    ]


class CacheControl:
    """
    Typed view over the directives of one or more Cache-Control headers.

    Supported Directives:
    - immutable [RFC8246]
    - max-age [RFC9111, Section 5.2.1.1, 5.2.2.1]
    - max-stale [RFC9111, Section 5.2.1.2]
    - min-fresh [RFC9111, Section 5.2.1.3]
    - must-revalidate [RFC9111, Section 5.2.2.2]
    - must-understand [RFC9111, Section 5.2.2.3]
    - no-cache [RFC9111, Section 5.2.1.4, 5.2.2.4]
    - no-store [RFC9111, Section 5.2.1.5, 5.2.2.5]
    - no-transform [RFC9111, Section 5.2.1.6, 5.2.2.6]
    - only-if-cached [RFC9111, Section 5.2.1.7]
    - private [RFC9111, Section 5.2.2.7]
    - proxy-revalidate [RFC9111, Section 5.2.2.8]
    - public [RFC9111, Section 5.2.2.9]
    - s-maxage [RFC9111, Section 5.2.2.10]
    - stale-if-error [RFC5861, Section 4]
    - stale-while-revalidate [RFC5861, Section 3]

    no_cache and private are False when absent, True when present without
    field names and a list of field names otherwise.
    """

    def __init__(self, directives: Optional[List[CacheControlDirective]] = None) -> None:
        self.directives: List[CacheControlDirective] = list(directives or [])

        self.max_age: Optional[int] = None
        self.max_stale: Optional[int] = None
        self.min_fresh: Optional[int] = None
        self.s_maxage: Optional[int] = None
        self.stale_if_error: Optional[int] = None
        self.stale_while_revalidate: Optional[int] = None

        self.immutable: bool = False
        self.must_revalidate: bool = False
        self.must_understand: bool = False
        self.no_store: bool = False
        self.no_transform: bool = False
        self.only_if_cached: bool = False
        self.proxy_revalidate: bool = False
        self.public: bool = False

        self.no_cache: Union[bool, List[str]] = False
        self.private: Union[bool, List[str]] = False

        # Unrecognized directives, kept as they were received
        self.extensions: List[str] = []

        for directive in self.directives:
            self._apply(directive)

    def _apply(self, directive: CacheControlDirective) -> None:
        name, value = directive
        attribute = name.replace("-", "_")

        if name in SECONDS_DIRECTIVES:
            if value is not None:
                setattr(self, attribute, parse_seconds(value))
            elif name == "max-stale":
                # max-stale without a value accepts any staleness
                self.max_stale = INT32_MAX
        elif name in FLAG_DIRECTIVES:
            setattr(self, attribute, True)
        elif name in FIELD_NAME_DIRECTIVES:
            setattr(self, attribute, True if value is None else parse_field_names(value))
        else:
            self.extensions.append(name if value is None else f"{name}={value}")

    def has(self, name: str) -> bool:
        name = name.lower()
        return any(directive.name == name for directive in self.directives)

    def __repr__(self) -> str:
        fields = ", ".join(name if value is None else f"{name}={value}" for name, value in self.directives)
        return f"<{type(self).__name__} {fields}>"


def parse_cache_control(values: Union[str, Iterable[str], None]) -> CacheControl:
    """
    Parse Cache-Control field values into a :class:`CacheControl`.

    Examples:
        >>> cc = parse_cache_control("public, max-age=3600, must-revalidate")
        >>> cc.max_age, cc.must_revalidate
        (3600, True)
        >>> parse_cache_control(['no-cache="Set-Cookie"', "max-age=0"]).no_cache
        ['Set-Cookie']
    """
    return CacheControl(parse_directives(values))
