# helpers/url_inputs.py
# ---------------------------------------------------------------
# Caller URL descriptors -> canonical sitemap entries.
#
# A descriptor is one of:
#   "/about"                                   -> PlainUrl
#   {"url": "/a", "lastMod": ..., "changeFreq": ...} -> DetailedUrl
#   [{"language": "en", "url": "/a"}, ...]     -> AlternateGroup
# ---------------------------------------------------------------

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, List, Optional, Tuple, Union
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

from helpers.exceptions import SitemapValidationError

_LAST_MOD_KEYS = ("lastMod", "last_mod", "lastModified")
_CHANGE_FREQ_KEYS = ("changeFreq", "change_freq", "changeFrequency")


@dataclass(frozen=True)
class PlainUrl:
    location: str


@dataclass(frozen=True)
class DetailedUrl:
    url: str
    last_mod: Any = None      # date/datetime or ISO date string
    change_freq: Any = None   # always, hourly, daily, weekly, monthly, yearly, never


@dataclass(frozen=True)
class Alternate:
    language: str
    target: Union[PlainUrl, DetailedUrl]


@dataclass(frozen=True)
class AlternateGroup:
    alternates: Tuple[Alternate, ...]


UrlInput = Union[PlainUrl, DetailedUrl, AlternateGroup]


@dataclass(frozen=True)
class AlternateLink:
    hreflang: str
    href: str


@dataclass(frozen=True)
class CanonicalEntry:
    loc: str
    lastmod: str
    changefreq: Optional[str] = None
    alternates: Tuple[AlternateLink, ...] = ()


def today_str() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def date_to_str(value: Any) -> Optional[str]:
    """Format a lastmod value as YYYY-MM-DD; strings pass through verbatim."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return None


_DEFAULT_PORTS = {"http": 80, "https": 443}
_PATH_SAFE = "/%:@!$&'()*+,;=~-._"
_QUERY_SAFE = _PATH_SAFE + "?"
_USERINFO_SAFE = "%!$&'()*+,;=~-._"


def _canonical_netloc(scheme: str, parts) -> str:
    try:
        host = parts.hostname or ""
        port = parts.port
        host = host.encode("idna").decode("ascii").lower()
    except (UnicodeError, ValueError) as e:
        raise SitemapValidationError(f"Invalid host in {urlunsplit(parts)!r}: {e}")

    if ":" in host:
        host = f"[{host}]"
    netloc = host
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"
    if parts.username is not None:
        userinfo = quote(parts.username, safe=_USERINFO_SAFE)
        if parts.password is not None:
            userinfo += ":" + quote(parts.password, safe=_USERINFO_SAFE)
        netloc = f"{userinfo}@{netloc}"
    return netloc


def to_absolute(url: str, base: str) -> str:
    """Resolve ``url`` against ``base`` into a percent-encoded absolute URL.

    The host is IDNA-encoded and lowercased, default ports are dropped and
    an empty path becomes "/".
    """
    resolved = urljoin(base, url)
    parts = urlsplit(resolved)
    if not parts.scheme or not parts.netloc:
        raise SitemapValidationError(
            f"Cannot resolve {url!r} against base {base!r} to an absolute URL"
        )
    return urlunsplit((
        parts.scheme,
        _canonical_netloc(parts.scheme, parts),
        quote(parts.path or "/", safe=_PATH_SAFE),
        quote(parts.query, safe=_QUERY_SAFE),
        quote(parts.fragment, safe=_QUERY_SAFE),
    ))


def _describe(raw: Any) -> str:
    try:
        return json.dumps(raw, default=str)
    except (TypeError, ValueError):
        return repr(raw)


def _first_key(record: Mapping, keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def _coerce_target(raw: Any) -> Union[PlainUrl, DetailedUrl]:
    if isinstance(raw, (PlainUrl, DetailedUrl)):
        return raw
    if isinstance(raw, str):
        return PlainUrl(raw)
    if isinstance(raw, (AlternateGroup, list, tuple)):
        raise SitemapValidationError(
            f"Alternate language groups cannot be nested: {_describe(raw)}"
        )
    if isinstance(raw, Mapping):
        url = raw.get("url")
        if not isinstance(url, str):
            raise SitemapValidationError(
                f"Invalid sitemap url object, missing 'url' property: {_describe(raw)}"
            )
        return DetailedUrl(
            url=url,
            last_mod=_first_key(raw, _LAST_MOD_KEYS),
            change_freq=_first_key(raw, _CHANGE_FREQ_KEYS),
        )
    raise SitemapValidationError(
        f"Invalid sitemap url object, missing 'url' property: {_describe(raw)}"
    )


def _coerce_alternate(raw: Any) -> Alternate:
    if isinstance(raw, Alternate):
        return raw
    if not isinstance(raw, Mapping):
        raise SitemapValidationError(
            f"Invalid sitemap url array object, expected a mapping: {_describe(raw)}"
        )
    if not isinstance(raw.get("language"), str):
        raise SitemapValidationError(
            f"Invalid sitemap url array object, missing 'language' property: {_describe(raw)}"
        )
    if raw.get("url") is None:
        raise SitemapValidationError(
            f"Invalid sitemap url array object, missing 'url' property: {_describe(raw)}"
        )
    return Alternate(language=raw["language"], target=_coerce_target(raw["url"]))


def coerce_url_input(raw: Any) -> UrlInput:
    """Classify one caller value into PlainUrl, DetailedUrl or AlternateGroup."""
    if isinstance(raw, (PlainUrl, DetailedUrl, AlternateGroup)):
        return raw
    if isinstance(raw, (list, tuple)):
        return AlternateGroup(tuple(_coerce_alternate(item) for item in raw))
    return _coerce_target(raw)


def _normalize_target(target: Union[PlainUrl, DetailedUrl], base: str) -> CanonicalEntry:
    if isinstance(target, PlainUrl):
        return CanonicalEntry(loc=to_absolute(target.location, base), lastmod=today_str())

    if not isinstance(target.url, str):
        raise SitemapValidationError(
            f"Invalid sitemap url object, missing 'url' property: {target!r}"
        )
    changefreq = target.change_freq if isinstance(target.change_freq, str) else None
    return CanonicalEntry(
        loc=to_absolute(target.url, base),
        lastmod=date_to_str(target.last_mod) or today_str(),
        changefreq=changefreq,
    )


def normalize_url_input(raw: Any, base: str) -> List[CanonicalEntry]:
    """Turn one top-level descriptor into its canonical entries.

    Plain and detailed descriptors yield a single entry. An alternate group
    yields one entry per language, each carrying the full list of alternate
    links (its own included).
    """
    item = coerce_url_input(raw)
    if not isinstance(item, AlternateGroup):
        return [_normalize_target(item, base)]

    members = [(alt.language, _normalize_target(alt.target, base)) for alt in item.alternates]
    links = tuple(AlternateLink(hreflang=language, href=entry.loc) for language, entry in members)
    return [
        CanonicalEntry(
            loc=entry.loc,
            lastmod=entry.lastmod,
            changefreq=entry.changefreq,
            alternates=links,
        )
        for _, entry in members
    ]


def is_alternate_group(raw: Any) -> bool:
    return isinstance(raw, (AlternateGroup, list, tuple))
