import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List
from urllib.parse import SplitResult, urljoin, urlsplit

from app.platform.exceptions import ParseError

logger = logging.getLogger(__name__)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class InvalidReference(ValueError):
    """An href that cannot be parsed as a URL reference."""


@dataclass(frozen=True)
class ResolvedLink:
    href: str
    url: str
    is_internal: bool


@dataclass
class LinkClassification:
    internal_count: int = 0
    external_count: int = 0
    links: List[ResolvedLink] = field(default_factory=list)


def parse_reference(raw: str) -> SplitResult:
    """
    Parse ``raw`` as a URL reference, rejecting what a strict URL parser would:
    control characters, malformed percent-escapes in the authority, path or
    fragment, broken IPv6 brackets and non-numeric or out-of-range ports.

    The query is kept verbatim, so ``?discount=50%`` is accepted.
    """
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in raw):
        raise InvalidReference(f"invalid control character in URL: {raw!r}")
    try:
        parts = urlsplit(raw)
        parts.port  # raises on a bad port
    except ValueError as exc:
        raise InvalidReference(f"{exc}: {raw!r}") from exc
    for component in (parts.netloc, parts.path, parts.fragment):
        if _BAD_ESCAPE.search(component):
            raise InvalidReference(f"invalid URL escape in {raw!r}")
    return parts


def host_of(parts: SplitResult) -> str:
    """host[:port] exactly as written, without any userinfo."""
    return parts.netloc.rpartition("@")[2]


def parse_base_url(url: str) -> SplitResult:
    try:
        return parse_reference(url)
    except InvalidReference as exc:
        raise ParseError(f"Failed to parse base URL {url}: {exc}") from exc


def resolve(href: str, base_url: str) -> str:
    """
    Resolve ``href`` against ``base_url`` (RFC 3986 strict reference resolution).

    An href with its own scheme is already absolute, even without a host:
    ``https:foo`` stays ``https:foo`` instead of being joined onto the base path.
    """
    parts = parse_reference(href)
    if parts.scheme and not parts.netloc:
        return href
    return urljoin(base_url, href)


def classify_links(hrefs: Iterable[str], base_url: str) -> LinkClassification:
    """
    Resolve every href against ``base_url`` and tag it internal or external.

    A link is internal when its host (and port) is exactly the base URL's.
    Hrefs that do not parse are dropped without being counted.
    """
    base_host = host_of(parse_base_url(base_url))
    classification = LinkClassification()

    for href in hrefs:
        try:
            url = resolve(href, base_url)
        except InvalidReference as exc:
            logger.debug(f"Skipping unparseable href: {exc}")
            continue

        is_internal = host_of(urlsplit(url)) == base_host
        if is_internal:
            classification.internal_count += 1
        else:
            classification.external_count += 1
        classification.links.append(ResolvedLink(href=href, url=url, is_internal=is_internal))

    return classification
