"""DID syntax parsing.

Parsing is pure: it never performs I/O and only splits the DID (or DID URL)
into its method, method-specific identifier and optional path, query and
fragment components.
"""

import re
from typing import Optional

from pydantic import BaseModel

from social.graze.didroute.exceptions import InvalidDid


DID_PATTERN = re.compile(
    r"^did:(?P<method>[a-z0-9]+):(?P<id>(?:[a-zA-Z0-9._%-]*:)*[a-zA-Z0-9._%-]+)"
    r"(?P<path>/[^?#]*)?(?:\?(?P<query>[^#]*))?(?:#(?P<fragment>.*))?$"
)


class ParsedDid(BaseModel):
    """Components of a parsed DID.

    ``did`` is always the bare DID, without path, query or fragment.
    """

    did: str
    method: str
    id: str
    path: Optional[str] = None
    query: Optional[str] = None
    fragment: Optional[str] = None


def parse_did(did: str) -> ParsedDid:
    """Parse a DID or DID URL.

    Args:
        did: DID string such as ``did:sov:WRfXPg8dantKVubE3HX8pw``

    Returns:
        ParsedDid with the method and method-specific identifier

    Raises:
        InvalidDid: if the value does not follow ``did:<method>:<id>``
    """
    if did is None:
        raise InvalidDid(str(did), "empty value")

    match = DID_PATTERN.match(did.strip())
    if match is None:
        raise InvalidDid(did)

    method = match.group("method")
    method_specific_id = match.group("id")
    return ParsedDid(
        did=f"did:{method}:{method_specific_id}",
        method=method,
        id=method_specific_id,
        path=match.group("path"),
        query=match.group("query"),
        fragment=match.group("fragment"),
    )


def did_method(did: str) -> str:
    """Return the method name of a DID."""
    return parse_did(did).method
