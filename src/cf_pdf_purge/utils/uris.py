"""Uri helpers"""
from urllib import parse

__all__ = ["join", "with_query"]


def join(*parts: str, quote: bool = False) -> str:
    """Join uri parts."""
    if not parts:
        return ""

    base = parts[0] if parts[0].endswith("/") else parts[0] + "/"
    return parse.urljoin(
        base,
        "/".join(
            (parse.quote_plus(part.strip("/"), safe="/") if quote else part.strip("/"))
            for part in parts[1:]
        ),
    )


def with_query(uri: str, **params: object) -> str:
    """Append query parameters, keeping any already present."""
    if not params:
        return uri
    query = parse.urlencode({k: str(v) for k, v in params.items()})
    separator = "&" if parse.urlsplit(uri).query else "?"
    return f"{uri}{separator}{query}"
