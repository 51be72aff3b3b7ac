"""Classification of request URIs into static files and CGI programs."""

import enum
from dataclasses import dataclass

from config import CGI_MARKER, DEFAULT_INDEX, DOC_ROOT


class ContentKind(enum.Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True, slots=True)
class ParsedTarget:
    filename: str
    cgi_args: str
    kind: ContentKind

    @property
    def is_static(self) -> bool:
        return self.kind is ContentKind.STATIC


def classify_uri(
    uri: str,
    doc_root: str = DOC_ROOT,
    cgi_marker: str = CGI_MARKER,
    default_index: str = DEFAULT_INDEX,
) -> ParsedTarget:
    """Map a request URI onto a filesystem path under ``doc_root``.

    URIs containing ``cgi_marker`` name a program; everything after the
    first ``?`` becomes its argument string. Any other URI names a file,
    with ``default_index`` appended when the URI ends in ``/``.
    """
    # Nothing after the root: leave a filename that cannot be stat'ed.
    if not uri:
        return ParsedTarget(filename="", cgi_args="", kind=ContentKind.STATIC)

    if cgi_marker in uri:
        path, _sep, cgi_args = uri.partition("?")
        return ParsedTarget(
            filename=doc_root + path,
            cgi_args=cgi_args,
            kind=ContentKind.DYNAMIC,
        )

    filename = doc_root + uri
    if uri.endswith("/"):
        filename += default_index
    return ParsedTarget(filename=filename, cgi_args="", kind=ContentKind.STATIC)
