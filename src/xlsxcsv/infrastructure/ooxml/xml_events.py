from __future__ import annotations

import xml.sax
import zipfile
import zlib
from collections.abc import Iterator, Mapping
from typing import IO, Protocol
from xml.sax.handler import ContentHandler
from xml.sax.xmlreader import AttributesImpl

from xlsxcsv.core.errors import InvalidPackageError, MalformedXmlError

CHUNK_SIZE = 64 * 1024


class EventTarget(Protocol):
    """Receiver of element and text events from an XML part.

    The SAX driver in :func:`feed_events` reports a self-closing element as a
    start followed by an end and always passes ``empty=False``. ``empty=True``
    is for event sources that report self-closing elements as a single event;
    targets must treat it as a start with no matching end.
    """

    def start(self, name: str, attrs: Mapping[str, str], empty: bool = False) -> None: ...

    def end(self, name: str) -> None: ...

    def text(self, data: str) -> None: ...


def local_name(tag: str) -> str:
    """Drop a namespace prefix (``x:row``) or Clark namespace (``{ns}row``)."""
    if "}" in tag:
        tag = tag.rsplit("}", 1)[1]
    if ":" in tag:
        tag = tag.rsplit(":", 1)[1]
    return tag


def attribute(attrs: Mapping[str, str], name: str) -> str | None:
    """Look up an attribute by local name, ignoring any namespace prefix."""
    value = attrs.get(name)
    if value is not None:
        return value
    for key in attrs.keys():
        if local_name(key) == name:
            return attrs[key]
    return None


class _ForwardingHandler(ContentHandler):
    def __init__(self, target: EventTarget) -> None:
        super().__init__()
        self._target = target

    def startElement(self, name: str, attrs: AttributesImpl) -> None:
        self._target.start(local_name(name), attrs)

    def endElement(self, name: str) -> None:
        self._target.end(local_name(name))

    def characters(self, content: str) -> None:
        self._target.text(content)


def feed_events(
    stream: IO[bytes],
    target: EventTarget,
    *,
    part_name: str,
    chunk_size: int = CHUNK_SIZE,
) -> Iterator[None]:
    """Stream ``stream`` through an incremental SAX parser into ``target``.

    Yields once per chunk consumed so callers can drain whatever the target
    completed so far. A self-closing element arrives as a start immediately
    followed by its end.
    """
    parser = xml.sax.make_parser()
    parser.setContentHandler(_ForwardingHandler(target))
    try:
        for chunk in iter(lambda: stream.read(chunk_size), b""):
            parser.feed(chunk)
            yield
        parser.close()
    except xml.sax.SAXException as exc:
        raise MalformedXmlError(f"Malformed XML in {part_name}: {exc}") from exc
    except (zipfile.BadZipFile, zlib.error) as exc:
        raise InvalidPackageError(f"Corrupt package data in {part_name}: {exc}") from exc
    yield
