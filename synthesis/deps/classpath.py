"""Explicit model of the loader chain whose entries become faked dependencies."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

from common.config import EngineSettings


@dataclass(frozen=True)
class ClassLoaderLink:
    """One loader in the chain.

    ``urls`` is None for loaders that expose no file-backed search entries;
    discovery walks past them to their parent.
    """

    name: str
    urls: Optional[Tuple[str, ...]] = None
    parent: Optional["ClassLoaderLink"] = None


def iter_chain(link: ClassLoaderLink | None) -> Iterator[ClassLoaderLink]:
    """Yield the innermost loader first, then each parent up to the root."""

    while link is not None:
        yield link
        link = link.parent


def to_url(entry: str | Path) -> str:
    """Turn a classpath entry into a ``file:`` URL; directories end with ``/``."""

    text = str(entry)
    if "://" in text or text.startswith("file:"):
        return text
    path = Path(text).expanduser().resolve()
    url = path.as_uri()
    if path.is_dir() and not url.endswith("/"):
        url += "/"
    return url


def url_to_path(url: str) -> Optional[Path]:
    """Local path for a ``file:`` URL, None for every other scheme."""

    parsed = urlparse(url)
    if parsed.scheme != "file":
        return None
    return Path(url2pathname(parsed.path))


def build_chain(entries: Sequence[str | Path], name: str = "app") -> ClassLoaderLink:
    platform = ClassLoaderLink(name="platform")
    return ClassLoaderLink(name=name, urls=tuple(to_url(entry) for entry in entries), parent=platform)


def default_chain(settings: EngineSettings) -> ClassLoaderLink:
    return build_chain(settings.classpath)


__all__ = ["ClassLoaderLink", "iter_chain", "to_url", "url_to_path", "build_chain", "default_chain"]
