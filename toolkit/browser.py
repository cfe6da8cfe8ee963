"""Client environment state: location, history, document head and the mount point.

One ``Window`` exists per navigation context (one per HTTP request when served,
or a long-lived one when the engine is driven in-process).
"""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from markupsafe import Markup

logger = logging.getLogger(__name__)


@dataclass
class Location:
    path: str = "/"
    query: str = ""

    @classmethod
    def parse(cls, target: str) -> "Location":
        parts = urlsplit(target or "/")
        path = parts.path or "/"
        if not path.startswith("/"):
            path = "/" + path
        if len(path) > 1 and path.endswith("/"):
            path = path.rstrip("/") or "/"
        return cls(path=path, query=parts.query)

    @property
    def params(self) -> Dict[str, str]:
        """First value of each query parameter."""
        return {k: v[0] for k, v in parse_qs(self.query).items() if v}

    @property
    def href(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path


@dataclass
class Breadcrumb:
    name: str
    url: str


@dataclass
class SharePayload:
    title: str
    text: str
    url: str


ClipboardWriter = Callable[[str], Awaitable[None]]
ShareHandler = Callable[[SharePayload], Awaitable[None]]


@dataclass
class Capabilities:
    """Which platform capabilities the client has.

    The flags drive what markup offers; the optional handlers perform the
    action when the engine runs in-process.
    """
    clipboard: bool = False
    share: bool = False
    clipboard_writer: Optional[ClipboardWriter] = None
    share_handler: Optional[ShareHandler] = None


class History:
    """Session history entries with a cursor, like the browser's."""

    def __init__(self, initial: str = "/"):
        self.entries: List[str] = [initial]
        self.index = 0

    @property
    def current(self) -> str:
        return self.entries[self.index]

    def push(self, url: str) -> None:
        # Pushing drops any forward entries
        del self.entries[self.index + 1:]
        self.entries.append(url)
        self.index += 1

    def replace(self, url: str) -> None:
        self.entries[self.index] = url

    def back(self) -> Optional[str]:
        if self.index == 0:
            return None
        self.index -= 1
        return self.current

    def forward(self) -> Optional[str]:
        if self.index >= len(self.entries) - 1:
            return None
        self.index += 1
        return self.current

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class NavigationState:
    active_path: str = ""
    active_category: Optional[str] = None

    def is_active(self, href: str) -> bool:
        return href == self.active_path

    def is_active_category(self, category: str) -> bool:
        return category == self.active_category


class MountPoint:
    """The single element page content is rendered into (``#app``)."""

    id = "app"

    def __init__(self):
        self.html: Markup = Markup("")
        self.result = None  # RenderedResult of the last submission
        self.form_values: Dict[str, Any] = {}

    def replace(self, html: Markup) -> None:
        self.html = Markup(html)

    def clear(self) -> None:
        self.html = Markup("")
        self.result = None
        self.form_values = {}

    def __str__(self) -> str:
        return str(self.html)


class Document:
    def __init__(self):
        self.title: str = ""
        self.metas: Dict[Tuple[str, str], str] = {}
        self.links: Dict[str, str] = {}
        self.structured_data: Optional[Dict[str, Any]] = None
        self.breadcrumbs: List[Breadcrumb] = []
        self.nav = NavigationState()
        self.mount = MountPoint()
        self.fallback_copies: List[str] = []

    def set_meta(self, name: str, content: str, attribute: str = "name") -> None:
        self.metas[(attribute, name)] = content

    def meta(self, name: str, attribute: str = "name") -> Optional[str]:
        return self.metas.get((attribute, name))

    def set_link(self, rel: str, href: str) -> None:
        self.links[rel] = href

    def set_structured_data(self, data: Dict[str, Any]) -> None:
        # Only one JSON-LD block at a time; a new one replaces the old
        self.structured_data = data

    def copy_via_fallback(self, text: str) -> None:
        """Copy through a temporary hidden, selected text control."""
        self.fallback_copies.append(text)
        logger.debug(f"Copied {len(text)} chars via selectable-text fallback")

    @property
    def meta_tags(self) -> List[Tuple[str, str, str]]:
        return [(attr, name, content) for (attr, name), content in self.metas.items()]


class Window:
    def __init__(self, origin: str = "http://localhost", path: str = "/", capabilities: Optional[Capabilities] = None):
        self.origin = origin.rstrip("/")
        self.location = Location.parse(path)
        self.history = History(self.location.href)
        self.document = Document()
        self.capabilities = capabilities or Capabilities()
        self.scroll_y = 0

    @property
    def url(self) -> str:
        return self.origin + self.location.href

    def is_same_origin(self, href: str) -> bool:
        parts = urlsplit(href)
        if not parts.scheme and not parts.netloc:
            return href.startswith("/")
        return f"{parts.scheme}://{parts.netloc}" == self.origin

    def scroll_to(self, x: int, y: int) -> None:
        self.scroll_y = y
