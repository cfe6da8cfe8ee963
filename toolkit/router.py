"""Navigation state machine — resolves paths to routes and drives the document.

    IDLE ──navigate──> RESOLVING ──render──> RENDERED ──navigate──> RESOLVING ...

A ``Router`` is bound to one ``Window``. The route table it reads is built once
by the catalog compositor and shared, read-only, between routers.
"""
import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from markupsafe import Markup

from .browser import Breadcrumb, Location, MountPoint, Window
from .config import settings
from .results.renderer import RenderedResult, render_error, render_result
from .tools.executor import execute_tool
from .tools.registry import ToolRegistry, category_display_name

logger = logging.getLogger(__name__)

TOOL_PATH = re.compile(r"^/tools/([^/]+)/([^/]+)$")
NOT_FOUND_PATH = "/404"
HOME_PATH = "/"


class RouterState(enum.Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    RENDERED = "rendered"


class NavigationTrigger(enum.Enum):
    INITIAL = "initial"
    LINK = "link"
    POPSTATE = "popstate"
    PROGRAMMATIC = "programmatic"
    SUBMIT = "submit"


@dataclass
class RouteMetadata:
    title: str
    description: str = ""
    keywords: str = ""
    category: Optional[str] = None
    icon: Optional[str] = None


RenderAction = Callable[[MountPoint, Location], Markup]


@dataclass
class RouteEntry:
    path: str
    render: RenderAction
    metadata: RouteMetadata
    tool_id: Optional[str] = None


class RouteTable:
    """Path -> RouteEntry. Paths are unique; a duplicate is a build error."""

    def __init__(self):
        self._routes: Dict[str, RouteEntry] = {}

    def add(self, entry: RouteEntry) -> RouteEntry:
        if entry.path in self._routes:
            raise ValueError(f"Duplicate route: {entry.path}")
        self._routes[entry.path] = entry
        return entry

    def get(self, path: str) -> Optional[RouteEntry]:
        return self._routes.get(path)

    def paths(self) -> List[str]:
        return list(self._routes)

    def __contains__(self, path: str) -> bool:
        return path in self._routes

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)


class Router:
    def __init__(self, window: Window, routes: RouteTable, registry: ToolRegistry):
        self.window = window
        self.routes = routes
        self.registry = registry
        self.state = RouterState.IDLE
        self.current: Optional[RouteEntry] = None
        self.last_trigger: Optional[NavigationTrigger] = None
        self.not_found = False

    @property
    def origin(self) -> str:
        return settings.base_url or self.window.origin

    async def start(self, path: Optional[str] = None) -> Optional[RouteEntry]:
        """Wait for the registry, then perform the initial navigation."""
        await self.registry.wait_ready(settings.ready_timeout_s)
        target = path if path is not None else self.window.location.href
        return self.navigate(target, push_state=False, trigger=NavigationTrigger.INITIAL)

    # ── Resolution ────────────────────────────────────────────

    def resolve(self, path: str) -> Tuple[Optional[RouteEntry], bool]:
        """Route for ``path`` and whether resolution redirected to /404.

        An unrouted path falls back to /404, then to /. A path naming a known
        tool under the wrong category is redirected instead.
        """
        match = TOOL_PATH.match(path)
        if match and path not in self.routes and match.group(2) in self.registry:
            logger.warning(f"Tool {match.group(2)} exists but {path} is not routed, redirecting to {NOT_FOUND_PATH}")
            return self.routes.get(NOT_FOUND_PATH), True

        entry = self.routes.get(path)
        if entry is None:
            logger.info(f"No route for {path}")
            entry = self.routes.get(NOT_FOUND_PATH) or self.routes.get(HOME_PATH)
        return entry, False

    def navigate(
        self,
        target: str,
        push_state: bool = True,
        trigger: NavigationTrigger = NavigationTrigger.PROGRAMMATIC,
    ) -> Optional[RouteEntry]:
        location = Location.parse(target)
        entry, redirected = self.resolve(location.path)
        if entry is None:
            logger.error(f"No route for {location.path} and no fallback route, staying put")
            return None

        previous = self.state
        self.state = RouterState.RESOLVING
        self.last_trigger = trigger

        if redirected:
            location = Location(path=entry.path)
        self.window.location = location

        history = self.window.history
        if trigger is NavigationTrigger.POPSTATE:
            pass
        elif redirected or not push_state:
            history.replace(location.href)
        elif history.current != location.href:
            history.push(location.href)

        self.current = entry
        self.not_found = entry.path != location.path or entry.path == NOT_FOUND_PATH

        self.update_metadata(entry)
        self.update_breadcrumbs(entry)
        self.render(entry, location)
        self.update_navigation(entry)
        self.window.scroll_to(0, 0)

        self.state = RouterState.RENDERED
        logger.debug(f"{trigger.value}: {target} -> {entry.path} (was {previous.value})")
        return entry

    # ── Document updates ──────────────────────────────────────

    def update_metadata(self, entry: RouteEntry) -> None:
        meta = entry.metadata
        doc = self.window.document
        doc.title = meta.title
        doc.set_meta("description", meta.description)
        doc.set_meta("keywords", meta.keywords)
        doc.set_meta("og:title", meta.title, attribute="property")
        doc.set_meta("og:description", meta.description, attribute="property")
        doc.set_meta("og:url", self.origin + self.window.location.href, attribute="property")
        doc.set_meta("twitter:title", meta.title)
        doc.set_meta("twitter:description", meta.description)
        doc.set_link("canonical", self.origin + entry.path)

    def breadcrumbs(self, entry: RouteEntry) -> List[Breadcrumb]:
        crumbs = [Breadcrumb(name="Home", url=HOME_PATH)]
        match = TOOL_PATH.match(entry.path)
        if match:
            category = match.group(1)
            crumbs.append(Breadcrumb(name=category_display_name(category), url=f"/category/{category}"))
            crumbs.append(Breadcrumb(name=entry.metadata.title.replace(settings.title_suffix, ""), url=entry.path))
        return crumbs

    def update_breadcrumbs(self, entry: RouteEntry) -> None:
        crumbs = self.breadcrumbs(entry)
        doc = self.window.document
        doc.breadcrumbs = crumbs
        doc.set_structured_data({
            "@context": "https://schema.org",
            "@type": "BreadcrumbList",
            "itemListElement": [
                {
                    "@type": "ListItem",
                    "position": i + 1,
                    "name": crumb.name,
                    "item": self.origin + crumb.url,
                }
                for i, crumb in enumerate(crumbs)
            ],
        })

    def update_navigation(self, entry: RouteEntry) -> None:
        nav = self.window.document.nav
        nav.active_path = self.window.location.path
        match = TOOL_PATH.match(entry.path)
        if match:
            nav.active_category = match.group(1)
        elif entry.path.startswith("/category/"):
            nav.active_category = entry.path[len("/category/"):]
        else:
            nav.active_category = None

    def render(self, entry: RouteEntry, location: Location, keep_result: bool = False) -> None:
        mount = self.window.document.mount
        if not keep_result:
            mount.clear()
        try:
            html = entry.render(mount, location)
        except Exception as e:
            logger.error(f"Render of {entry.path} failed: {e}", exc_info=True)
            html = render_error(f"This page could not be displayed: {e}", entry.tool_id or "", self.window).html
        mount.replace(html)

    # ── Events ────────────────────────────────────────────────

    def handle_link(self, href: str) -> bool:
        """Intercept a same-origin link click. False lets the browser handle it."""
        if not self.window.is_same_origin(href):
            return False
        self.navigate(href, trigger=NavigationTrigger.LINK)
        return True

    def back(self) -> Optional[RouteEntry]:
        url = self.window.history.back()
        if url is None:
            return None
        return self.navigate(url, push_state=False, trigger=NavigationTrigger.POPSTATE)

    def forward(self) -> Optional[RouteEntry]:
        url = self.window.history.forward()
        if url is None:
            return None
        return self.navigate(url, push_state=False, trigger=NavigationTrigger.POPSTATE)

    def submit(self, tool_id: str, data: Mapping[str, Any]) -> RenderedResult:
        """Run a tool on submitted form data and paint the result into the current page."""
        self.state = RouterState.RESOLVING
        self.last_trigger = NavigationTrigger.SUBMIT

        value = execute_tool(self.registry.get(tool_id), data)
        rendered = render_result(value, tool_id, self.window)

        mount = self.window.document.mount
        mount.result = rendered
        mount.form_values = dict(data)
        if self.current is not None:
            self.render(self.current, self.window.location, keep_result=True)
        else:
            mount.replace(rendered.html)

        self.state = RouterState.RENDERED
        return rendered
