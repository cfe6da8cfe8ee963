"""Catalog compositor — builds the route table and the listing pages."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from markupsafe import Markup

from .browser import Location, MountPoint
from .config import settings
from .pages.synthesizer import PageSynthesizer
from .rendering import render_template
from .router import NOT_FOUND_PATH, RouteEntry, RouteMetadata, RouteTable
from .tools.registry import ToolDescriptor, ToolRegistry, category_display_name

logger = logging.getLogger(__name__)

RELATED_TOOLS = 3
SEARCH_PATH = "/search"
# Routes with no standalone content of their own
UNLISTED_PATHS = (NOT_FOUND_PATH, SEARCH_PATH)


@dataclass
class Category:
    name: str
    tools: List[ToolDescriptor] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return category_display_name(self.name)

    @property
    def path(self) -> str:
        return f"/category/{self.name}"

    @property
    def count(self) -> int:
        return len(self.tools)


@dataclass
class SitemapEntry:
    url: str
    title: str
    description: str = ""
    category: str = ""


class CatalogCompositor:
    """Composition root: turns a ready registry into a write-once route table."""

    def __init__(self, registry: ToolRegistry, synthesizer: PageSynthesizer = None):
        self.registry = registry
        self.synthesizer = synthesizer or PageSynthesizer()
        self.routes = RouteTable()

    def categories(self) -> List[Category]:
        grouped: Dict[str, Category] = {}
        for tool in self.registry.all():
            grouped.setdefault(tool.category, Category(tool.category)).tools.append(tool)
        return list(grouped.values())

    def _title(self, name: str) -> str:
        return f"{name}{settings.title_suffix}"

    def build(self) -> RouteTable:
        if not self.registry.ready:
            logger.warning("Building routes before the registry signalled ready")

        total = self.registry.count()
        self.routes.add(RouteEntry("/", self.render_home, RouteMetadata(
            title=f"{settings.site_name} - {total}+ Free Tools",
            description=f"{total}+ free utility tools: calculators, converters and generators. No sign-ups required.",
            keywords="calculator, converter, utility tools, free tools, no signup",
        )))

        for category in self.categories():
            self.routes.add(RouteEntry(category.path, self._category_renderer(category.name), RouteMetadata(
                title=self._title(category.display_name),
                description=f"{category.count} {category.display_name.lower()} to boost your productivity. Free utility tools.",
                keywords=f"{category.display_name.lower()}, {category.name}, utility tools, free tools",
                category=category.name,
            )))

        for tool in self.registry.all():
            self.routes.add(RouteEntry(tool.path, self._tool_renderer(tool), RouteMetadata(
                title=self._title(tool.name),
                description=tool.description,
                keywords=f"{tool.name}, {tool.category}, calculator, converter, tool, utility",
                category=tool.category,
                icon=tool.icon,
            ), tool_id=tool.id))

        self.routes.add(RouteEntry(NOT_FOUND_PATH, self.render_not_found, RouteMetadata(
            title=self._title("Page Not Found"),
            description="The page you are looking for could not be found.",
        )))
        self.routes.add(RouteEntry("/sitemap", self.render_sitemap, RouteMetadata(
            title=self._title("Sitemap"),
            description=f"Complete list of all {total} utility tools available in the toolkit.",
        )))
        self.routes.add(RouteEntry(SEARCH_PATH, self.render_search, RouteMetadata(
            title=self._title("Search Results"),
            description="Search results for utility tools.",
        )))

        logger.info(f"Route table built: {len(self.routes)} routes")
        return self.routes

    # ── Render actions ────────────────────────────────────────

    def _tool_renderer(self, tool: ToolDescriptor):
        def render(mount: MountPoint, location: Location) -> Markup:
            values = mount.form_values if mount.result is not None else None
            related = [t for t in self.registry.by_category(tool.category) if t.id != tool.id][:RELATED_TOOLS]
            return self.synthesizer.render(tool, result=mount.result, values=values, related=related)
        return render

    def _category_renderer(self, name: str):
        def render(mount: MountPoint, location: Location) -> Markup:
            category = Category(name, self.registry.by_category(name))
            return render_template("category.html", category=category)
        return render

    def render_home(self, mount: MountPoint, location: Location) -> Markup:
        categories = self.categories()
        return render_template(
            "home.html",
            categories=categories,
            total=sum(c.count for c in categories),
            cards_per_category=settings.home_cards_per_category,
        )

    def render_search(self, mount: MountPoint, location: Location) -> Markup:
        query = location.params.get("q", "").strip()
        results = self.registry.search(query)
        return render_template("search.html", query=query, results=results)

    def render_sitemap(self, mount: MountPoint, location: Location) -> Markup:
        categories = self.categories()
        return render_template("sitemap.html", categories=categories, total=sum(c.count for c in categories))

    def render_not_found(self, mount: MountPoint, location: Location) -> Markup:
        return render_template("not_found.html", path=location.path)

    # ── Sitemap ───────────────────────────────────────────────

    def sitemap_entries(self, origin: str) -> List[SitemapEntry]:
        origin = origin.rstrip("/")
        return [
            SitemapEntry(
                url=origin + entry.path,
                title=entry.metadata.title,
                description=entry.metadata.description,
                category=entry.metadata.category or "",
            )
            for entry in self.routes
            if entry.path not in UNLISTED_PATHS
        ]
