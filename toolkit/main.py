"""HTTP surface: every GET is one navigation, every form POST one submission."""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.staticfiles import StaticFiles

from .browser import Capabilities, Window
from .compositor import CatalogCompositor
from .config import settings
from .protocol import Health, RunResponse, ToolList, ToolSummary
from .rendering import STATIC_DIR, render_template
from .router import Router
from .tools import build_registry, builtin_tool_sets

logger = logging.getLogger(__name__)

LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")

api = APIRouter()


def window_for(request: Request, path: str) -> Window:
    """A fresh client model for one request."""
    url = request.url
    origin = settings.base_url or f"{url.scheme}://{url.netloc}"
    secure = url.scheme == "https" or url.hostname in LOCAL_HOSTS
    mobile = "Mobi" in request.headers.get("user-agent", "")
    caps = Capabilities(clipboard=secure, share=settings.share_enabled and mobile)
    return Window(origin=origin, path=path, capabilities=caps)


async def start_router(request: Request, target: str) -> Router:
    state = request.app.state
    router = Router(window_for(request, target), state.routes, state.registry)
    await router.start(target)
    return router


def page_response(request: Request, router: Router) -> HTMLResponse:
    html = render_template(
        "document.html",
        document=router.window.document,
        categories=request.app.state.compositor.categories(),
    )
    return HTMLResponse(str(html), status_code=404 if router.not_found else 200)


async def form_data(request: Request) -> Dict[str, Any]:
    form = await request.form()
    data: Dict[str, Any] = {}
    for key in form.keys():
        values = form.getlist(key)
        data[key] = values if len(values) > 1 else values[0]
    return data


# ── JSON API ──────────────────────────────────────────────

@api.get("/health", response_model=Health)
async def health(request: Request):
    return Health(ok=True, tools=len(request.app.state.registry))


@api.get("/api/tools", response_model=ToolList)
async def list_tools(request: Request):
    tools = [
        ToolSummary(id=t.id, name=t.name, description=t.description, category=t.category, icon=t.icon, path=t.path)
        for t in request.app.state.registry.all()
    ]
    return ToolList(tools=tools, count=len(tools))


@api.post("/api/tools/{tool_id}/run", response_model=RunResponse)
async def run_tool(tool_id: str, payload: dict, request: Request):
    tool = request.app.state.registry.get(tool_id)
    if tool is None:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {tool_id}")
    router = await start_router(request, tool.path)
    rendered = router.submit(tool_id, payload)
    return RunResponse(tool_id=tool_id, plan=rendered.plan, html=str(rendered.html))


@api.get("/sitemap.xml")
async def sitemap_xml(request: Request):
    origin = settings.base_url or str(request.base_url).rstrip("/")
    entries = request.app.state.compositor.sitemap_entries(origin)
    xml = render_template("sitemap.xml", entries=entries)
    return Response(content=str(xml), media_type="application/xml")


# ── Pages ─────────────────────────────────────────────────

@api.post("/tools/{category}/{tool_id}", response_class=HTMLResponse)
async def submit_tool(category: str, tool_id: str, request: Request):
    router = await start_router(request, request.url.path)
    current = router.current
    if current is None or current.tool_id != tool_id:
        return page_response(request, router)
    router.submit(tool_id, await form_data(request))
    return page_response(request, router)


@api.get("/{path:path}", response_class=HTMLResponse)
async def page(path: str, request: Request):
    target = request.url.path
    if request.url.query:
        target += "?" + request.url.query
    router = await start_router(request, target)
    return page_response(request, router)


def create_app(*tool_sets) -> FastAPI:
    """Build the app. With no tool sets the builtin ones are served."""
    tool_sets = tool_sets or tuple(builtin_tool_sets())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        registry = build_registry(*tool_sets)
        compositor = CatalogCompositor(registry)
        app.state.registry = registry
        app.state.compositor = compositor
        app.state.routes = compositor.build()
        logger.info(f"{settings.site_name} serving {len(registry)} tools")
        yield

    app = FastAPI(title=settings.site_name, lifespan=lifespan)
    # Mounted ahead of the catch-all page route
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(api)
    return app


app = create_app()
