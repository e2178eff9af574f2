"""Local web server for the exported wiki.

Serves the exported HTML pages and asset files straight from the wiki root.
"""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from orgwiki.config import Settings
from orgwiki.core.storage import PageStore

logger = logging.getLogger(__name__)

templates_path = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_path))


def create_app(settings: Settings) -> FastAPI:
    """Build the app for the wiki configured in ``settings``."""
    store = PageStore(settings.wiki_root, settings.extension, settings.index_page)
    store.ensure_root()

    app = FastAPI(title=settings.app_title, debug=settings.debug)
    app.state.store = store

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request):
        """Exported index page if there is one, else a page listing."""
        if store.html_path(store.index_page).is_file():
            return RedirectResponse(url=f"/{store.index_page}.html", status_code=302)
        pages = [
            {"name": name, "exported": store.html_path(name).is_file()}
            for name in store.list_pages()
        ]
        return templates.TemplateResponse(
            request,
            "index.html",
            {"app_title": settings.app_title, "pages": pages},
        )

    @app.get("/api/pages")
    async def api_pages():
        """All page names."""
        return {"pages": store.list_pages()}

    @app.get("/api/search")
    async def api_search(q: str = ""):
        """Search pages by name and content."""
        return {"results": [hit.model_dump() for hit in store.search_pages(q)]}

    app.mount("/", StaticFiles(directory=str(store.wiki_root)), name="site")
    logger.info("Serving wiki at %s", store.wiki_root)
    return app
