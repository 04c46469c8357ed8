"""In-process stand-in for the console backend, served over ASGI."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse


USER = {"login": "octo", "name": "Octo Cat", "avatar_url": "https://avatars.test/octo.png"}

CONFIG = {
    "site_name": "Docs",
    "initialization_date": "2026-01-01",
    "content_types": [
        {
            "id": "ct-1",
            "name": "Blog Post",
            "slug": "blog-post",
            "fields": [
                {"field_name": "title", "field_type": "text", "is_required": True, "options": []},
                {"field_name": "rating", "field_type": "number", "is_required": False, "options": []},
                {"field_name": "status", "field_type": "select", "is_required": True, "options": ["draft", "live"]},
            ],
        }
    ],
}


def build_backend(token: str = "valid", pages_delay: float = 0.0) -> FastAPI:
    app = FastAPI()
    api = APIRouter(prefix="/api")
    app.state.calls = []
    app.state.entries = []
    app.state.broken_pages = set()

    def _authed(request: Request) -> bool:
        return request.cookies.get("auth_token") == token

    @api.get("/me")
    async def me(request: Request):
        app.state.calls.append("me")
        if not _authed(request):
            return JSONResponse({"error": "Unauthorized"}, status_code=401)
        return USER

    @api.get("/{owner}/{repo}/pages")
    async def pages(owner: str, repo: str):
        key = f"{owner}/{repo}"
        app.state.calls.append(f"pages:{key}")
        if pages_delay:
            await asyncio.sleep(pages_delay)
        if key in app.state.broken_pages:
            return JSONResponse({"error": "An error occured"}, status_code=500)
        return {"initialized": True, "baseUrl": f"https://{owner}.pages.test/{repo}"}

    @api.get("/{owner}/{repo}/config")
    async def config(owner: str, repo: str):
        app.state.calls.append(f"config:{owner}/{repo}")
        return CONFIG

    @api.post("/{owner}/{repo}/{ct_slug}")
    async def create_entry(owner: str, repo: str, ct_slug: str, request: Request):
        body = await request.json()
        app.state.calls.append(f"create:{ct_slug}")
        entry = {"id": f"v{len(app.state.entries) + 1}", "slug": body.get("slug", ""), "values": body["values"]}
        app.state.entries.append(entry)
        return JSONResponse(entry, status_code=201)

    app.include_router(api)
    return app
