import time
from contextlib import asynccontextmanager
from datetime import datetime

from loguru import logger
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import build_upstream_config, get_settings
from .datasources.github_adapter import GitHubAdapter
from .errors import UpstreamError
from .responses import error_response, json_response, raw_json_response
from .schemas import LastCommit
from .services.aggregator import aggregate_languages
from .services.cache import ResponseCache
from .services.formatting import render_markdown, time_ago

WELCOME_HTML = """<!DOCTYPE html>
<html><head>
<meta charset="utf-8"><title>Showcase API</title>
</head><body>
<h1>Showcase API</h1>
<p>Repository data for the portfolio frontend.</p>
<ul>
<li><code>GET /repos</code> repositories, newest first</li>
<li><code>GET /readme/:repo</code> README rendered as HTML</li>
<li><code>GET /last-commit/:repo</code> link, date and message of the latest commit</li>
<li><code>GET /languages/:repo</code> bytes per language for one repository</li>
<li><code>GET /languages</code> bytes per language across every repository</li>
</ul>
</body></html>"""

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await github.aclose()


app = FastAPI(title="Showcase API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Skipped-Repos"],
)

github = GitHubAdapter(build_upstream_config(settings), ResponseCache())


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"[http] {request.method} {request.url.path} {status_code} {elapsed_ms:.1f}ms")


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    return error_response(exc)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"[http] unhandled error on {request.url.path}")
    return PlainTextResponse("Internal Server Error", status_code=500)


@app.get("/", response_class=HTMLResponse)
async def welcome():
    return WELCOME_HTML


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}


@app.get("/repos")
async def repos():
    return json_response(await github.list_repositories())


@app.get("/readme/{repo}", response_class=HTMLResponse)
async def readme(repo: str):
    return render_markdown(await github.get_readme(repo))


@app.get("/last-commit/{repo}")
async def last_commit(repo: str):
    commit = await github.get_last_commit(repo)
    result = LastCommit(
        link=commit["html_url"],
        date=time_ago(commit["commit"]["author"]["date"]),
        message=commit["commit"]["message"],
    )
    return json_response(result.model_dump())


@app.get("/languages/{repo}")
async def repo_languages(repo: str):
    return raw_json_response(await github.get_languages_text(repo))


@app.get("/languages")
async def languages():
    aggregate = await aggregate_languages(
        github,
        concurrency=settings.languages_concurrency,
        skip_missing=settings.skip_missing_languages,
    )
    headers = {}
    if aggregate.skipped_repos:
        headers["X-Skipped-Repos"] = ",".join(aggregate.skipped_repos)
    return json_response([record.model_dump() for record in aggregate.records], headers=headers)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
