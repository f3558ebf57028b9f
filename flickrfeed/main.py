# Load .env file BEFORE other imports (so env vars are available)
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request, HTTPException, Query
from fastapi.responses import JSONResponse, HTMLResponse
from fastapi.exceptions import RequestValidationError

from flickrfeed.config import load_settings
from flickrfeed.db import db_conn
from flickrfeed.error_codes import HTTP_ERROR, INTERNAL_ERROR, VALIDATION_ERROR
from flickrfeed.errors import problem
from flickrfeed.feed_cache import FeedCache
from flickrfeed.feed_service import DEFAULT_COUNT, DEFAULT_CSS_CLASS, build_feed_service
from flickrfeed.logging_utils import log_event
from flickrfeed.middleware import request_id_middleware
from flickrfeed.options import FlickrFeedOptions, OptionStore
from flickrfeed.schemas import OptionsSaveRequest


app = FastAPI(title="flickrfeed")

#Register middleware
app.middleware("http")(request_id_middleware)


@app.get("/health")
def health(request: Request):
    request_id = request.state.request_id
    log_event("health_check", request_id=request_id)
    return {"status": "ok"}


@app.get("/flickrfeed", response_class=HTMLResponse)
def flickrfeed_fragment(
    request: Request,
    count: int = Query(DEFAULT_COUNT, ge=0),
    css_class: str = DEFAULT_CSS_CLASS,
) -> HTMLResponse:
    """Thumbnail list fragment for embedding in a page. Empty body when there is nothing to show."""
    with db_conn() as conn:
        service = build_feed_service(conn)
        fragment = service.render(count, css_class)

    log_event("feed_rendered", request_id=request.state.request_id, count=count, empty=not fragment)
    return HTMLResponse(content=fragment, status_code=200)


@app.get("/api/feed")
def api_feed(request: Request):
    with db_conn() as conn:
        service = build_feed_service(conn)
        items = service.get_feed_or_cached()
        views = [service.item_view(item).model_dump() for item in items]

    return {"items": views, "count": len(views), "request_id": request.state.request_id}


def _options_for(conn) -> FlickrFeedOptions:
    return FlickrFeedOptions(OptionStore(conn), FeedCache(conn), load_settings())


@app.get("/admin/options")
def get_admin_options(request: Request):
    with db_conn() as conn:
        plugin_options = _options_for(conn)
        return {
            "supported": plugin_options.get_options_supported(),
            "values": plugin_options.current_values(),
            "request_id": request.state.request_id,
        }


@app.post("/admin/options")
def save_admin_options(request: Request, body: OptionsSaveRequest):
    settings = load_settings()
    if body.cache_clear and not settings.allow_cache_clear:
        raise HTTPException(status_code=400, detail="Cache clearing is disabled")

    with db_conn() as conn:
        plugin_options = _options_for(conn)
        cleared = plugin_options.handle_option_save(body)
        values = plugin_options.current_values()

    return {"ok": True, "cache_cleared": cleared, "values": values, "request_id": request.state.request_id}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    rid = request.state.request_id
    payload = problem(
        status=exc.status_code,
        code=HTTP_ERROR,
        message=str(exc.detail),
        request_id=rid,
    )
    log_event("http_error", request_id=rid, status=exc.status_code, message=str(exc.detail))
    resp = JSONResponse(status_code=exc.status_code, content=payload.model_dump())
    resp.headers["X-Request-ID"] = rid
    return resp


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = request.state.request_id

    # Extract first error for a clean message
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(x) for x in first.get("loc", []))  #e.g., "body.cache_time"
        msg = first.get("msg", "Validation error")
        message = f"{loc}: {msg}"
    else:
        message = "Validation error"

    payload = problem(
        status=422,
        code=VALIDATION_ERROR,
        message=message,
        request_id=rid,
    )

    log_event("validation_error", request_id=rid, message=message)
    resp = JSONResponse(status_code=422, content=payload.model_dump())
    resp.headers["X-Request-ID"] = rid
    return resp


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = getattr(request.state, "request_id", "")
    payload = problem(
        status=500,
        code=INTERNAL_ERROR,
        message="Internal server error",
        request_id=rid,
    )
    # Don't leak details to the client, but do log them
    log_event("internal_error", request_id=rid, error_type=type(exc).__name__)
    resp = JSONResponse(status_code=500, content=payload.model_dump())
    resp.headers["X-Request-ID"] = rid
    return resp
