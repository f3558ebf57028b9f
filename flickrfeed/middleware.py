import uuid
from fastapi import Request


async def request_id_middleware(request: Request, call_next):
    # Reuse the caller's ID when a proxy already assigned one
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

    # Lives for this request only
    request.state.request_id = request_id

    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id

    return response
