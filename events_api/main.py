"""Events API service: zip-code event lookup backed by DynamoDB."""
import os
from contextlib import AsyncExitStack, asynccontextmanager
from typing import List, Optional
from uuid import uuid4

import aioboto3
from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.responses import JSONResponse

from events_api.dynamodb import EventStore, ensure_table_exists
from events_api.errors import (
    EventNotFoundError,
    EventsError,
    MalformedRecordError,
    StoreError,
    ValidationError,
)
from events_api.models import validate_zip_code
from events_api.schemas import EventCreate, EventResponse
from shared.logger import bind_request_context, configure_logging, get_logger

# Configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DYNAMODB_TABLE = os.getenv("DYNAMODB_TABLE", "Events")
AWS_REGION = os.getenv("AWS_REGION", "us-west-2")
AWS_PROFILE = os.getenv("AWS_PROFILE")
DYNAMODB_ENDPOINT_URL = os.getenv("DYNAMODB_ENDPOINT_URL")
DYNAMODB_CREATE_TABLE = os.getenv("DYNAMODB_CREATE_TABLE", "false").lower() in ("1", "true", "yes")
PORT = int(os.getenv("PORT", "8080"))

configure_logging(service="events_api", environment=ENVIRONMENT, level=LOG_LEVEL)
logger = get_logger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    EventNotFoundError: status.HTTP_404_NOT_FOUND,
    MalformedRecordError: status.HTTP_502_BAD_GATEWAY,
    StoreError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared DynamoDB table handle for the lifetime of the process."""
    session_kwargs = {"region_name": AWS_REGION}
    if AWS_PROFILE:
        session_kwargs["profile_name"] = AWS_PROFILE
    session = aioboto3.Session(**session_kwargs)

    async with AsyncExitStack() as stack:
        if DYNAMODB_CREATE_TABLE:
            client = await stack.enter_async_context(
                session.client("dynamodb", endpoint_url=DYNAMODB_ENDPOINT_URL)
            )
            await ensure_table_exists(client, DYNAMODB_TABLE)

        dynamodb = await stack.enter_async_context(
            session.resource("dynamodb", endpoint_url=DYNAMODB_ENDPOINT_URL)
        )
        table = await dynamodb.Table(DYNAMODB_TABLE)
        app.state.event_store = EventStore(table)
        logger.info(
            "events_api_started",
            port=PORT,
            table_name=DYNAMODB_TABLE,
            region=AWS_REGION,
            endpoint_url=DYNAMODB_ENDPOINT_URL,
        )
        yield

    logger.info("events_api_shutdown")


app = FastAPI(
    title="Zip Events API",
    description="Look up and store events by five-digit zip code",
    version="1.0.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def request_log_context(request: Request, call_next):
    """Bind request id, method and path to every log line emitted while handling the request."""
    request_id = request.headers.get("x-request-id") or str(uuid4())
    bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def get_event_store(request: Request) -> EventStore:
    """Dependency returning the process-wide event store."""
    return request.app.state.event_store


@app.exception_handler(EventsError)
async def events_error_handler(request: Request, exc: EventsError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("request_failed", path=request.url.path, code=exc.code.value, error=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, code=exc.code.value, error=exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code.value},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "events_api"}


@app.get("/events", response_model=List[EventResponse])
async def list_events(
    zip_code: Optional[str] = Query(default=None, alias="zip"),
    store: EventStore = Depends(get_event_store),
) -> List[EventResponse]:
    """
    List events for a zip code.

    Always returns at least one event: zip codes without stored events (or a
    failing store) get generated placeholder events.
    """
    zip_code = validate_zip_code(zip_code)
    events = await store.find_events_by_zip_code(zip_code)
    return [EventResponse.from_event(event) for event in events]


@app.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    store: EventStore = Depends(get_event_store),
) -> EventResponse:
    """Create or replace an event; an existing event with the same zip code and id is overwritten."""
    event = payload.to_event()
    await store.save_event(event)
    return EventResponse.from_event(event)


@app.get("/events/{zip_code}/{event_id}", response_model=EventResponse)
async def get_event(
    zip_code: str,
    event_id: str,
    store: EventStore = Depends(get_event_store),
) -> EventResponse:
    validate_zip_code(zip_code)
    event = await store.get_event(zip_code, event_id)
    if event is None:
        raise EventNotFoundError(zip_code, event_id)
    return EventResponse.from_event(event)


@app.delete("/events/{zip_code}/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    zip_code: str,
    event_id: str,
    store: EventStore = Depends(get_event_store),
) -> Response:
    validate_zip_code(zip_code)
    await store.delete_event(zip_code, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
