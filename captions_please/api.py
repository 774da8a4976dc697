"""FastAPI webhook server for captions_please."""

from contextlib import asynccontextmanager
from datetime import datetime
from json import JSONDecodeError

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from captions_please import __version__
from captions_please.config import ActivityConfig
from captions_please.core.orchestrator import ActivityProcessor
from captions_please.core.parser import PayloadError, parse_activity
from captions_please.core.scheduler import ActivityScheduler
from captions_please.logging import configure_logging, get_logger
from captions_please.models.activity import ActivityNotification


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


class WebhookResponse(BaseModel):
    """Acknowledgement for an accepted activity notification."""

    status: str = "accepted"
    posts: int = Field(..., description="Number of created posts in the notification")


async def _report(scheduler: ActivityScheduler, notification: ActivityNotification) -> None:
    """Run a notification through the scheduler and log every result."""
    log = get_logger("webhook")
    async for result in scheduler.handle_notification(notification):
        log.info(
            "activity_result",
            post_id=result.post.id if result.post else None,
            action=result.action,
            replied=result.replied,
            error=result.error.kind.value if result.error else None,
            message=str(result.error) if result.error else None,
        )


def create_app(processor: ActivityProcessor, config: ActivityConfig | None = None) -> FastAPI:
    """
    Build the webhook app around ``processor``.

    The scheduler's workers live for the lifetime of the app.

    Example:
        app = create_app(ActivityProcessor(client, ocr, describer))
        uvicorn.run(app, host="0.0.0.0", port=8000)
    """
    config = config or processor.config
    scheduler = ActivityScheduler(config, processor)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage scheduler lifecycle."""
        configure_logging(config)
        async with scheduler:
            yield

    app = FastAPI(
        title="captions_please API",
        description="Account activity webhook for the captions bot",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.scheduler = scheduler

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check API health status."""
        return HealthResponse(
            status="closing" if scheduler.closed else "healthy",
            version=__version__,
            timestamp=datetime.now().isoformat(),
        )

    @app.post("/webhook/twitter", response_model=WebhookResponse, tags=["Activity"])
    async def activity_webhook(request: Request, background_tasks: BackgroundTasks):
        """
        Receive an account activity notification.

        Answers as soon as the payload is parsed. The posts are handled in
        the background and their results are logged.
        """
        try:
            notification = parse_activity(await request.json())
        except (JSONDecodeError, UnicodeDecodeError, PayloadError) as e:
            raise HTTPException(status_code=400, detail=f"Malformed activity payload: {e}")

        background_tasks.add_task(_report, scheduler, notification)
        return WebhookResponse(posts=len(notification.posts))

    return app
