"""FastAPI application receiving GitHub webhook deliveries.

Endpoints:
- ``POST /`` and ``POST /webhook`` -- signed webhook deliveries
- ``GET /health`` -- health check

Run with::

    uvicorn --factory repoguard.app:app_from_env
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from repoguard import __version__
from repoguard.config import Settings
from repoguard.events import parse_delivery, should_reconcile
from repoguard.exceptions import ConfigurationError, WebhookRejectedError
from repoguard.github import AsyncGitHubClient
from repoguard.jira import AsyncJiraClient
from repoguard.logging import configure_logging, get_logger, log_webhook_delivery
from repoguard.policies import PolicySet, load_policies
from repoguard.reconcile import ReconciliationEngine
from repoguard.worker import ReconciliationWorker

logger = get_logger("webhook")


def create_app(
    settings: Settings | None = None,
    policies: PolicySet | None = None,
    github: Any = None,
    jira: Any = None,
) -> FastAPI:
    """Build the webhook application.

    Anything not passed in is built from ``settings`` at startup: policies
    are loaded from ``settings.policy_dir`` and the GitHub and Jira clients
    are created when their settings are present. Clients created here are
    closed at shutdown; injected clients are left to their owner.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        policy_set = policies or load_policies(settings.policy_dir)

        owned = []
        github_client = github
        if github_client is None:
            github_client = _optional_client(AsyncGitHubClient, settings)
            if github_client is not None:
                owned.append(github_client)
        jira_client = jira
        if jira_client is None:
            jira_client = _optional_client(AsyncJiraClient, settings)
            if jira_client is not None:
                owned.append(jira_client)

        engine = ReconciliationEngine(settings, policy_set, github_client, jira_client)
        worker = ReconciliationWorker(engine)
        worker.start()
        app.state.engine = engine
        app.state.worker = worker
        try:
            yield
        finally:
            await worker.stop()
            for client in owned:
                await client.close()

    app = FastAPI(
        title="repoguard",
        description="Enforces team access and visibility policy on GitHub repositories.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    async def receive_delivery(request: Request) -> Response:
        """Authenticate a delivery and queue its reconciliation."""
        body = await request.body()
        try:
            event = parse_delivery(request.headers, body, settings.webhook_secret)
        except WebhookRejectedError as e:
            logger.warning("Rejected delivery: %s", e)
            return PlainTextResponse(e.message, status_code=e.status_code)

        text = body.decode("utf-8", errors="replace")
        log_webhook_delivery(event.event_type, event.delivery_id, dict(request.headers), text)

        if should_reconcile(event):
            request.app.state.worker.submit(event)
        else:
            logger.info(
                "Skipping reconciliation of %s for action %r",
                event.repository.name, event.action,
            )

        return JSONResponse({"input": {"headers": dict(request.headers), "body": text}})

    app.add_api_route("/", receive_delivery, methods=["POST"], tags=["webhook"])
    app.add_api_route("/webhook", receive_delivery, methods=["POST"], tags=["webhook"])

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


def app_from_env() -> FastAPI:
    """Application factory for uvicorn: settings and logging from the environment."""
    settings = Settings.from_env()
    configure_logging(level=settings.log_level)
    return create_app(settings)


def _optional_client(client_cls: Any, settings: Settings) -> Any:
    try:
        return client_cls.from_settings(settings)
    except ConfigurationError as e:
        logger.warning("%s disabled: %s", client_cls.__name__, e)
        return None
