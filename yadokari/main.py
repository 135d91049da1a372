import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from yadokari import __version__
from yadokari.config import AppConfig, load_config
from yadokari.deps import build_engine
from yadokari.errors import AuthenticationFailed
from yadokari.routers import events
from yadokari.slack import SlackNotifier
from yadokari.source import ListingSourceClient
from yadokari.sql import init_db
from yadokari.tasks import TaskDispatcher


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")


def create_app(
    config: AppConfig,
    engine: Optional[Engine] = None,
    dispatcher: Optional[TaskDispatcher] = None,
) -> FastAPI:
    engine = engine or build_engine(config.database_url)
    init_db(engine)

    if dispatcher is None:
        dispatcher = TaskDispatcher(
            config,
            engine,
            source=ListingSourceClient(config.listing_source_url, timeout=config.http_timeout),
            notifier=SlackNotifier(config.slack_post_message_url, timeout=config.http_timeout),
        )

    app = FastAPI(
        title="yadokari",
        version=__version__,
        description="Posts newly published rental listings to Slack when pinged.",
    )
    app.state.config = config
    app.state.engine = engine
    app.state.dispatcher = dispatcher

    @app.exception_handler(AuthenticationFailed)
    async def _auth_failed(request: Request, exc: AuthenticationFailed):
        return JSONResponse(status_code=400, content={"ok": False})

    app.include_router(events.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def main() -> None:
    import uvicorn

    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
