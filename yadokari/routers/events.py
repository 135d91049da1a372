# yadokari/routers/events.py
import logging

from fastapi import APIRouter, BackgroundTasks, Depends

from yadokari.auth import authenticate
from yadokari.config import AppConfig
from yadokari.deps import get_config, get_dispatcher
from yadokari.models import EventRequest, EventResponse, Handshake
from yadokari.tasks import TaskDispatcher

LOG = logging.getLogger("events")

router = APIRouter(tags=["events"])


@router.post("/events", response_model=EventResponse, response_model_exclude_none=True)
def receive_event(
    body: EventRequest,
    background_tasks: BackgroundTasks,
    config: AppConfig = Depends(get_config),
    dispatcher: TaskDispatcher = Depends(get_dispatcher),
):
    """
    Thin endpoint:
      - authenticate (AuthenticationFailed -> 400, see main.py)
      - handshake: echo the challenge
      - message event: schedule the workflow and acknowledge right away
    """
    event = authenticate(body, config.verification_token)

    if isinstance(event, Handshake):
        return EventResponse(ok=True, challenge=event.challenge)

    scheduled = dispatcher.dispatch(event, background_tasks)
    LOG.debug("event in %s acknowledged (workflow scheduled: %s)", event.channel, scheduled)
    return EventResponse(ok=True)
