# yadokari/auth.py
import hmac
import logging

from yadokari.errors import AuthenticationFailed
from yadokari.models import EventRequest, Handshake, InboundEvent, MessageEvent

LOG = logging.getLogger("auth")


def authenticate(body: EventRequest, verification_token: str) -> InboundEvent:
    """
    Check the shared secret and classify the request.

    No `event` object means the platform is verifying the endpoint: the
    challenge is handed back untouched. Anything else is a message event.
    """
    if not hmac.compare_digest(body.token.encode("utf-8"), verification_token.encode("utf-8")):
        LOG.warning("Rejected webhook call: verification token mismatch")
        raise AuthenticationFailed("verification token mismatch")

    if body.event is None:
        return Handshake(challenge=body.challenge)

    return MessageEvent(
        channel=body.event.channel,
        source_user=body.event.user,
        text=body.event.text,
    )
