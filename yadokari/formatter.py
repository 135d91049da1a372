# yadokari/formatter.py
"""
Slack Block Kit rendering for fresh listings.

A message holds at most 50 blocks. Each listing takes three, plus the
announcement and the trailing divider, so the default bound of 10 listings
renders 32 blocks. Listings past the bound are not rendered anywhere.
"""
import re
from typing import Any, Dict, List, Optional, Sequence

from yadokari.models import Listing

Block = Dict[str, Any]

MAX_LISTINGS = 10
SLACK_MAX_BLOCKS = 50

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_SQUARE_METRE_ENTITY = "&#13217;"
_MISSING = "-"


def to_mrkdwn(value: Optional[str]) -> str:
    """Source HTML fragments -> Slack text."""
    if not value:
        return _MISSING
    out = _BR_RE.sub("\n", value).replace(_SQUARE_METRE_ENTITY, "㎡")
    # Slack control characters
    return out.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _with_fee(rent: Optional[str], fee: Optional[str]) -> str:
    if not rent:
        return _MISSING
    if not fee:
        return to_mrkdwn(rent)
    return f"{to_mrkdwn(rent)} ({to_mrkdwn(fee)})"


def _divider() -> Block:
    return {"type": "divider"}


def _announcement(fresh: Sequence[Listing]) -> Block:
    region = fresh[0].region_label
    headline = f"New listings: {len(fresh)}"
    if region:
        headline = f"{headline} ({to_mrkdwn(region)})"
    return {"type": "section", "text": {"type": "mrkdwn", "text": f":house: *{headline}*"}}


def _title(li: Listing) -> Block:
    name = to_mrkdwn(li.name)
    title = f"*<{li.detail_url}|{name}>*" if li.detail_url else f"*{name}*"
    block: Block = {
        "type": "section",
        "text": {"type": "mrkdwn", "text": f"{title}\n{to_mrkdwn(li.access_text)}"},
    }
    if li.image_url:
        block["accessory"] = {"type": "image", "image_url": li.image_url, "alt_text": li.name}
    return block


def _fields(li: Listing) -> Block:
    return {
        "type": "section",
        "fields": [
            {"type": "mrkdwn", "text": f"*Rent*\n{_with_fee(li.normal_rent, li.normal_common_fee)}"},
            {"type": "mrkdwn", "text": f"*Discounted rent*\n{_with_fee(li.discounted_rent, li.discounted_common_fee)}"},
            {"type": "mrkdwn", "text": f"*Type / Area*\n{to_mrkdwn(li.unit_type)} / {to_mrkdwn(li.floor_area_text)}"},
            {"type": "mrkdwn", "text": f"*Category*\n{to_mrkdwn(li.category_label)}"},
        ],
    }


def render_limit(limit: int) -> int:
    """Listings per message: `limit`, capped by the platform's block ceiling."""
    return max(1, min(limit, (SLACK_MAX_BLOCKS - 2) // 3))


def format_listings(fresh: Sequence[Listing], limit: int = MAX_LISTINGS) -> Optional[List[Block]]:
    """Render `fresh` into blocks, or None when there is nothing to announce."""
    if not fresh:
        return None

    blocks: List[Block] = [_announcement(fresh)]
    for li in fresh[:render_limit(limit)]:
        blocks.extend([_divider(), _title(li), _fields(li)])
    blocks.append(_divider())
    return blocks
