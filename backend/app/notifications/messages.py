"""Embed builders for chat notifications.

Each builder returns a dict shaped like a Discord embed:
``{title, description, color, fields[], footer, timestamp}``.
"""
from datetime import date, datetime, timezone
from typing import Any, Optional

from app.config import settings

GOLD = 0xFACC15
RED = 0xEF4444
GREEN = 0x57F287
YELLOW = 0xEAB308


def _format_day(day: date) -> str:
    return day.strftime("%A %d %B").replace(" 0", " ")


def _names(names: list[str], empty: str = "Nobody yet") -> str:
    return "\n".join(f"• {n}" for n in names) if names else empty


def _embed(title: str, description: str, color: int, fields: list[dict[str, Any]], footer: str) -> dict[str, Any]:
    return {
        "title": title,
        "description": description,
        "color": color,
        "fields": fields,
        "footer": {"text": footer},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _join_field() -> dict[str, Any]:
    return {"name": "Join", "value": f"[Open the planner]({settings.SITE_URL})", "inline": False}


def golden_confirmed(day: date, start_hour: int, run_length: int, players: list[str]) -> dict[str, Any]:
    end_hour = start_hour + run_length
    return _embed(
        title=f"MATCH CONFIRMED ({run_length}h)",
        description=f"{run_length} consecutive slots are full ({start_hour}h - {end_hour}h)!",
        color=GOLD,
        fields=[
            {"name": "Date", "value": _format_day(day), "inline": True},
            {"name": "Slots", "value": " - ".join(f"{h}h" for h in range(start_hour, end_hour)), "inline": True},
            {"name": "Players", "value": _names(players, "No common players"), "inline": False},
            _join_field(),
        ],
        footer="Golden session",
    )


def golden_revoked(day: date, start_hour: int, run_length: int, broken_hour: int, actor_name: str) -> dict[str, Any]:
    end_hour = start_hour + run_length
    return _embed(
        title=f"WITHDRAWAL ON A {run_length}H MATCH",
        description=(
            f"{actor_name} withdrew from the {broken_hour}h slot, "
            f"breaking the {run_length}h session ({start_hour}h - {end_hour}h)."
        ),
        color=RED,
        fields=[
            {"name": "Date", "value": _format_day(day), "inline": True},
            {"name": "Affected session", "value": f"{start_hour}h - {end_hour}h", "inline": True},
            {"name": "Action", "value": "The confirmed status was revoked.", "inline": False},
            _join_field(),
        ],
        footer="Withdrawal",
    )


def _call_description(creator_name: str, call: Any) -> str:
    duration = "1h30" if call.duration_minutes == 90 else "1h00"
    lines = [
        f"**{creator_name}** is calling for a match!",
        "",
        f"Date: **{_format_day(call.date)}**",
        f"Time: **{call.start_hour}h00**",
        f"Duration: **{duration}**",
        f"Location: **{call.location}**",
    ]
    if call.price:
        lines.append(f"Price: **{call.price}**")
    if call.comment:
        lines.append(f"Note: **{call.comment}**")
    return "\n".join(lines)


def _booked_range(call: Any) -> str:
    end = (call.start_hour + call.slots_count) % 24
    # Past midnight reads as 00h, 01h
    if end < call.start_hour:
        return f"{call.start_hour}h - {end:02d}h"
    return f"{call.start_hour}h - {end}h"


def call_created(call: Any, creator_name: str) -> dict[str, Any]:
    return _embed(
        title="NEW MATCH CALL",
        description=_call_description(creator_name, call),
        color=GREEN,
        fields=[{"name": "Booked slot", "value": _booked_range(call), "inline": True}, _join_field()],
        footer="Let's play!",
    )


def call_roster(call: Any, creator_name: str, accepted: list[str], declined: list[str], quorum: int) -> dict[str, Any]:
    remaining = max(quorum - len(accepted), 0)
    return _embed(
        title="MATCH CALL",
        description=_call_description(creator_name, call),
        color=GREEN,
        fields=[
            {"name": "Booked slot", "value": _booked_range(call), "inline": True},
            {"name": f"Players ({len(accepted)}/{quorum})", "value": ", ".join(accepted) or "Nobody yet", "inline": False},
            {"name": "Out", "value": ", ".join(declined) or "Nobody", "inline": False},
            {"name": "Spots left", "value": str(remaining), "inline": True},
        ],
        footer="Let's play!",
    )


def call_cancelled(call: Any, creator_name: str, cancelled_by: Optional[str] = None) -> dict[str, Any]:
    by = cancelled_by or creator_name
    return _embed(
        title="CALL CANCELLED",
        description=(
            f"**{by}** cancelled the call by {creator_name}.\n\n"
            f"Date: **{_format_day(call.date)}**\nTime: **{call.start_hour}h00**\nLocation: **{call.location}**"
        ),
        color=RED,
        fields=[],
        footer="Cancelled",
    )


def reminder(day: date, start_hour: int, run_length: int, count: int, quorum: int) -> dict[str, Any]:
    missing = max(quorum - count, 0)
    return _embed(
        title="HOTTEST SLOT RIGHT NOW",
        description=(
            f"The best {run_length}h slot is **{_format_day(day)} "
            f"from {start_hour}h to {start_hour + run_length}h**!"
        ),
        color=YELLOW,
        fields=[
            {"name": f"Signed up ({run_length}h)", "value": f"{count}/{quorum}", "inline": True},
            {"name": "Missing", "value": f"{missing} players", "inline": True},
            _join_field(),
        ],
        footer=f"Reminder {run_length}h",
    )
