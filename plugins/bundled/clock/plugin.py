"""Clock plugin entry point."""

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from plugin_host.models.tool_calls import FunctionCall
from plugin_host.plugins.declaration import FunctionDeclaration, ParameterSchema, PropertySchema, SchemaType
from plugin_host.plugins.handler import PluginHandler
from plugin_host.plugins.registry import Plugin

logger = logging.getLogger("plugin.clock")

clock_declaration = FunctionDeclaration(
    name="get_current_time",
    description="Returns the current time, date and time zone.",
    parameters=ParameterSchema(
        properties={
            "format": PropertySchema(
                type=SchemaType.STRING,
                description="Time format ('12h' or '24h')",
                enum=["12h", "24h"],
            ),
            "timezone": PropertySchema(
                type=SchemaType.STRING,
                description=(
                    "Desired time zone (e.g. 'Europe/Berlin', 'America/New_York'). "
                    "Uses the local time zone when omitted."
                ),
            ),
        },
    ),
)


def get_current_time(fmt: str = "24h", timezone: Optional[str] = None, now: Optional[datetime] = None) -> dict:
    """Current time formatted for the model.

    Raises:
        ValueError: unknown time zone or format
    """
    if fmt not in ("12h", "24h"):
        raise ValueError(f"Unknown time format: {fmt}")
    try:
        tz = ZoneInfo(timezone) if timezone else None
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown time zone: {timezone}")

    if now is None:
        now = datetime.now(tz) if tz else datetime.now().astimezone()
    time_str = now.strftime("%I:%M:%S %p" if fmt == "12h" else "%H:%M:%S")
    return {
        "time": time_str,
        "date": now.strftime("%A, %d %B %Y"),
        "timezone": timezone or now.tzname() or "local",
        "timestamp": int(now.timestamp() * 1000),
    }


class ClockHandler(PluginHandler):
    def __init__(self):
        self.last_reading: Optional[dict] = None

    def clone(self) -> "ClockHandler":
        return ClockHandler()

    def handle(self, call: FunctionCall) -> Optional[str]:
        reading = get_current_time(call.args.get("format") or "24h", call.args.get("timezone"))
        self.last_reading = reading
        logger.info(f"Current time requested: {reading['time']} ({reading['timezone']})")
        return f"{reading['time']}, {reading['date']} ({reading['timezone']})"


def register() -> Plugin:
    return Plugin(
        id="clock",
        name="Clock Plugin",
        declaration=clock_declaration,
        handler=ClockHandler(),
        component="ClockFace",
        description="Display current time",
        version="1.0.0",
        author="Default",
    )
