"""Timer plugin entry point."""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from plugin_host.models.tool_calls import FunctionCall
from plugin_host.plugins.declaration import FunctionDeclaration, ParameterSchema, PropertySchema, SchemaType
from plugin_host.plugins.handler import PluginHandler
from plugin_host.plugins.registry import Plugin

logger = logging.getLogger("plugin.timer")

MAX_SECONDS = 3600

timer_declaration = FunctionDeclaration(
    name="start_timer",
    description="Starts a countdown timer for a specified number of seconds.",
    parameters=ParameterSchema(
        properties={
            "seconds": PropertySchema(
                type=SchemaType.INTEGER,
                description=f"Duration of the timer in seconds. Maximum allowed is {MAX_SECONDS} (1 hour).",
            ),
            "label": PropertySchema(
                type=SchemaType.STRING,
                description="Optional label for the timer. Default is 'Timer'.",
            ),
        },
        required=["seconds"],
    ),
)


@dataclass
class Timer:
    label: str
    seconds: int
    started_at: float = field(default_factory=time.monotonic)

    def remaining(self, now: Optional[float] = None) -> int:
        elapsed = (now if now is not None else time.monotonic()) - self.started_at
        return max(0, int(round(self.seconds - elapsed)))


class TimerHandler(PluginHandler):
    """Starts countdown timers; the panel renders them from `timers`."""

    def __init__(self):
        self.timers: List[Timer] = []

    def clone(self) -> "TimerHandler":
        return TimerHandler()

    def handle(self, call: FunctionCall) -> Optional[str]:
        try:
            seconds = int(call.args.get("seconds"))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid timer duration: {call.args.get('seconds')!r}")
        if seconds <= 0 or seconds > MAX_SECONDS:
            raise ValueError(f"Timer duration must be between 1 and {MAX_SECONDS} seconds, got {seconds}")

        label = call.args.get("label") or "Timer"
        self.timers.append(Timer(label=label, seconds=seconds))
        logger.info(f"Started timer '{label}' for {seconds}s")
        return f"Timer '{label}' started for {seconds} seconds"

    def active(self) -> List[Timer]:
        now = time.monotonic()
        return [t for t in self.timers if t.remaining(now) > 0]


def register() -> Plugin:
    return Plugin(
        id="timer",
        name="Timer Plugin",
        declaration=timer_declaration,
        handler=TimerHandler(),
        component="TimerPanel",
        description="Create countdown timers",
        version="1.0.0",
        author="Default",
    )
