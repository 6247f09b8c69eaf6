"""Stopwatch plugin entry point."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from plugin_host.models.tool_calls import FunctionCall
from plugin_host.plugins.declaration import FunctionDeclaration, ParameterSchema, PropertySchema, SchemaType
from plugin_host.plugins.handler import PluginHandler
from plugin_host.plugins.registry import Plugin

logger = logging.getLogger("plugin.stopwatch")

ACTIONS = ["start", "stop", "reset", "lap"]

stopwatch_declaration = FunctionDeclaration(
    name="stopwatch",
    description="Controls a stopwatch for measuring time with start, stop, lap and reset.",
    parameters=ParameterSchema(
        properties={
            "action": PropertySchema(
                type=SchemaType.STRING,
                description="Action to perform: 'start', 'stop', 'lap' for a new lap, or 'reset'.",
                enum=ACTIONS,
            ),
            "label": PropertySchema(
                type=SchemaType.STRING,
                description="Optional name for the stopwatch when several run at once.",
            ),
        },
        required=["action"],
    ),
)


@dataclass
class StopwatchState:
    is_running: bool = False
    start_time: Optional[float] = None
    elapsed: float = 0.0
    laps: List[float] = field(default_factory=list)

    def current(self, now: float) -> float:
        if self.is_running and self.start_time is not None:
            return self.elapsed + (now - self.start_time)
        return self.elapsed


class StopwatchHandler(PluginHandler):
    """Keeps one stopwatch per label."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self.watches: Dict[str, StopwatchState] = {}

    def clone(self) -> "StopwatchHandler":
        return StopwatchHandler(self.clock)

    def handle(self, call: FunctionCall) -> Optional[str]:
        action = call.args.get("action")
        if action not in ACTIONS:
            raise ValueError(f"Unknown stopwatch action: {action!r}")
        label = call.args.get("label") or "Stopwatch"
        watch = self.watches.setdefault(label, StopwatchState())
        now = self.clock()

        if action == "start":
            if not watch.is_running:
                watch.is_running = True
                watch.start_time = now
        elif action == "stop":
            watch.elapsed = watch.current(now)
            watch.is_running = False
            watch.start_time = None
        elif action == "lap":
            watch.laps.append(watch.current(now))
        else:
            self.watches[label] = watch = StopwatchState()

        logger.info(f"Stopwatch '{label}': {action} at {watch.current(now):.2f}s")
        return f"Stopwatch '{label}' {action}: {watch.current(now):.2f}s, {len(watch.laps)} lap(s)"


def register() -> Plugin:
    return Plugin(
        id="stopwatch",
        name="Stopwatch",
        declaration=stopwatch_declaration,
        handler=StopwatchHandler(),
        component="StopwatchPanel",
        description="Stopwatch with lap counting and multiple instances",
        version="1.0.0",
        author="GitHub Copilot",
    )
