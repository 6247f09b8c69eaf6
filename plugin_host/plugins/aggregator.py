"""Capability aggregator - builds what the live model is told about the plugins."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from plugin_host.plugins.registry import PluginRegistry
from plugin_host.services.config_service import LiveModelConfig

logger = logging.getLogger(__name__)

# plugin id -> (hint when enabled, notice when disabled)
PLUGIN_GUIDANCE: Dict[str, Tuple[str, str]] = {
    "timer": (
        "You can start timers when asked.",
        "The timer functionality is currently disabled. If asked to create a timer, "
        "politely inform the user that the timer feature is currently disabled.",
    ),
    "todo": (
        "You can generate or update a todo list (with items to check and edit) when asked.",
        "The todo list functionality is currently disabled. If asked to manage todos, "
        "politely inform the user that the todo list feature is currently disabled.",
    ),
}

READBACK_INSTRUCTION = (
    "IMPORTANT INSTRUCTION: Never read aloud any technical information such as "
    "\"codeExecutionResult\", \"OUTCOME_OK\", \"output\", \"success:True\", or any JSON "
    "structures or function call results. These are internal messages meant only for the system."
)


def _is_enabled(state: Mapping[str, bool], plugin_id: str) -> bool:
    return state.get(plugin_id, True)


class CapabilityAggregator:
    """Aggregates declarations and guidance text for the enabled plugins."""

    def __init__(self, registry: PluginRegistry, guidance: Optional[Dict[str, Tuple[str, str]]] = None):
        self.registry = registry
        self.guidance = PLUGIN_GUIDANCE if guidance is None else guidance

    def declarations_for(self, state: Mapping[str, bool]) -> List[Dict[str, Any]]:
        """Wire-format declarations of enabled plugins, in catalog order."""
        return [
            plugin.declaration.to_wire()
            for plugin in self.registry.list()
            if _is_enabled(state, plugin.id)
        ]

    def available_tools(self, state: Mapping[str, bool]) -> str:
        return ", ".join(p.id for p in self.registry.list() if _is_enabled(state, p.id))

    def build_guidance(self, state: Mapping[str, bool]) -> str:
        """Usage hints for enabled plugins, explicit unavailability notices for disabled ones."""
        lines = []
        for plugin in self.registry.list():
            texts = self.guidance.get(plugin.id)
            if not texts:
                continue
            enabled_hint, disabled_notice = texts
            lines.append(enabled_hint if _is_enabled(state, plugin.id) else disabled_notice)
        return "\n".join(lines)

    def build_system_instruction(self, state: Mapping[str, bool]) -> str:
        parts = [f"Currently available tools: {self.available_tools(state)}."]
        guidance = self.build_guidance(state)
        if guidance:
            parts.append(guidance)
        parts.append(READBACK_INSTRUCTION)
        return "\n".join(parts)

    def build_live_config(self, state: Mapping[str, bool], model_config: LiveModelConfig) -> Dict[str, Any]:
        """Assemble the live model setup message for the current plugin state."""
        tools: List[Dict[str, Any]] = []
        if model_config.google_search:
            tools.append({"googleSearch": {}})
        tools.append({"functionDeclarations": self.declarations_for(state)})

        config = {
            "model": model_config.model,
            "generationConfig": model_config.generation_config(),
            "systemInstruction": {"parts": [{"text": self.build_system_instruction(state)}]},
            "tools": tools,
        }
        logger.debug(
            f"Built live config with {len(tools[-1]['functionDeclarations'])} function declaration(s)"
        )
        return config
