"""Live model configuration."""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from plugin_host.constants import (
    ENABLE_GOOGLE_SEARCH,
    LIVE_MODEL,
    LIVE_RESPONSE_MODALITY,
    LIVE_VOICE,
)

logger = logging.getLogger(__name__)

VALID_MODALITIES = ("audio", "text")


@dataclass
class LiveModelConfig:
    """Settings for the live model session the plugins are exposed to."""
    model: str = LIVE_MODEL
    voice_name: str = LIVE_VOICE
    response_modality: str = LIVE_RESPONSE_MODALITY
    google_search: bool = ENABLE_GOOGLE_SEARCH
    extra_generation_config: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> tuple[bool, Optional[str]]:
        """
        Validate configuration.

        Returns:
            (is_valid, error_message)
        """
        if not self.model.startswith("models/"):
            return False, f"Invalid model name (expected 'models/...'): {self.model}"

        if self.response_modality not in VALID_MODALITIES:
            return False, f"Invalid response modality: {self.response_modality}"

        return True, None

    def generation_config(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {"responseModalities": self.response_modality}
        if self.response_modality == "audio":
            config["speechConfig"] = {
                "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": self.voice_name}}
            }
        config.update(self.extra_generation_config)
        return config


class ConfigService:
    """Holds the active live model configuration."""

    def __init__(self, config: Optional[LiveModelConfig] = None):
        self._config = config or LiveModelConfig()
        valid, error = self._config.validate()
        if not valid:
            logger.warning(f"Live model config is invalid: {error}")

    def get_current_config(self) -> LiveModelConfig:
        return self._config

    def update(self, **changes: Any) -> LiveModelConfig:
        """Replace fields of the active configuration after validating them."""
        candidate = replace(self._config, **changes)
        valid, error = candidate.validate()
        if not valid:
            raise ValueError(error)
        self._config = candidate
        logger.info(f"Live model config updated: {', '.join(changes)}")
        return candidate
