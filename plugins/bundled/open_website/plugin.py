"""Open website plugin entry point."""

import logging
import re
from typing import Callable, List, Optional

from plugin_host.models.tool_calls import FunctionCall
from plugin_host.plugins.declaration import FunctionDeclaration, ParameterSchema, PropertySchema, SchemaType
from plugin_host.plugins.handler import PluginHandler
from plugin_host.plugins.registry import Plugin

logger = logging.getLogger("plugin.openWebsite")

open_website_declaration = FunctionDeclaration(
    name="open_website",
    description="Opens a website in a new tab.",
    parameters=ParameterSchema(
        properties={
            "url": PropertySchema(type=SchemaType.STRING, description="URL of the website to open."),
        },
        required=["url"],
    ),
)

# The model sometimes resolves bare hosts against the dev server origin
_LOCAL_ORIGIN = re.compile(r"^http://localhost:3000/")


def normalize_url(url: str) -> str:
    return _LOCAL_ORIGIN.sub("https://", url.strip())


class OpenWebsiteHandler(PluginHandler):
    """Asks the UI to open a URL. The opener callback is provided by the UI layer."""

    def __init__(self, opener: Optional[Callable[[str], None]] = None):
        self.opener = opener
        self.opened: List[str] = []

    def clone(self) -> "OpenWebsiteHandler":
        # the opener belongs to the UI layer and is shared
        return OpenWebsiteHandler(self.opener)

    def handle(self, call: FunctionCall) -> Optional[str]:
        url = call.args.get("url")
        if not url:
            raise ValueError("No URL provided")

        url = normalize_url(url)
        self.opened.append(url)
        if self.opener is not None:
            self.opener(url)
        logger.info(f"Opening website: {url}")
        return f"Opening website: {url}"


def register() -> Plugin:
    return Plugin(
        id="openWebsite",
        name="Open Website Plugin",
        declaration=open_website_declaration,
        handler=OpenWebsiteHandler(),
        component=None,  # no visual UI
        description="Open websites from the chat",
        version="1.0.0",
        author="Default",
    )
