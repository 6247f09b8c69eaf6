"""Plugin installer - simulated acquisition of plugin packages.

Installing a package never executes its contents. The installer derives an
identity from the package (file name or repository URL), clones the handler
and presentation unit of an existing template plugin, and registers the
result. An installed plugin behaves like its template but keeps its own
handler state. Built-in ids are never taken over by an install.
"""

import asyncio
import logging
import re
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Deque, Dict, List, Optional, Union

from plugin_host.constants import (
    ARCHIVE_INSTALL_DELAY,
    INSTALL_DELAY_SCALE,
    REPOSITORY_INSTALL_DELAY,
    SCRIPT_INSTALL_DELAY,
)
from plugin_host.plugins.errors import BuiltinConflictError, NoTemplateError, PackageParseError, PluginError
from plugin_host.plugins.registry import Plugin, PluginRegistry

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSIONS = (".zip",)
SCRIPT_EXTENSIONS = (".js", ".ts", ".jsx", ".tsx", ".py")

REPOSITORY_URL_PATTERN = re.compile(r"^https://([^/?#]+)/([^/?#]+)/([^/?#]+)([/?#].*)?$")

# Template plugins to clone, in priority order; falls back to the first catalog entry
TEMPLATE_PRIORITY = ("clock", "timer", "todo")

DEFAULT_VERSION = "1.0.0"
DEFAULT_AUTHOR = "Plugin Host"
MAX_ATTEMPT_HISTORY = 50


@dataclass
class PluginIdentity:
    id: str
    name: str
    description: Optional[str] = None
    version: str = DEFAULT_VERSION
    author: str = DEFAULT_AUTHOR


# Known demo archives mapped to richer metadata
SIMULATED_ARCHIVES: Dict[str, PluginIdentity] = {
    "stopwatch.zip": PluginIdentity(
        id="zipStopwatch",
        name="Stopwatch (from ZIP)",
        description="Stopwatch with lap counting and multiple instances",
        version="1.0.0",
        author="GitHub Copilot",
    ),
    "calculator.zip": PluginIdentity(
        id="calculator",
        name="Calculator",
        description="Simple calculator for basic arithmetic",
        version="1.0.0",
        author="GitHub Copilot",
    ),
    "notes.zip": PluginIdentity(
        id="notes",
        name="Notes",
        description="Simple note-taking app",
        version="1.1.0",
        author="GitHub Copilot",
    ),
}


class PackageKind(str, Enum):
    ARCHIVE = "archive"
    SCRIPT = "script"
    REPOSITORY = "repository"


class InstallState(str, Enum):
    """Installation attempt states."""

    RECEIVED = "received"
    CLASSIFIED = "classified"
    IDENTITY_DERIVED = "identity_derived"
    TEMPLATE_SELECTED = "template_selected"
    REGISTERED = "registered"
    FAILED = "failed"


@dataclass
class ArchiveUpload:
    """An uploaded package file (archive or script module)."""

    filename: str
    content: bytes = b""


@dataclass
class RepositoryReference:
    url: str


PackageDescriptor = Union[ArchiveUpload, RepositoryReference, str]


@dataclass
class ClassifiedPackage:
    kind: PackageKind
    source: str  # file name or URL
    stem: str = ""
    host: str = ""
    owner: str = ""
    repo: str = ""
    size: int = 0


@dataclass
class InstallAttempt:
    """Tracks one installation through its state machine."""

    source: str
    state: InstallState = InstallState.RECEIVED
    kind: Optional[PackageKind] = None
    plugin_id: Optional[str] = None
    template_id: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    started_at: datetime = field(default_factory=datetime.now)

    def advance(self, state: InstallState) -> None:
        logger.debug(f"Install {self.source}: {self.state.value} -> {state.value}")
        self.state = state

    def fail(self, error: Exception) -> None:
        self.state = InstallState.FAILED
        self.error = str(error)
        self.error_kind = type(error).__name__

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "state": self.state.value,
            "kind": self.kind.value if self.kind else None,
            "plugin_id": self.plugin_id,
            "template_id": self.template_id,
            "error": self.error,
            "error_kind": self.error_kind,
            "started_at": self.started_at.isoformat(),
        }


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _strip_extension(filename: str, extensions: tuple) -> Optional[str]:
    lowered = filename.lower()
    for ext in extensions:
        if lowered.endswith(ext):
            return filename[: -len(ext)]
    return None


def classify_package(descriptor: PackageDescriptor) -> ClassifiedPackage:
    """Classify an install descriptor.

    Plain strings are treated as repository URLs when they carry a scheme,
    otherwise as file names.

    Raises:
        PackageParseError: if the descriptor is not a supported file or URL
    """
    if isinstance(descriptor, str):
        descriptor = RepositoryReference(descriptor) if "://" in descriptor else ArchiveUpload(descriptor)

    if isinstance(descriptor, RepositoryReference):
        url = descriptor.url.strip()
        match = REPOSITORY_URL_PATTERN.match(url)
        if not match:
            raise PackageParseError(
                f"Invalid repository URL: {url!r}. Format: https://github.com/owner/repo",
                {"url": url},
            )
        host, owner, repo, _ = match.groups()
        if repo.lower().endswith(".git"):
            repo = repo[:-4]
        return ClassifiedPackage(PackageKind.REPOSITORY, url, host=host, owner=owner, repo=repo)

    if isinstance(descriptor, ArchiveUpload):
        filename = descriptor.filename.strip()
        if not filename or "/" in filename or "\\" in filename:
            raise PackageParseError(f"Invalid package file name: {filename!r}", {"filename": filename})

        stem = _strip_extension(filename, ARCHIVE_EXTENSIONS)
        if stem:
            return ClassifiedPackage(PackageKind.ARCHIVE, filename, stem=stem, size=len(descriptor.content))
        stem = _strip_extension(filename, SCRIPT_EXTENSIONS)
        if stem:
            return ClassifiedPackage(PackageKind.SCRIPT, filename, stem=stem, size=len(descriptor.content))
        raise PackageParseError(f"Unsupported package format: {filename}", {"filename": filename})

    raise PackageParseError(f"Unsupported package descriptor: {type(descriptor).__name__}")


def derive_identity(package: ClassifiedPackage) -> PluginIdentity:
    """Derive the identity of the plugin a package would install."""
    if package.kind == PackageKind.ARCHIVE:
        known = SIMULATED_ARCHIVES.get(package.source)
        if known:
            return PluginIdentity(
                id=known.id,
                name=known.name,
                description=known.description or f"{known.name} Plugin",
                version=known.version or DEFAULT_VERSION,
                author=known.author or DEFAULT_AUTHOR,
            )
        title = _capitalize(package.stem)
        return PluginIdentity(
            id=package.stem,
            name=f"{title} Plugin",
            description=f"{title} Plugin (installed from archive)",
        )

    if package.kind == PackageKind.SCRIPT:
        return PluginIdentity(
            id=package.stem,
            name=f"{_capitalize(package.stem)} Plugin",
            description=f"Plugin from {package.source}",
            author="User",
        )

    plugin_id = re.sub(r"[^a-z0-9]", "", package.repo.lower())
    if not plugin_id:
        raise PackageParseError(f"Cannot derive a plugin id from repository name {package.repo!r}")
    words = [w for w in re.split(r"[-_]", package.repo) if w]
    return PluginIdentity(
        id=plugin_id,
        name=f"{' '.join(_capitalize(w) for w in words)} Plugin",
        description=f"Plugin from {package.host}: {package.owner}/{package.repo}",
        author=package.owner,
    )


class PluginInstaller:
    """Installs simulated plugin packages into a registry."""

    def __init__(self, registry: PluginRegistry, delay_scale: float = INSTALL_DELAY_SCALE):
        self.registry = registry
        self.delay_scale = delay_scale
        self._installed: Dict[str, InstallAttempt] = {}
        self.attempts: Deque[InstallAttempt] = deque(maxlen=MAX_ATTEMPT_HISTORY)

    def select_template(self) -> Plugin:
        """Pick the plugin whose behavior installed plugins inherit."""
        for plugin_id in TEMPLATE_PRIORITY:
            plugin = self.registry.lookup(plugin_id)
            if plugin:
                return plugin
        plugin = self.registry.first()
        if plugin is None:
            raise NoTemplateError()
        return plugin

    def create_plugin_structure(self, identity: PluginIdentity, template: Optional[Plugin] = None) -> Plugin:
        """Build (without registering) a plugin cloned from the template."""
        template = template or self.select_template()
        return Plugin(
            id=identity.id,
            name=identity.name or f"{_capitalize(identity.id)} Plugin",
            declaration=template.declaration,
            handler=template.handler.clone(),
            component=template.component,
            description=identity.description or f"New {identity.id} plugin",
            version=identity.version or DEFAULT_VERSION,
            author=identity.author or DEFAULT_AUTHOR,
        )

    async def install_from_package(self, descriptor: PackageDescriptor) -> Plugin:
        """Install a plugin from an uploaded file or a repository reference.

        Args:
            descriptor: ArchiveUpload, RepositoryReference, or a file name / URL string

        Returns:
            The registered plugin

        Raises:
            PackageParseError: malformed file name or URL
            NoTemplateError: the catalog is empty
            BuiltinConflictError: the derived id belongs to a built-in plugin
            PluginValidationError: the cloned record failed registry validation
        """
        source = descriptor if isinstance(descriptor, str) else getattr(
            descriptor, "url", getattr(descriptor, "filename", repr(descriptor))
        )
        attempt = InstallAttempt(source=source)
        self.attempts.append(attempt)
        logger.info(f"Installing plugin from: {source}")

        try:
            package = classify_package(descriptor)
            attempt.kind = package.kind
            attempt.advance(InstallState.CLASSIFIED)

            await self._simulate_processing(package)

            identity = derive_identity(package)
            attempt.plugin_id = identity.id
            if self.registry.is_builtin(identity.id):
                raise BuiltinConflictError(identity.id)
            attempt.advance(InstallState.IDENTITY_DERIVED)

            template = self.select_template()
            attempt.template_id = template.id
            attempt.advance(InstallState.TEMPLATE_SELECTED)

            plugin = self.create_plugin_structure(identity, template)
            self.registry.register(plugin)
            attempt.advance(InstallState.REGISTERED)
        except PluginError as e:
            attempt.fail(e)
            logger.error(f"Failed to install plugin from {source}: {e}")
            raise

        self._installed[plugin.id] = attempt
        logger.info(
            f"Installed plugin '{plugin.id}' from {package.kind.value} {source} "
            f"(template: {template.id})"
        )
        return plugin

    async def install_archive(self, filename: str, content: bytes = b"") -> Plugin:
        return await self.install_from_package(ArchiveUpload(filename, content))

    async def install_from_repository(self, url: str) -> Plugin:
        return await self.install_from_package(RepositoryReference(url))

    def uninstall(self, plugin_id: str) -> Plugin:
        """Unregister an installed plugin. Built-ins are refused by the registry."""
        plugin = self.registry.unregister(plugin_id)
        self._installed.pop(plugin_id, None)
        return plugin

    def loaded_plugin_ids(self) -> List[str]:
        """Ids installed by this installer that are still registered."""
        return [pid for pid in self._installed if self.registry.has(pid)]

    def installation_of(self, plugin_id: str) -> Optional[InstallAttempt]:
        return self._installed.get(plugin_id)

    def history(self) -> List[dict]:
        """Recent installation attempts, newest last."""
        return [attempt.to_dict() for attempt in self.attempts]

    async def _simulate_processing(self, package: ClassifiedPackage) -> None:
        delay = {
            PackageKind.ARCHIVE: ARCHIVE_INSTALL_DELAY,
            PackageKind.SCRIPT: SCRIPT_INSTALL_DELAY,
            PackageKind.REPOSITORY: REPOSITORY_INSTALL_DELAY,
        }[package.kind] * self.delay_scale
        if package.kind == PackageKind.REPOSITORY:
            logger.info(f"Fetching repository {package.owner}/{package.repo} from {package.host}")
        else:
            logger.info(f"Extracting {package.source} ({package.size} bytes)")
        if delay > 0:
            await asyncio.sleep(delay)
