#!/usr/bin/env python3
"""Plugin management CLI tool."""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Ensure project root is in path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from plugin_host.constants import BUILTIN_PLUGINS, OPTIONAL_BUILTIN_PLUGINS, PLUGIN_PREFERENCES_FILE
from plugin_host.plugins.discovery import PluginDiscovery
from plugin_host.plugins.manager import PluginManager

console = Console()


def get_manager() -> PluginManager:
    """Create a PluginManager with the built-in plugins loaded."""
    manager = PluginManager(preferences_file=PLUGIN_PREFERENCES_FILE)
    manager.load_all()
    return manager


def cmd_list(args):
    """List all built-in plugins."""
    manager = get_manager()
    plugins = manager.list_plugins()

    if not plugins:
        print("No plugins found.")
        return

    table = Table(title="Plugins")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Capability", style="magenta")
    table.add_column("Enabled")
    table.add_column("Version")

    for p in plugins:
        enabled = "[green]Yes[/green]" if p["enabled"] else "[red]No[/red]"
        table.add_row(p["id"], p["name"], p["capability"], enabled, p["version"] or "-")

    console.print(table)


def cmd_info(args):
    """Show detailed plugin information."""
    manager = get_manager()
    info = manager.get_plugin_info(args.plugin_id)
    if not info:
        print(f"Plugin '{args.plugin_id}' not found.")
        sys.exit(1)

    console.print(Panel(
        f"[cyan]Name:[/cyan]        {info['name']}\n"
        f"[cyan]Version:[/cyan]     {info['version']}\n"
        f"[cyan]Author:[/cyan]      {info['author']}\n"
        f"[cyan]Description:[/cyan] {info['description']}\n"
        f"[cyan]Built-in:[/cyan]    {info['builtin']}\n"
        f"[cyan]Enabled:[/cyan]     {info['enabled']}",
        title=f"Plugin: {info['id']}",
        border_style="blue"
    ))
    console.print_json(data=info["declaration"])


def cmd_enable(args):
    """Enable a plugin."""
    manager = get_manager()
    if not manager.registry.has(args.plugin_id):
        print(f"Plugin '{args.plugin_id}' not found.")
        sys.exit(1)

    manager.enable_plugin(args.plugin_id)
    print(f"Plugin '{args.plugin_id}' enabled. New sessions will expose it to the model.")


def cmd_disable(args):
    """Disable a plugin."""
    manager = get_manager()
    if not manager.registry.has(args.plugin_id):
        print(f"Plugin '{args.plugin_id}' not found.")
        sys.exit(1)

    manager.disable_plugin(args.plugin_id)
    print(f"Plugin '{args.plugin_id}' disabled. New sessions will tell the model it is unavailable.")


def cmd_config(args):
    """Print the live model configuration for the current preferences."""
    manager = get_manager()
    print(json.dumps(manager.live_config(), indent=2, ensure_ascii=False))


def cmd_doctor(args):
    """Run health checks on the plugin system."""
    issues = []

    # Check preferences file
    if PLUGIN_PREFERENCES_FILE.exists():
        try:
            with open(PLUGIN_PREFERENCES_FILE) as f:
                data = json.load(f)
            if not isinstance(data.get("enabled", {}), dict):
                issues.append(f"Preferences file 'enabled' must be an object: {PLUGIN_PREFERENCES_FILE}")
        except json.JSONDecodeError as e:
            issues.append(f"Preferences file has invalid JSON: {e}")

    # Check built-in entry points
    discovery = PluginDiscovery(BUILTIN_PLUGINS, OPTIONAL_BUILTIN_PLUGINS)
    for entry_point in BUILTIN_PLUGINS:
        if discovery.discover_single(entry_point) is None and entry_point not in OPTIONAL_BUILTIN_PLUGINS:
            issues.append(f"Built-in plugin failed to load: {entry_point}")

    manager = get_manager()

    # Check for stored preferences of plugins that don't exist
    known = set(manager.registry.ids())
    for pid in manager.preferences.stored_ids():
        if pid not in known:
            issues.append(f"Preference stored for unknown plugin '{pid}'")

    # Shared capability names are broadcast to every enabled plugin
    seen = {}
    for plugin in manager.registry.list():
        if plugin.capability in seen:
            issues.append(
                f"Capability '{plugin.capability}' declared by both "
                f"'{seen[plugin.capability]}' and '{plugin.id}'"
            )
        seen.setdefault(plugin.capability, plugin.id)

    valid, error = manager.config_service.get_current_config().validate()
    if not valid:
        issues.append(f"Live model config: {error}")

    if issues:
        print(f"Found {len(issues)} issue(s):")
        for i, issue in enumerate(issues, 1):
            print(f"  {i}. {issue}")
        sys.exit(1)
    else:
        enabled = sum(1 for v in manager.plugin_states().values() if v)
        print(f"All checks passed. {manager.registry.count()} plugin(s) found, {enabled} enabled.")


def main():
    parser = argparse.ArgumentParser(description="Plugin Host Plugin Manager")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    subparsers.add_parser("list", help="List all plugins")

    # info
    info_parser = subparsers.add_parser("info", help="Show plugin details")
    info_parser.add_argument("plugin_id", help="Plugin ID")

    # enable
    enable_parser = subparsers.add_parser("enable", help="Enable a plugin")
    enable_parser.add_argument("plugin_id", help="Plugin ID")

    # disable
    disable_parser = subparsers.add_parser("disable", help="Disable a plugin")
    disable_parser.add_argument("plugin_id", help="Plugin ID")

    # config
    subparsers.add_parser("config", help="Print the live model configuration")

    # doctor
    subparsers.add_parser("doctor", help="Run health checks")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "enable": cmd_enable,
        "disable": cmd_disable,
        "config": cmd_config,
        "doctor": cmd_doctor,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
