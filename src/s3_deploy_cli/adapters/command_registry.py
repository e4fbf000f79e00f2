# src/s3_deploy_cli/adapters/command_registry.py
"""
Registry for deploy commands.
Maps each command to its lifecycle events, and each "<command>:<event>"
hook to the DeployOrchestrator method that handles it.
"""

# Map of command name -> usage and ordered lifecycle events
COMMANDS: dict[str, dict] = {
    "syncToS3": {
        "usage": "Deploys the build directory to your bucket",
        "lifecycle_events": ["sync"],
    },
    "wipeS3": {
        "usage": "Removes every object from your bucket",
        "lifecycle_events": ["wipe"],
    },
    "domainInfo": {
        "usage": "Fetches and prints out the deployed CloudFront domain names",
        "lifecycle_events": ["domainInfo"],
    },
    "invalidateCache": {
        "usage": "Creates new invalidation in CloudFront",
        "lifecycle_events": ["invalidate"],
    },
}

# Map of hook -> DeployOrchestrator method name
HOOKS: dict[str, str] = {
    "syncToS3:sync": "sync_directory",
    "wipeS3:wipe": "wipe_bucket",
    "domainInfo:domainInfo": "domain_info",
    "invalidateCache:invalidate": "invalidate_cache",
}


def get_hook(hook: str) -> str:
    """Returns the handler method name for a '<command>:<event>' hook."""
    handler = HOOKS.get(hook)
    if not handler:
        raise ValueError(f"Unknown hook: {hook}. Available: {list(HOOKS.keys())}")
    return handler


def hooks_for(command: str) -> list[str]:
    """Returns the '<command>:<event>' hooks for a command, in lifecycle order."""
    entry = COMMANDS.get(command)
    if not entry:
        raise ValueError(f"Unknown command: {command}. Available: {list_commands()}")
    return [f"{command}:{event}" for event in entry["lifecycle_events"]]


def list_commands() -> list[str]:
    """Returns the list of registered command names."""
    return list(COMMANDS.keys())
