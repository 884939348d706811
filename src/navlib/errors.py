"""Error types and message formatting for navctl."""

from __future__ import annotations

from typing import Any, Optional


class NavigatorError(Exception):
    """Base class for errors raised by the navigator library."""


class FetchError(NavigatorError):
    """A primary listing fetch failed: bad status or a malformed body."""

    def __init__(self, path: str, status: Optional[int], reason: str) -> None:
        self.path = path
        self.status = status
        self.reason = reason
        super().__init__(reason)


def format_error_message(operation: str, error: Exception, context: dict[str, Any] | None = None) -> str:
    """Format a user-friendly error message based on the exception type and context."""
    error_str = str(error)
    context = context or {}
    status = getattr(error, "status", None)

    # Transport-level failures come back from the gateway as status 0
    if status == 0 or "connection" in error_str.lower() or "timeout" in error_str.lower():
        base_url = context.get("base_url", "the API")
        return (
            f"Failed to connect to {base_url}. "
            f"Please check that the service is reachable. "
            f"Original error: {error_str}"
        )

    if status == 401 or any(word in error_str.lower() for word in ["unauthorized", "forbidden", "credentials"]):
        return (
            f"Authentication failed. Set credentials with 'navctl auth set' and retry. "
            f"Original error: {error_str}"
        )

    if status == 404 or "not found" in error_str.lower():
        path = context.get("path", "path")
        return (
            f"Path '{path}' not found. "
            f"Use 'navctl ls' on the parent to see available children. "
            f"Original error: {error_str}"
        )

    if "unexpected response" in error_str.lower():
        return (
            f"The API returned something that is not a listing. "
            f"Original error: {error_str}"
        )

    # Generic error with helpful context
    return f"Failed to {operation}: {error_str}"


def suggest_troubleshooting_steps(operation: str, error: Exception) -> list[str]:
    """Suggest troubleshooting steps based on the operation and error."""
    error_str = str(error).lower()
    status = getattr(error, "status", None)
    suggestions = []

    if status == 0 or "connection" in error_str or "timeout" in error_str:
        suggestions.extend([
            "Check base_url in your config: navctl config show",
            "Verify the API is reachable: curl <base_url>/",
            "Raise 'timeout' in the config for slow links",
        ])

    elif status == 401 or "unauthorized" in error_str:
        suggestions.extend([
            "Store credentials: navctl auth set --username <user>",
            "Check the stored username is correct",
        ])

    elif status == 404 or "not found" in error_str:
        suggestions.extend([
            "List the parent path: navctl ls <parent>",
            "Check the path spelling; segments are case-sensitive",
        ])

    if not suggestions:
        suggestions.extend([
            "Check the logs with -v/--verbose flag for more details",
            "Verify your configuration file is correct",
            "Clear a stale listing cache with 'navctl cache clear'",
        ])

    return suggestions


def format_config_error(error: Exception) -> str:
    """Format configuration-related error messages."""
    error_str = str(error)

    if "no config file found" in error_str.lower():
        return (
            "No configuration file found. Please either:\n"
            "  • Set NAVCTL_CONFIG=/path/to/config.yaml, or\n"
            "  • Create ~/.config/navctl/config.yaml\n"
            "\n"
            "The file needs at least a 'base_url' entry."
        )

    if "base_url" in error_str.lower():
        return (
            f"Configuration error: {error_str}\n"
            "Add 'base_url: https://host/prefix' to your config file."
        )

    return f"Configuration error: {error_str}"
