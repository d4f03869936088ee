"""
User-Friendly Error Handler.

Converts capture failures into short messages with actionable suggestions for
the command-line tools.
"""

from typing import Dict, Optional
import logging

from .exceptions import CaptureError, ConfigError, GeometryError, StitchError

logger = logging.getLogger(__name__)


def format_user_friendly_error(
    error: Exception,
    context: str = "general",
    technical_details: Optional[str] = None
) -> Dict:
    """
    Convert technical error to user-friendly message.

    Args:
        error: The exception that occurred
        context: Where the error occurred (e.g., "capture", "batch")
        technical_details: Additional technical information

    Returns:
        Dictionary with user-friendly error information:
        {
            "message": str,          # User-friendly message
            "suggestion": str,       # Actionable suggestion
            "technical": str,        # Technical details
            "severity": str,         # "critical", "error", "warning"
            "can_retry": bool        # Whether retry might help
        }
    """
    error_str = str(error)

    # Our own exceptions first, they are more precise than text matching
    for error_type, friendly_error in TYPE_MAPPINGS:
        if isinstance(error, error_type):
            result = friendly_error.copy()
            result["technical"] = technical_details or error_str
            return result

    for pattern, friendly_error in ERROR_MAPPINGS.items():
        if pattern.lower() in error_str.lower():
            result = friendly_error.copy()
            result["technical"] = technical_details or error_str
            logger.debug(f"Mapped error to user-friendly: {result['message']}")
            return result

    return {
        "message": "Unexpected error while taking the screenshot",
        "suggestion": "Re-run with --verbose and check the log output",
        "technical": technical_details or error_str,
        "severity": "error",
        "can_retry": True
    }


TYPE_MAPPINGS = [
    (GeometryError, {
        "message": "The scrollable region disappeared or changed size during capture",
        "suggestion": "Increase --wait-ms so the page finishes loading before capture",
        "severity": "error",
        "can_retry": True
    }),
    (CaptureError, {
        "message": "The browser failed to take a screenshot",
        "suggestion": "Try again; if it keeps failing lower --width/--height",
        "severity": "error",
        "can_retry": True
    }),
    (StitchError, {
        "message": "Captured tiles could not be combined",
        "suggestion": "Try again with --stitch false to take a plain full-page screenshot",
        "severity": "error",
        "can_retry": False
    }),
    (ConfigError, {
        "message": "The capture configuration is invalid",
        "suggestion": "Check the YAML file and the target names",
        "severity": "critical",
        "can_retry": False
    }),
]


# Error mappings: pattern -> user-friendly info
ERROR_MAPPINGS = {
    # Browser setup
    "executable doesn't exist": {
        "message": "No Chrome, Edge or Chromium browser was found",
        "suggestion": "Install Google Chrome, pass --chrome-path, or run: playwright install chromium",
        "severity": "critical",
        "can_retry": False
    },
    "processsingleton": {
        "message": "The browser profile is already in use",
        "suggestion": "Close other browsers using the same --user-data-dir",
        "severity": "critical",
        "can_retry": False
    },

    # Network/timeout errors
    "timeout": {
        "message": "The page took too long to respond",
        "suggestion": "Check the URL is reachable or raise --timeout-ms",
        "severity": "warning",
        "can_retry": True
    },
    "err_name_not_resolved": {
        "message": "The host name could not be resolved",
        "suggestion": "Check the URL for typos",
        "severity": "error",
        "can_retry": False
    },
    "connection refused": {
        "message": "Cannot connect to the page",
        "suggestion": "Check the URL is correct and the server is running",
        "severity": "error",
        "can_retry": True
    },

    # Browser/page errors
    "target closed": {
        "message": "The browser closed during the capture",
        "suggestion": "Run the capture again",
        "severity": "error",
        "can_retry": True
    },

    # Filesystem
    "permission denied": {
        "message": "Cannot write the output file",
        "suggestion": "Check permissions on the output directory",
        "severity": "error",
        "can_retry": False
    },
}


def get_error_category(error: Exception) -> str:
    """
    Categorize error type.

    Returns:
        Category name: "geometry", "capture", "config", "network", "browser", "unknown"
    """
    if isinstance(error, GeometryError):
        return "geometry"
    if isinstance(error, (CaptureError, StitchError)):
        return "capture"
    if isinstance(error, ConfigError):
        return "config"

    error_str = str(error).lower()
    if any(k in error_str for k in ["timeout", "connection", "network", "err_name"]):
        return "network"
    elif any(k in error_str for k in ["browser", "target", "executable"]):
        return "browser"
    return "unknown"


def format_error_for_logging(error: Exception, context: str = "") -> str:
    """
    Format error for CLI output.

    Args:
        error: The exception
        context: Additional context

    Returns:
        Multi-line message: what happened, what to try, technical detail
    """
    friendly = format_user_friendly_error(error, context)

    lines = [
        f"❌ {friendly['message']}",
        f"💡 {friendly['suggestion']}",
        f"🔧 Technical: {friendly['technical']}"
    ]

    if context:
        lines.insert(0, f"📍 Context: {context}")

    return "\n".join(lines)
