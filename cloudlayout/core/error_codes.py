"""
Structured error codes for layout and run failures.
Use these keys in results and logs; map to user-facing messages in the CLI.
"""

CONFIGURATION_INVALID = "configuration_invalid"
PARSE_FAILED = "parse_failed"
PLACEMENT_FAILED = "placement_failed"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    CONFIGURATION_INVALID: "Invalid layout options. Check width, height and the size range.",
    PARSE_FAILED: "Could not read the word list. Expected a list of {text, weight} records.",
    PLACEMENT_FAILED: "Some words did not fit. Try a larger surface or a smaller max size.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
