"""Internal constants shared across the library."""

USER_AGENT = "pycheckin/1"

#: Seconds a payload stays suppressed after it was admitted.
DEFAULT_SUPPRESSION_WINDOW: float = 2.0

#: Seconds between frame samples (10 frames per second).
DEFAULT_SAMPLE_INTERVAL: float = 0.1

#: Seconds before a roster lookup is classified as failed.
DEFAULT_LOOKUP_TIMEOUT: float = 10.0

DEFAULT_ROSTER_TABLE = "students"
DEFAULT_ROSTER_CODE_COLUMN = "student_code"

# Roster columns used for the display name, in order of preference.
DISPLAY_NAME_COLUMNS: tuple[str, ...] = ("name", "display_name", "full_name")
