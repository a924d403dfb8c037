"""Default configuration values."""

DEFAULT_SETTINGS_YAML = """
color: true
log_level: WARNING
search_path: []
"""

# Directories searched for rule files after the XDG ones, in order
GRC_SHARE_DIRS = (
    "/usr/local/share/grc",
    "/usr/share/grc",
)
