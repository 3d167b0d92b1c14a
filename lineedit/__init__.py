"""Line-editor building blocks: edit commands, events, command history, browsing and hints."""

__version__ = "0.1.0"

__all__ = [
    "edit_commands",
    "events",
    "external_printer",
    "history_item",
    "history_base",
    "file_history",
    "history_cursor",
    "sqlite_history",
    "hinter",
]