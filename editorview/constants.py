"""Constants and configuration for the editorview engine."""


class EditorConstants:
    """Central configuration constants for the editor."""

    # Editing
    TAB_WIDTH = 4  # Tab inserts spaces up to the next multiple of this
    UNDO_LIMIT = 500  # Oldest undo entries are dropped beyond this

    # Colors (24-bit RGB)
    DEFAULT_FOREGROUND = 0x000000
    DEFAULT_BACKGROUND = 0xFFFFFF

    # Keys
    QUIT_KEY = 'q'  # Ctrl-Q ends the session

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Logging
    LOG_FILE_ENV = "EDITORVIEW_LOG"  # Names a file that receives debug logs
