import os


class Config:
    # Directory for the JSON-file key-value store. Unset keeps saved games in memory.
    STATE_DIR = os.environ.get('DART_SCOREBOARD_STATE_DIR') or None
    LOG_LEVEL = os.environ.get('DART_SCOREBOARD_LOG_LEVEL', 'INFO').upper()
    # Optional: one log file per run is written here when set.
    LOG_DIR = os.environ.get('DART_SCOREBOARD_LOG_DIR') or None
    DEFAULT_GAME_MODE = os.environ.get('DART_SCOREBOARD_DEFAULT_MODE', '501')
