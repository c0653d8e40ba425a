# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Local data (storage file, logs) lives under TASKDECK_DATA_DIR, which should stay gitignored.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKDECK_APP_NAME": "App display name, used as the console prompt (default: taskdeck).",
    "TASKDECK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Shell
    "TASKDECK_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Storage
    "TASKDECK_DATA_DIR": "Local data directory (default: .local/taskdeck).",
    "TASKDECK_STORAGE_BACKEND": "memory | json | sqlite (default: json).",
    "TASKDECK_STORAGE_PATH": "Store file (default: <data_dir>/storage.json or storage.sqlite3).",
    # Simulated sign-in latency
    "TASKDECK_AUTH_DELAY_SECONDS": "Email login/register delay in seconds (default: 1.0).",
    "TASKDECK_SOCIAL_AUTH_DELAY_SECONDS": "Google/Facebook demo sign-in delay in seconds (default: 1.5).",
}
