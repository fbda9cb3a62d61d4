"""Built-in configuration used when config.json is missing or partial.

Kept separate from settings.py so the config panel can start from defaults
even when the current config.json cannot be parsed.
"""

from core.patterns import DEFAULT_PATTERNS

DEFAULT_CONFIG: dict = {
    "monitor": {
        "log_path": "/var/log/auth.log",
        "check_interval": 2,
        "detect_replacement": False,
        "patterns": list(DEFAULT_PATTERNS),
    },
    # 0 disables the limit: every distinct line alerts once per process.
    "dedup": {
        "ttl_hours": 0,
        "max_entries": 0,
    },
    "camera": {
        "enabled": True,
        "device": 0,
        "save_dir": "/tmp/security_captures",
        "stealth_mode": True,
        "timeout_seconds": 3,
    },
    "notifications": {
        "notification_method": "bot",
        "lifecycle_notices": True,
    },
    "logging": {
        "enabled": True,
        "level": "INFO",
        "console": True,
        "file": {"enabled": False, "path": "logs/loginwatch.log"},
        "redact": {"enabled": True, "patterns": ["BOT_API", "API_HASH"]},
    },
    "require_root": True,
}
