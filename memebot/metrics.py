from prometheus_client import Counter, Histogram

# Webhook updates by classification (inline, photo, command, text, ignored).
UPDATE_TOTAL = Counter(
    "telegram_updates_total",
    "Total number of Telegram updates processed",
    ["type"],
)

# Command usage counts by command name.
COMMAND_TOTAL = Counter(
    "telegram_commands_total",
    "Total number of Telegram commands processed",
    ["command"],
)

# Backend call latency in seconds, per endpoint path.
BACKEND_LATENCY = Histogram(
    "backend_request_latency_seconds",
    "Time spent waiting for the memestorage backend",
    ["endpoint"],
)

# Backend failures (not_connected, transport, unexpected_status, bad_body).
BACKEND_ERRORS = Counter(
    "backend_request_errors_total",
    "Total number of failed memestorage backend calls",
    ["endpoint", "type"],
)

# Telegram sends that had to fall back to a lower-fidelity primitive.
SEND_FALLBACKS = Counter(
    "telegram_send_fallbacks_total",
    "Total number of Telegram send fallbacks",
    ["primitive"],
)
