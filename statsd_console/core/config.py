from shared.config import BaseServiceConfig

# Address used when none is configured: all interfaces, port 8126
DEFAULT_CONSOLE_ADDR = ":8126"


class Settings(BaseServiceConfig):
    # Listener
    console_addr: str = DEFAULT_CONSOLE_ADDR
    console_listen_backlog: int = 100

    # Sessions
    console_prompt: str = "console> "
    console_max_line_bytes: int = 65536  # longer lines close the session

    # Metrics endpoint
    metrics_enabled: bool = True
    metrics_port: int = 9126

    otel_service_name: str = "console"


settings = Settings()
