"""
Application configuration loaded from environment variables / .env file.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"

    # NetworkManager CLI
    nmcli_path: str = "nmcli"
    wifi_interface: str = ""  # empty → first wifi device reported by nmcli
    command_timeout: float = 30.0

    # Internet reachability probe used by GET /isonline
    connectivity_url: str = "http://clients3.google.com/generate_204"
    connectivity_timeout: float = 2.0

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
