"""Configuration management for the travel assistant client."""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

BACKEND_URL_ENV = "TRAVEL_BACKEND_URL"


class Configuration:
    """Manages configuration and environment variables for the client."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables."""
        self.load_env()  # Load .env for the backend URL
        self._config = self._load_yaml_config(config_path)

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    def _load_yaml_config(self, config_path: str | None) -> dict[str, Any]:
        """Load configuration from YAML file."""
        if config_path is None:
            config_path = os.path.join(os.path.dirname(__file__), "config.yaml")
        with open(config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    @property
    def backend_url(self) -> str:
        """Get the base URL of the managed backend.

        Returns:
            The URL without a trailing slash.

        Raises:
            ValueError: If the URL is not set in environment variables.
        """
        url = os.getenv(BACKEND_URL_ENV)
        if not url:
            raise ValueError(
                f"Backend URL '{BACKEND_URL_ENV}' not found in environment variables"
            )
        return url.rstrip("/")

    def get_chat_config(self) -> dict[str, Any]:
        """Get chat function configuration from YAML.

        Raises:
            ValueError: If the endpoint is not configured.
        """
        chat_config = self._config.get("chat", {})
        if not chat_config.get("endpoint"):
            raise ValueError(
                "chat.endpoint must be explicitly configured in config.yaml"
            )
        return chat_config

    def get_itinerary_config(self) -> dict[str, Any]:
        """Get itinerary function configuration from YAML.

        Raises:
            ValueError: If the endpoint is not configured.
        """
        itinerary_config = self._config.get("itinerary", {})
        if not itinerary_config.get("endpoint"):
            raise ValueError(
                "itinerary.endpoint must be explicitly configured in config.yaml"
            )
        return itinerary_config

    def get_http_client_config(self) -> dict[str, Any]:
        """Get HTTP client configuration.

        Returns:
            HTTP client configuration dictionary with validated values.

        Raises:
            ValueError: If required timeouts are missing or not positive.
        """
        http_config = self._config.get("http_client", {})

        required_keys = [
            "connect_timeout", "read_timeout", "write_timeout", "pool_timeout"
        ]
        for key in required_keys:
            if key not in http_config:
                raise ValueError(
                    f"http_client.{key} must be explicitly configured in config.yaml"
                )
            value = http_config[key]
            if not isinstance(value, int | float) or value <= 0:
                raise ValueError(f"http_client.{key} must be a positive number")

        return http_config

    def get_payments_config(self) -> dict[str, Any]:
        """Get UPI payment link configuration.

        Raises:
            ValueError: If a required payment field is missing.
        """
        payments_config = self._config.get("payments", {})
        for key in ["upi_id", "payee_name", "note", "currency"]:
            if not payments_config.get(key):
                raise ValueError(
                    f"payments.{key} must be explicitly configured in config.yaml"
                )
        return payments_config

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML."""
        return self._config.get("logging", {})
