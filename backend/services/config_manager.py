"""
Configuration Manager - Handle backend settings persistence
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

DEFAULT_MAX_DESCRIPTION_CHARS = 30000


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None
    _config_file = None

    def __init__(self):
        try:
            # 1. environment variable
            config_dir = os.environ.get("DOCDIFF_CONFIG_DIR")

            # 2. home directory ~/.docdiff
            if not config_dir:
                try:
                    config_dir = os.path.expanduser("~/.docdiff")
                except Exception:
                    config_dir = None

            if config_dir:
                config_path = Path(config_dir)
                try:
                    config_path.mkdir(parents=True, exist_ok=True)
                    self._config_file = config_path / "config.json"
                except OSError as e:
                    print(f"[ConfigManager] Warning: Cannot write to {config_dir}: {e}")
                    self._config_file = None

            # 3. fall back to the temp directory
            if not self._config_file:
                tmp_dir = Path(tempfile.gettempdir()) / "docdiff"
                tmp_dir.mkdir(parents=True, exist_ok=True)
                self._config_file = tmp_dir / "config.json"
                print(f"[ConfigManager] Using temporary config path: {self._config_file}")

        except OSError as e:
            print(f"[ConfigManager] Critical Error in init: {e}")
            self._config_file = Path(tempfile.gettempdir()) / "docdiff_config_fallback.json"

        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Drop the singleton so the next call re-reads the environment"""
        cls._instance = None

    @property
    def config_dir(self) -> Path:
        return self._config_file.parent

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, layered over the defaults"""
        config = self._default_config()
        if self._config_file.exists():
            try:
                with open(self._config_file, encoding="utf-8") as f:
                    stored = json.load(f)
                for key, value in stored.items():
                    if isinstance(value, dict) and isinstance(config.get(key), dict):
                        config[key] = {**config[key], **value}
                    else:
                        config[key] = value
            except (json.JSONDecodeError, OSError, AttributeError) as e:
                print(f"[ConfigManager] Error loading config: {e}")
                config = self._default_config()

        self._apply_env_keys(config)
        return config

    def _apply_env_keys(self, config: dict[str, Any]):
        """Fill missing API keys from the environment"""
        for provider, env_name in (("gemini", "GEMINI_API_KEY"), ("openai", "OPENAI_API_KEY")):
            section = config.setdefault(provider, {})
            if not section.get("apiKey") and os.environ.get(env_name):
                section["apiKey"] = os.environ[env_name]

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "provider": "gemini",
            "gemini": {"apiKey": "", "model": "gemini-2.0-flash"},
            "vllm": {
                "endpoint": "http://localhost:8000",
                "apiKey": "",
                "model": "meta-llama/Llama-2-7b-chat-hf",
            },
            "openai": {"apiKey": "", "model": "gpt-4o-mini"},
            "summary": {"maxChars": DEFAULT_MAX_DESCRIPTION_CHARS},
            "history": {"fileName": "history.json"},
            "server": {"host": "0.0.0.0", "port": 8000},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return self._config.copy()

    def save_config(self, config: dict[str, Any]):
        """Save configuration to file"""
        self._config.update(config)

        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._config_file, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set specific config value"""
        self._config[key] = value
        self.save_config(self._config)

    def history_path(self) -> Path:
        """Location of the persisted comparison history"""
        file_name = self._config.get("history", {}).get("fileName") or "history.json"
        return self.config_dir / file_name

    def max_description_chars(self) -> int:
        """Upper bound on the change description sent for summarization"""
        value = self._config.get("summary", {}).get("maxChars", DEFAULT_MAX_DESCRIPTION_CHARS)
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            return DEFAULT_MAX_DESCRIPTION_CHARS
