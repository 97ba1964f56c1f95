# config/settings.py
import os
import json
import logging
from typing import Dict, Any
from pathlib import Path
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class AzureOpenAIConfig:
    """Azure OpenAI settings"""
    api_key: str
    endpoint: str
    deployment: str
    api_version: str


@dataclass
class DataSourceConfig:
    """Sales data source settings"""
    path: str
    sheet_name: str
    use_mock: bool


@dataclass
class AppConfig:
    """Application settings"""
    log_level: str
    log_file: str
    chat_password: str


class Settings:
    """Configuration manager"""

    def __init__(self, config_path: str = None):
        self._config_path = config_path or self._get_config_path()
        self._config = self._load_config()

        self.azure_openai = self._get_azure_openai_config()
        self.data_source = self._get_data_source_config()
        self.app = self._get_app_config()

        self._setup_logging()

    def _get_config_path(self) -> str:
        """Locate the config file"""
        env_path = os.getenv("SALESDESK_CONFIG_PATH")
        if env_path and os.path.exists(env_path):
            return env_path

        current_dir = Path(__file__).parent
        project_root = current_dir.parent

        possible_paths = [
            current_dir / "config.json",
            project_root / "config" / "config.json",
            Path.cwd() / "config" / "config.json",
            Path.home() / ".salesdesk" / "config.json"
        ]

        for path in possible_paths:
            if path.exists():
                return str(path)

        default_path = project_root / "config" / "config.json"
        logger.warning(f"Config file not found, will use defaults. Expected at: {default_path}")
        return str(default_path)

    def _load_config(self) -> Dict[str, Any]:
        """Load the config file merged over defaults"""
        default_config = {
            "AZURE_OPENAI_API_KEY": "",
            "AZURE_OPENAI_ENDPOINT": "",
            "AZURE_OPENAI_DEPLOYMENT": "",
            "AZURE_OPENAI_API_VERSION": "",
            "SALES_DATA_PATH": "",
            "SALES_SHEET_NAME": "",
            "USE_MOCK_DATA": False,
            "CHAT_PASSWORD": "",
            "LOG_LEVEL": "INFO",
            "LOG_FILE": "logs/salesdesk.log"
        }

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                file_config = json.load(f)
                config = {**default_config, **file_config}
                logger.info(f"Config loaded from {self._config_path}")
                return config
        except FileNotFoundError:
            logger.warning(f"Config file not found at {self._config_path}, using defaults")
            return default_config
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}")
            logger.warning("Using default configuration")
            return default_config
        except OSError as e:
            logger.error(f"Failed to load config: {e}")
            logger.warning("Using default configuration")
            return default_config

    def _get_config_value(self, key: str, default: Any = None) -> Any:
        """Read a config value, environment variables take precedence"""
        env_value = os.getenv(key)
        if env_value:
            return env_value

        # an empty string in the file means "not set"
        if self._config.get(key) not in (None, ""):
            return self._config[key]

        if default is not None:
            return default

        raise ValueError(f"Configuration key '{key}' not found")

    @staticmethod
    def _as_bool(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    def _get_azure_openai_config(self) -> AzureOpenAIConfig:
        """Azure OpenAI section"""
        return AzureOpenAIConfig(
            api_key=self._get_config_value("AZURE_OPENAI_API_KEY", ""),
            endpoint=self._get_config_value("AZURE_OPENAI_ENDPOINT", ""),
            deployment=self._get_config_value("AZURE_OPENAI_DEPLOYMENT", "gpt-4o"),
            api_version=self._get_config_value("AZURE_OPENAI_API_VERSION", "2024-06-01")
        )

    def _get_data_source_config(self) -> DataSourceConfig:
        """Sales data source section"""
        return DataSourceConfig(
            path=self._get_config_value("SALES_DATA_PATH", ""),
            sheet_name=self._get_config_value("SALES_SHEET_NAME", ""),
            use_mock=self._as_bool(self._get_config_value("USE_MOCK_DATA", False))
        )

    def _get_app_config(self) -> AppConfig:
        """Application section"""
        return AppConfig(
            log_level=str(self._get_config_value("LOG_LEVEL", "INFO")).upper(),
            log_file=self._get_config_value("LOG_FILE", "logs/salesdesk.log"),
            chat_password=str(self._get_config_value("CHAT_PASSWORD", ""))
        )

    def _setup_logging(self):
        """Configure root logging"""
        log_file = Path(self.app.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        logging.basicConfig(
            level=getattr(logging, self.app.log_level, logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(log_file, encoding='utf-8'),
                logging.StreamHandler()
            ]
        )

    def has_azure_openai(self) -> bool:
        """Whether Azure OpenAI credentials are configured"""
        return bool(self.azure_openai.api_key and self.azure_openai.endpoint)

    def has_data_file(self) -> bool:
        """Whether a sales data file is configured"""
        return bool(self.data_source.path)


_settings = None


def get_settings() -> Settings:
    """Return the process-wide settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
