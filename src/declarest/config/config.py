import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from declarest.exceptions import ConfigurationException

ENVIRONMENTS = ("development", "production")
DEFAULT_CONFIG_FILE = "declarest.yaml"


class TransportConfig(BaseModel):
    timeout: float = Field(default=30.0, gt=0)
    verify_tls: bool = True
    follow_redirects: bool = True
    headers: Dict[str, str] = {}


class TelemetryConfig(BaseModel):
    enabled: bool = False
    service_version: str = "1.0.0"


class ClientConfig(BaseModel):
    service_name: str = "declarest"
    log_level: str = "INFO"
    telemetry: TelemetryConfig = TelemetryConfig()
    transport: TransportConfig = TransportConfig()


def get_app_env(env: Optional[str] = None) -> str:
    load_dotenv(find_dotenv(usecwd=True))
    return env or os.getenv("APP_ENV", "production")


def load_config(
    path: Optional[Union[str, Path]] = None, env: Optional[str] = None
) -> ClientConfig:
    """
    Carga la configuración desde YAML.
    Las claves comunes se combinan con la sección del entorno activo (APP_ENV).
    """
    active_env = get_app_env(env)
    path = Path(path or os.getenv("DECLAREST_CONFIG", DEFAULT_CONFIG_FILE))

    if not path.exists():
        return ClientConfig()

    with open(path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}

    env_data = data.get(active_env) or {}

    # Filtrar development/production del diccionario original
    merged = {k: v for k, v in data.items() if k not in ENVIRONMENTS}
    for key, value in env_data.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value

    try:
        return ClientConfig(**merged)
    except ValidationError as e:
        raise ConfigurationException(
            f"Configuración inválida en {path}: {e}", cause=e
        ) from e
