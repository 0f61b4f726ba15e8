# --------------------------------------------------------------
# File: config.py
# Description: Carga de la configuración de instancias PrivateBin (.env + JSON).
# --------------------------------------------------------------
"""Configuración del cliente.

Las variables de entorno (o un fichero `.env`) indican dónde está el fichero
JSON de configuración y qué instancia usar por defecto. El JSON define una
lista de instancias (`bin`) que heredan los valores globales que no fijan.
"""

import json
import os
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from privatebin.errors import ConfigError
from privatebin.models import PasteOptions

load_dotenv()

CONFIG_PATH = os.getenv(
    "PRIVATEBIN_CONFIG",
    os.path.join(os.path.expanduser("~"), ".config", "privatebin", "config.json"),
)
DEFAULT_BIN = os.getenv("PRIVATEBIN_BIN", "")
REQUEST_TIMEOUT = float(os.getenv("PRIVATEBIN_TIMEOUT", "30"))

DEFAULT_USER_AGENT = "privatebin-py (+https://github.com/PrivateBin/PrivateBin)"


class AuthConfig(BaseModel):
    username: str = ""
    password: str = ""


class BinConfig(BaseModel):
    """Instancia PrivateBin; los campos `None` se heredan de la configuración global."""

    name: str
    host: str
    auth: AuthConfig = Field(default_factory=AuthConfig)
    expire: Optional[str] = None
    formatter: Optional[str] = None
    open_discussion: Optional[bool] = None
    burn_after_reading: Optional[bool] = None
    gzip: Optional[bool] = None
    user_agent: Optional[str] = None
    extra_header_fields: Dict[str, str] = Field(default_factory=dict)
    proxy: Optional[str] = None
    insecure_skip_verify: bool = False

    def paste_options(self, password: str = "") -> PasteOptions:
        """Convierte la instancia en opciones de creación de paste.

        Los campos sin valor (instancia no resuelta con `load_config`) toman el
        valor por defecto de `PasteOptions`.
        """

        values = {
            "expire": self.expire,
            "formatter": self.formatter,
            "open_discussion": self.open_discussion,
            "burn_after_reading": self.burn_after_reading,
            "compress": self.gzip,
        }
        return PasteOptions(
            password=password,
            **{name: value for name, value in values.items() if value is not None},
        )


class Config(BaseModel):
    bin: List[BinConfig] = Field(default_factory=list)
    expire: str = "1day"
    formatter: str = "plaintext"
    open_discussion: bool = False
    burn_after_reading: bool = False
    gzip: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    def find_bin(self, name: str = "") -> BinConfig:
        """Busca una instancia por nombre; sin nombre, solo vale si hay una única.

        Raises:
            ConfigError: Si no existe la instancia pedida.
        """

        if not name and len(self.bin) == 1:
            return self.bin[0]
        for bin_cfg in self.bin:
            if bin_cfg.name == name:
                return bin_cfg
        raise ConfigError(f"no se encuentra la configuración de la instancia {name!r}")


def _inherit_defaults(cfg: Config) -> Config:
    resolved = []
    for bin_cfg in cfg.bin:
        updates = {
            field: getattr(cfg, field)
            for field in ("expire", "formatter", "open_discussion", "burn_after_reading", "gzip", "user_agent")
            if getattr(bin_cfg, field) is None
        }
        resolved.append(bin_cfg.model_copy(update=updates))
    return cfg.model_copy(update={"bin": resolved})


def load_config(path: Optional[str] = None) -> Config:
    """Lee el fichero JSON de configuración y resuelve la herencia de valores.

    Args:
        path (Optional[str]): Ruta del fichero; por defecto `PRIVATEBIN_CONFIG`.

    Returns:
        Config: Configuración con cada instancia completamente resuelta.

    Raises:
        ConfigError: Si el fichero no existe, no es JSON o no cumple el esquema.

    """

    path = path or CONFIG_PATH
    try:
        with open(path, "r", encoding="utf-8") as handler:
            raw = json.load(handler)
    except FileNotFoundError as exc:
        raise ConfigError(f"no se encuentra el fichero de configuración {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"no se puede leer el fichero de configuración {path}: {exc}") from exc

    try:
        cfg = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"configuración inválida en {path}: {exc}") from exc
    return _inherit_defaults(cfg)
