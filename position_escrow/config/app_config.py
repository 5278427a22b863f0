#!filepath: position_escrow/config/app_config.py
from __future__ import annotations

import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from .factory_config import FactoryConfig
from .log_config import LogConfig
from .simulation_config import SimulationConfig


def project_root() -> str:
    """
    position_escrow/config/app_config.py → position_escrow/config → position_escrow → project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


def default_config_path() -> str:
    return os.path.join(os.path.dirname(__file__), "base.yml")


class AppConfig(BaseModel):
    log: LogConfig = LogConfig()
    factory: FactoryConfig = FactoryConfig()
    simulation: SimulationConfig = SimulationConfig()

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        YAML config + .env
        - default: position_escrow/config/base.yml
        - FACTORY_OWNER / FACTORY_FEE_BPS from the environment override YAML
        """
        load_dotenv(os.path.join(project_root(), ".env"))

        if path is None:
            path = default_config_path()

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        factory = raw.setdefault("factory", {})
        if os.getenv("FACTORY_OWNER"):
            factory["owner"] = os.getenv("FACTORY_OWNER")
        if os.getenv("FACTORY_FEE_BPS"):
            factory["fee_bps"] = os.getenv("FACTORY_FEE_BPS")

        return cls(**raw)
