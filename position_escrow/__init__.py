#!filepath: position_escrow/__init__.py

from .utils.logger import Logging, logs, init_logging
from .config.app_config import AppConfig
from .chain import Host, label_address, to_address
from .escrow import Escrow, EscrowFactory, EscrowState, derive_salt

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging", "init_logging",
    "AppConfig",
    "Host", "label_address", "to_address",
    "Escrow", "EscrowFactory", "EscrowState", "derive_salt",
]
