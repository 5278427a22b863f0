from .app_config import AppConfig
from .factory_config import FactoryConfig
from .log_config import LogConfig
from .simulation_config import SimulationConfig

__all__ = ["AppConfig", "FactoryConfig", "LogConfig", "SimulationConfig"]
