from .create3 import (
    RELAY_BYTECODE,
    RELAY_BYTECODE_HASH,
    RELAY_INIT_CODE,
    Relay,
    deploy,
    predict_address,
)
from .deployer import Deployed, DeterministicDeployer

__all__ = [
    "RELAY_BYTECODE",
    "RELAY_BYTECODE_HASH",
    "RELAY_INIT_CODE",
    "Relay",
    "deploy",
    "predict_address",
    "Deployed",
    "DeterministicDeployer",
]
