# Python Imports
import logging
import os
import pathlib
from dataclasses import dataclass, fields
from typing import Optional

import yaml

# Project Imports

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = pathlib.Path(__file__).parent.resolve() / "rpc_config.yaml"
ENV_PREFIX = "SOLANA_RPC_"


@dataclass(frozen=True)
class RpcConfig:
    rpc_url: str = "https://api.mainnet-beta.solana.com"
    timeout: float = 10
    retry_stop_delay: float = 10
    retry_wait: float = 0.5
    max_in_flight: int = 0


def load_config(path: Optional[pathlib.Path] = None) -> RpcConfig:
    path = path or DEFAULT_CONFIG_PATH
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    values = {}
    for field in fields(RpcConfig):
        value = data.get(field.name, field.default)
        env_value = os.getenv(f"{ENV_PREFIX}{field.name.upper().removeprefix('RPC_')}")
        if env_value is not None:
            logger.debug(f"Overriding {field.name} from environment")
            value = env_value
        values[field.name] = field.type(value) if isinstance(field.type, type) else value

    return RpcConfig(**values)
