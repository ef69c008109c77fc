"""ClientConfig -- 客户端配置加载

从环境变量加载连接参数，API token 以 SecretStr 保存，不会出现在 repr 和日志中。
"""

import os

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_S = 30.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ClientConfig(BaseModel):
    """客户端配置 -- 从环境变量加载

    环境变量:
        EVENTSOURCINGDB_URL: 服务端 base URL（默认 http://localhost:3000）
        EVENTSOURCINGDB_API_TOKEN: API token
        EVENTSOURCINGDB_TIMEOUT_S: 请求超时（秒，默认 30）
        EVENTSOURCINGDB_VALIDATE_SERVER_HEADER: 是否校验 Server 头（默认 false）
    """

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="EventSourcingDB 服务端 base URL",
    )
    api_token: SecretStr = Field(
        default=SecretStr(""),
        description="API token，以 Bearer 方式发送",
    )
    timeout_s: float = Field(
        default=DEFAULT_TIMEOUT_S,
        gt=0,
        description="单次请求超时（秒）；observe 流只作用于连接阶段",
    )
    validate_server_header: bool = Field(
        default=False,
        description="是否要求响应的 Server 头以 EventSourcingDB/ 开头",
    )


def _parse_bool(env_var: str, value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    log.warning("invalid_bool_config", env_var=env_var, value=value, fallback=False)
    return None


def load_client_config() -> ClientConfig:
    """从环境变量加载客户端配置

    环境变量映射:
        EVENTSOURCINGDB_URL -> base_url (默认 "http://localhost:3000")
        EVENTSOURCINGDB_API_TOKEN -> api_token (默认 "")
        EVENTSOURCINGDB_TIMEOUT_S -> timeout_s (默认 30)
        EVENTSOURCINGDB_VALIDATE_SERVER_HEADER -> validate_server_header (默认 False)

    非法值记录 warning 并回退到默认值。

    Returns:
        ClientConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("EVENTSOURCINGDB_URL"):
        kwargs["base_url"] = val

    if val := os.environ.get("EVENTSOURCINGDB_API_TOKEN"):
        kwargs["api_token"] = SecretStr(val)

    if val := os.environ.get("EVENTSOURCINGDB_TIMEOUT_S"):
        try:
            timeout_s = float(val)
        except ValueError:
            timeout_s = None
        if timeout_s is not None and timeout_s > 0:
            kwargs["timeout_s"] = timeout_s
        else:
            log.warning(
                "invalid_timeout_config",
                env_var="EVENTSOURCINGDB_TIMEOUT_S",
                value=val,
                fallback=DEFAULT_TIMEOUT_S,
            )

    if val := os.environ.get("EVENTSOURCINGDB_VALIDATE_SERVER_HEADER"):
        parsed = _parse_bool("EVENTSOURCINGDB_VALIDATE_SERVER_HEADER", val)
        if parsed is not None:
            kwargs["validate_server_header"] = parsed

    return ClientConfig(**kwargs)
