"""服务配置

来源优先级: 环境变量 > YAML 文件 > 内置默认值。
CLI / Web 入口调用 init_config() 一次，ServiceContainer 把配置注入各服务。
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from typing import Any

from mygit.core.exceptions import ConfigError
from mygit.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "configs/default.yml"
DEFAULT_PROTECTED_BRANCHES = ["main", "master", "develop", "dev"]

# 环境变量 → 字段
ENV_OVERRIDES = {
    "MYGIT_REPOS_FILE": "repos_file",
    "MYGIT_SETTINGS_FILE": "settings_file",
    "MYGIT_GIT": "git_binary",
    "MYGIT_HOST": "host",
    "MYGIT_PORT": "port",
}


@dataclass
class Config:
    repos_file: str = "data/repos.yml"
    settings_file: str = "data/settings.yml"

    git_binary: str = "git"
    default_remote: str = "origin"
    protected_branches: list[str] = field(
        default_factory=lambda: list(DEFAULT_PROTECTED_BRANCHES),
    )
    log_max_count: int = 100

    host: str = "127.0.0.1"
    port: int = 3000

    # 文件中不认识的键原样保留
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """加载 YAML 配置；文件不存在时返回默认值"""
        data = load_yaml(path)
        known = {f.name for f in fields(cls)} - {"extra"}
        cfg = cls(**{k: v for k, v in data.items() if k in known})
        cfg.extra = {k: v for k, v in data.items() if k not in known}
        cfg.validate(source=path)
        return cfg

    def apply_env(self, environ: Mapping[str, str] | None = None) -> Config:
        """用 MYGIT_* 环境变量覆盖对应字段"""
        environ = os.environ if environ is None else environ
        for var, name in ENV_OVERRIDES.items():
            value = environ.get(var)
            if not value:
                continue
            if name == "port":
                try:
                    self.port = int(value)
                except ValueError:
                    raise ConfigError(f"{var} 必须是整数: {value!r}") from None
            else:
                setattr(self, name, value)
        return self

    def validate(self, source: str = "<config>") -> None:
        if not isinstance(self.protected_branches, list):
            raise ConfigError(f"protected_branches 必须是列表: {source}")
        if isinstance(self.log_max_count, bool) or not isinstance(self.log_max_count, int) \
                or self.log_max_count < 0:
            raise ConfigError(f"log_max_count 必须是非负整数: {source}")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigError(f"port 必须是整数: {source}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_current: Config | None = None


def get_config() -> Config:
    """当前配置；未初始化时为内置默认值"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件与环境变量初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path).apply_env()
    logger.info("配置已加载: %s (repos_file=%s)", path, _current.repos_file)
    return _current
