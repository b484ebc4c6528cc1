"""服务容器: 进程启动时构造一次，显式注入存储路径与共享对象

依赖关系（→ 表示依赖）:
  gateway  → repos, backend, locks
  repos    → backend, locks
  settings 独立

同一容器内的 PathLockManager 是进程内唯一的并发保护，
所有请求必须经由同一容器获取 gateway。

用法:
    container = ServiceContainer(config=Config.from_file("configs/default.yml"))
    handle = container.gateway.open(repo_id)
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mygit.core.config import Config
    from mygit.core.locks import PathLockManager
    from mygit.git.backend import VcsBackend
    from mygit.services.gateway import OperationGateway
    from mygit.services.repo_service import RepoService
    from mygit.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(self, config: Config | None = None, backend: VcsBackend | None = None) -> None:
        self._instances: dict[str, object] = {}
        self._init_lock = threading.RLock()
        if config is None:
            from mygit.core.config import get_config
            config = get_config()
        self._config = config
        if backend is not None:
            self._instances["backend"] = backend

    @property
    def config(self) -> Config:
        return self._config

    def _get(self, key: str, factory):  # type: ignore[no-untyped-def]
        with self._init_lock:
            if key not in self._instances:
                self._instances[key] = factory()
            return self._instances[key]

    @property
    def backend(self) -> VcsBackend:
        from mygit.git.backend import GitCliBackend
        return self._get("backend", lambda: GitCliBackend(binary=self._config.git_binary))  # type: ignore[no-any-return]

    @property
    def locks(self) -> PathLockManager:
        from mygit.core.locks import PathLockManager
        return self._get("locks", PathLockManager)  # type: ignore[no-any-return]

    @property
    def repos(self) -> RepoService:
        from mygit.services.repo_service import RepoService
        return self._get("repos", lambda: RepoService(  # type: ignore[no-any-return]
            registry_file=self._config.repos_file, backend=self.backend, locks=self.locks,
        ))

    @property
    def gateway(self) -> OperationGateway:
        from mygit.services.gateway import OperationGateway
        return self._get("gateway", lambda: OperationGateway(  # type: ignore[no-any-return]
            self.repos, self.backend, self.locks,
            protected_branches=self._config.protected_branches,
        ))

    @property
    def settings(self) -> SettingsService:
        from mygit.services.settings_service import SettingsService
        return self._get("settings", lambda: SettingsService(  # type: ignore[no-any-return]
            settings_file=self._config.settings_file,
        ))


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def set_container(container: ServiceContainer) -> None:
    """由入口显式安装容器（Web 启动、测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = container


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
