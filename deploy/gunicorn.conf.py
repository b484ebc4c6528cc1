"""Gunicorn 生产配置

用法:
  MYGIT_CONFIG=configs/default.yml gunicorn --config deploy/gunicorn.conf.py mygit.web.app:app

按仓库路径的读写保护在进程内，只能运行单个 worker，用线程承载并发请求。
"""

import os

# ---------- 网络 ----------
bind = os.getenv("GUNICORN_BIND", "127.0.0.1:3000")

# ---------- 并发 ----------
workers = 1
threads = int(os.getenv("GUNICORN_THREADS", "8"))
worker_class = "gthread"
# clone / push / pull 耗时取决于远程，不设请求超时
timeout = 0
graceful_timeout = 60

# ---------- 日志 ----------
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")


def post_worker_init(worker):
    """worker 内加载配置并安装服务容器，所有请求共享同一个 PathLockManager"""
    from mygit.core.config import init_config
    from mygit.services.container import ServiceContainer, set_container
    from mygit.utils.logger import setup_logging

    setup_logging(
        level=os.getenv("MYGIT_LOG_LEVEL", loglevel),
        json_output=os.getenv("MYGIT_LOG_JSON", "") == "1",
    )
    config = init_config(os.getenv("MYGIT_CONFIG", "configs/default.yml"))
    set_container(ServiceContainer(config=config))
    worker.log.info("mygit 服务容器已就绪: repos_file=%s", config.repos_file)
