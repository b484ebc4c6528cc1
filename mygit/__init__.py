"""mygit - 本地 Git 仓库管理服务"""

__version__ = "0.1.0"
