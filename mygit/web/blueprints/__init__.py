"""Web 路由 Blueprint 集合

- repos_bp.py: 仓库注册表 + 按仓库的状态/分支/历史视图 (/api/repos)
- git_bp.py: git 操作 (/api/git，repoId 在 query 或 body 中)
- config_bp.py: 应用设置 (/api/config)
"""

from mygit.web.blueprints.config_bp import config_bp
from mygit.web.blueprints.git_bp import git_bp
from mygit.web.blueprints.repos_bp import repos_bp

__all__ = ["repos_bp", "git_bp", "config_bp"]
