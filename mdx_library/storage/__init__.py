"""Storage locations for mdx_library.

Public Interface:
    - get_home_dir: Get MDXBUILD_HOME
    - get_config_dir: Get config directory
    - get_log_dir: Get log directory
"""

from .paths import get_config_dir
from .paths import get_home_dir
from .paths import get_log_dir

__all__ = [
    "get_home_dir",
    "get_config_dir",
    "get_log_dir",
]
