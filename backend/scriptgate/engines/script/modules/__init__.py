"""
Helper modules injected into route script namespaces: log, env.
"""

from scriptgate.engines.script.modules.env import make_env_module
from scriptgate.engines.script.modules.log import make_log_module

__all__ = [
    "make_env_module",
    "make_log_module",
]
