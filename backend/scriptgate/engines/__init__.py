"""
Engines: the RestrictedPython script engine used by route scripts and the route configuration.
"""

from scriptgate.engines.script import ScriptEnvironment

__all__ = ["ScriptEnvironment"]
