from .cli_search import CliSearchFlow, CliSearchSession, CliSearchStep

__all__ = [
    "CliSearchFlow",
    "CliSearchSession",
    "CliSearchStep",
]
