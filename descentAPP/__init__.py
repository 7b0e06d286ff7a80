"""
descentAPP

Мінімізація функції n змінних, заданої текстом, градієнтним спуском
з адаптивним кроком. Ядро (core) не залежить від GUI.
"""

from .app import OptimizationSession, SessionState, config_for_preset, format_result

__all__ = [
    "OptimizationSession",
    "SessionState",
    "config_for_preset",
    "format_result",
]
