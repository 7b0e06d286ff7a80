"""
cancellation.py

Токен кооперативної зупинки для робочого потоку оптимізації.

Записується лише з боку GUI (запит на зупинку), читається движком на
початку кожної ітерації. Побудований на threading.Event, тому запис
видно робочому потоку при наступній перевірці без додаткових блокувань.
"""

from __future__ import annotations

import threading


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Запросити зупинку. Повторний виклик нічого не змінює."""
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled()})"


__all__ = [
    "CancellationToken",
]
