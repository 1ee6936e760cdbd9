"""Navigation signal.

A tiny publish/subscribe channel on a single implicit "navigate" topic.
The request pipeline uses it to ask whoever renders the UI to go back to
the login screen, without knowing anything about routing.
"""
from __future__ import annotations

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

NavigateCallback = Callable[[str], None]


class NavigationSignal:
    def __init__(self) -> None:
        self._subscribers: List[NavigateCallback] = []

    def subscribe(self, callback: NavigateCallback) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: NavigateCallback) -> None:
        # removes one registration; bound methods compare equal per (instance, function)
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    def signal_navigate(self, path: str) -> None:
        """Deliver ``path`` to every current subscriber, in registration order.

        Dropped when nobody is listening. A failing subscriber is logged and
        does not prevent the others from being called.
        """
        for cb in list(self._subscribers):
            try:
                cb(path)
            except Exception:
                logger.exception(f"navigation subscriber {cb!r} failed for path {path!r}")

    def clear(self) -> None:
        self._subscribers.clear()

    def __len__(self) -> int:
        return len(self._subscribers)


navigation_signal = NavigationSignal()


def navigate_to(path: str) -> None:
    navigation_signal.signal_navigate(path)


def listen_to_navigation(callback: NavigateCallback) -> None:
    navigation_signal.subscribe(callback)


def remove_navigation_listener(callback: NavigateCallback) -> None:
    navigation_signal.unsubscribe(callback)
