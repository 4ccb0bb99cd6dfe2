from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Mapping, Optional


Action = Dict[str, Any]
Reducer = Callable[[Any, Action], Any]

INIT = "@@INIT"


def combine_reducers(reducers: Mapping[str, Reducer]) -> Reducer:
    """One reducer per slice -> a reducer over {slice_name: slice_state}."""
    slices = dict(reducers)

    def root(state: Optional[Dict[str, Any]], action: Action) -> Dict[str, Any]:
        state = state or {}
        next_state: Dict[str, Any] = {}
        changed = False
        for key, reducer in slices.items():
            prev = state.get(key)
            nxt = reducer(prev, action)
            next_state[key] = nxt
            changed = changed or nxt is not prev
        return next_state if changed or set(state) != set(next_state) else state

    return root


class Store:
    """State container updated only by the reducer.

    `dispatch` accepts a plain action dict, or a callable
    `(dispatch, get_state, extra)` for work that talks to the API first.
    Subscribers run after every plain action, outside the lock.
    """

    def __init__(self, reducer: Reducer, initial_state: Any = None, *, extra: Any = None):
        self._reducer = reducer
        self._lock = threading.RLock()
        self._listeners: List[Callable[[], None]] = []
        self._state = reducer(initial_state, {"type": INIT})
        self.extra = extra

    def get_state(self) -> Any:
        with self._lock:
            return self._state

    def dispatch(self, action: Any) -> Any:
        if callable(action):
            return action(self.dispatch, self.get_state, self.extra)
        if not isinstance(action, dict) or "type" not in action:
            raise ValueError("actions must be dicts with a 'type' key")

        with self._lock:
            self._state = self._reducer(self._state, action)
            listeners = list(self._listeners)
        for listener in listeners:
            listener()
        return action

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
