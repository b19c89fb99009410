"""
A minimal host pipeline for completion handlers.

Handlers are registered under a name and run in registration order. Each
handler receives the request mapping and two continuations: `next_(err=None)`
passes the request on unmodified, `done(err, result)` completes it. When every
handler passes, `done(err, None)` is called.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

Done = Callable[[Optional[Exception], Any], Any]
Handler = Callable[[dict, Callable[..., Any], Done], Any]


class Middleware:
    def __init__(self):
        self._stacks: Dict[str, List[Handler]] = {}

    def register(self, name: str, handler: Handler):
        self._stacks.setdefault(name, []).append(handler)

    def use(self, plugins: Mapping[str, Handler]):
        for name, handler in plugins.items():
            self.register(name, handler)

    def trigger(self, name: str, data: dict, done: Done) -> Any:
        handlers = list(self._stacks.get(name, []))

        def dispatch(index: int):
            if index >= len(handlers):
                return done(None, None)

            def next_(err: Optional[Exception] = None):
                if err is not None:
                    return done(err, None)
                return dispatch(index + 1)

            return handlers[index](data, next_, done)

        return dispatch(0)
