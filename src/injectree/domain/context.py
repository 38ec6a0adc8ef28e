from typing import Any, Callable, List


class ConstructionContext:
    """Mutable object handed to context-style factories.

    Factories set attributes on it the way a constructor populates ``self``
    and may subscribe callbacks that run when the resolved instance is
    destroyed.

    Example:
        >>> def build_plugin(ctx, errorParser):
        ...     ctx.parser = errorParser
        ...     ctx.on_destroy(lambda: print("plugin released"))
        >>> tree.register("plugin", build_plugin, {"kind": "context"})
    """

    def __init__(self, **attributes: Any) -> None:
        self._destroy_callbacks: List[Callable[[], Any]] = []
        for name, value in attributes.items():
            setattr(self, name, value)

    def on_destroy(self, callback: Callable[[], Any]) -> None:
        """Subscribe a callback to the destroy notification."""
        self._destroy_callbacks.append(callback)

    def dispose(self) -> None:
        """Notify subscribers once, then drop them."""
        callbacks, self._destroy_callbacks = self._destroy_callbacks, []
        for callback in callbacks:
            callback()

    def __repr__(self) -> str:
        attributes = ", ".join(f"{name}={value!r}" for name, value in vars(self).items() if not name.startswith("_"))
        return f"ConstructionContext({attributes})"
