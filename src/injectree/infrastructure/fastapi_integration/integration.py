from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

from fastapi import FastAPI

from injectree.domain import IContainer


def create_fastapi_dependency(tree: IContainer, key: str) -> Callable[[], Any]:
    """Create a FastAPI Depends() callable that resolves ``key`` from the tree.

    The resolved instance follows the registration in the tree: singletons
    are shared across requests, other factories are rebuilt on every call.

    Args:
        tree: The dependency tree to resolve from.
        key: The key to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> tree = DependencyTree()
        >>> tree.singleton("errorParser", DefaultErrorParser)
        >>> tree.register("errorPlugin", ErrorPlugin)
        >>>
        >>> get_plugin = create_fastapi_dependency(tree, "errorPlugin")
        >>>
        >>> @app.post("/events")
        >>> async def submit(event: dict, plugin=Depends(get_plugin)):
        ...     return plugin.run(event)
    """

    def dependency() -> Any:
        """Resolve the dependency from the tree."""
        return tree.resolve(key)

    dependency.__name__ = f"resolve_{key}"
    return dependency


def create_tree_lifespan(
    tree: IContainer,
) -> Callable[[FastAPI], Any]:
    """Create a FastAPI lifespan that tears the tree down on shutdown.

    Every cached singleton is destroyed, dependents first, once the
    application stops serving.

    Args:
        tree: The dependency tree owned by the application.

    Returns:
        A lifespan context manager factory for ``FastAPI(lifespan=...)``.

    Example:
        >>> app = FastAPI(lifespan=create_tree_lifespan(tree))
    """

    @asynccontextmanager
    async def lifespan(app: Optional[FastAPI] = None) -> AsyncIterator[None]:
        try:
            yield
        finally:
            tree.destroy()

    return lifespan
