"""Feature router registry and the capabilities endpoint.

The editor UI calls ``GET /capabilities`` once after login and hides the
actions whose router this instance does not mount (for example a
read-only deployment built with ``routers=['auth', 'repos', 'files']``).
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from fastapi import APIRouter

from .. import __version__

RouterFactory = Callable[..., APIRouter]


@dataclass(frozen=True)
class RouterInfo:
    """A mountable feature router."""
    name: str
    factory: RouterFactory
    description: str = ''
    tags: list[str] = field(default_factory=list)

    def describe(self, enabled: bool) -> dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'tags': list(self.tags),
            'enabled': enabled,
        }


class RouterRegistry:
    """Ordered set of feature routers, keyed by name.

    Every factory takes the shared ``AppContext`` and returns an
    ``APIRouter``. Registration order is mount order.
    """

    def __init__(self):
        self._entries: dict[str, RouterInfo] = {}

    def register(
        self,
        name: str,
        factory: RouterFactory,
        description: str = '',
        tags: list[str] | None = None,
    ) -> RouterInfo:
        info = RouterInfo(name, factory, description, tags or [name])
        self._entries[name] = info
        return info

    def get(self, name: str) -> RouterInfo | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[RouterInfo]:
        return iter(list(self._entries.values()))

    def resolve(self, names: list[str] | None) -> list[RouterInfo]:
        """Entries for ``names`` in registry order (all when None).

        Raises:
            ValueError: If a name is not registered
        """
        if names is None:
            return list(self)
        unknown = [n for n in names if n not in self._entries]
        if unknown:
            raise ValueError(f"Unknown router(s): {', '.join(unknown)}")
        return [info for info in self if info.name in names]

    def feature_flags(self, enabled: list[str]) -> dict[str, bool]:
        return {name: name in enabled for name in self._entries}


def create_default_registry() -> RouterRegistry:
    """Registry holding every proxy router, in mount order."""
    from .modules.auth import create_auth_router
    from .modules.branches import create_branch_router
    from .modules.files import create_file_router
    from .modules.git import create_git_router
    from .modules.repos import create_repo_router

    registry = RouterRegistry()
    registry.register('auth', create_auth_router, 'Session login, logout and validation')
    registry.register('repos', create_repo_router, 'List and create repositories')
    registry.register('branches', create_branch_router, 'List, create and switch branches')
    registry.register(
        'files', create_file_router, 'Browse, read, write, delete and search files',
    )
    registry.register('git', create_git_router, 'Status, history, batch commit and pull requests')
    return registry


def create_capabilities_router(enabled: list[str], registry: RouterRegistry) -> APIRouter:
    router = APIRouter(tags=['capabilities'])

    @router.get('/capabilities')
    async def get_capabilities():
        """Which feature routers this instance serves."""
        return {
            'version': __version__,
            'features': registry.feature_flags(enabled),
            'routers': [info.describe(info.name in enabled) for info in registry],
        }

    return router
