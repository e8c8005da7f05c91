"""Feature modules with auto-discovery."""

from importlib import import_module
from importlib.util import find_spec
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    Scans the modules directory for packages that ship a ``routes``
    submodule exposing a ``router`` attribute. Package ``__init__`` files
    only carry metadata so models can be imported without pulling in
    the HTTP layer.

    Returns:
        List of FastAPI routers from discovered modules.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if not path.is_dir() or path.name.startswith("_"):
            continue
        name = f"{__name__}.{path.name}.routes"
        if find_spec(name) is None:
            continue
        module = import_module(name)
        router = getattr(module, "router", None)
        if isinstance(router, APIRouter):
            routers.append(router)
            logger.debug("module_loaded", module=path.name)

    return routers
