"""Application-level security dependencies.

Defines auth dependencies without importing infrastructure.
The actual implementations are injected via FastAPI dependency_overrides in main.py.
"""

from typing import NoReturn


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_current_username() -> str:
    """Get the current authenticated username.

    This stub is overridden in main.py with the JWT (header or cookie)
    implementation.
    """
    _missing_dependency("get_current_username")
