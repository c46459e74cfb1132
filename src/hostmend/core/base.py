"""Base classes shared by configuration and logging models.

Kept apart from config.py and log.py so that both can import it
without a circular dependency.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Anything exposing close()."""

    def close(self) -> None:
        ...


class BaseConfig(BaseModel):
    """Base for configuration sections.

    Closing a section walks its fields and closes every Closeable
    child, so one close() on the root config reaches the logger and
    from there every sink. A failing child does not stop the walk.
    The section is also a context manager.
    """

    def close(self):
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
            try:
                child.close()
            except Exception as e:
                print(
                    f"Warning: error closing {field_name}: {e}",
                    file=sys.stderr,
                )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


__all__ = ["Closeable", "BaseConfig"]
