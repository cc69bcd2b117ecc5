"""Settings that change how documents are decoded and encoded.

Settings are scoped with context managers and stored in context variables,
so they apply to the current thread or task only.

```python
from vformat import settings
from vformat.document import Document

with settings.strict_mode():
    Document.from_text(content)  # Raises ParseError on unbalanced BEGIN/END
```
"""

from collections.abc import Generator
import contextlib
import contextvars


_strict_mode = contextvars.ContextVar("strict_mode", default=False)
_output_folding = contextvars.ContextVar("output_folding", default=True)


@contextlib.contextmanager
def strict_mode() -> Generator[None]:
    """Context manager to raise on structural errors instead of recording them."""
    token = _strict_mode.set(True)
    try:
        yield
    finally:
        _strict_mode.reset(token)


def is_strict_mode_enabled() -> bool:
    """Check if strict mode is enabled."""
    return _strict_mode.get()


@contextlib.contextmanager
def output_folding(enabled: bool) -> Generator[None]:
    """Context manager to enable or disable folding of encoded content lines."""
    token = _output_folding.set(enabled)
    try:
        yield
    finally:
        _output_folding.reset(token)


def is_output_folding_enabled() -> bool:
    """Check if encoded content lines are folded at 75 octets."""
    return _output_folding.get()
