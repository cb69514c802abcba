from typing import Any
from collections.abc import Callable


# Type aliases for Python dictionaries
type ShortcutDraft = dict[str, Any]
type ShortcutPatch = dict[str, Any]
type AppConfig = dict[str, Any]
type Statistics = dict[str, Any]

# Type aliases for callables
type SearchFunction = Callable[[str], list[Any]]
type ResultsListener = Callable[[str, list[Any]], None]
