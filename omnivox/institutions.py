"""
Institution registry.

Maps an institution key ("champlain", "maisonneuve", ...) to the session and
adapter classes that know its portal. The pipeline never looks at the key
itself, so adding an institution means registering one more entry here or
listing it in a JSON file:

    {
      "dawson": {
        "name": "Dawson",
        "session": "my_package.dawson:DawsonSession",
        "adapter": "my_package.dawson:DawsonAdapter"
      }
    }
"""

from __future__ import annotations

import importlib
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Type

from omnivox.adapters import ChamplainAdapter, ExtractionAdapter, MaisonneuveAdapter
from omnivox.browser import Browser
from omnivox.errors import UnknownInstitutionError
from omnivox.sessions import ChamplainSession, MaisonneuveSession, NavigationSession


@dataclass(frozen=True)
class Institution:
    key: str
    name: str
    session_cls: Type[NavigationSession]
    adapter_cls: Type[ExtractionAdapter]

    def build(
        self,
        browser: Optional[Browser] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> Tuple[NavigationSession, ExtractionAdapter]:
        """Create a fresh session/adapter pair sharing one clock."""
        return self.session_cls(browser=browser, clock=clock), self.adapter_cls(clock=clock)


def _import_object(path: str) -> type:
    """Resolve 'package.module:Name'."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:Class', got {path!r}")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ValueError(f"{module_name} has no attribute {attr!r}") from exc


class InstitutionRegistry:
    def __init__(self) -> None:
        self._entries: Dict[str, Institution] = {}

    def register(self, institution: Institution) -> None:
        self._entries[institution.key.strip().lower()] = institution

    def get(self, key: str) -> Institution:
        entry = self._entries.get(key.strip().lower())
        if entry is None:
            raise UnknownInstitutionError(key, self.keys())
        return entry

    def keys(self) -> List[str]:
        return sorted(self._entries)

    def __contains__(self, key: str) -> bool:
        return key.strip().lower() in self._entries

    def load_file(self, path: str | Path) -> List[Institution]:
        """
        Register every institution listed in a JSON file.

        Raises ValueError for malformed entries, OSError / JSONDecodeError
        when the file itself cannot be read.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object of institutions")

        added: List[Institution] = []
        for key, entry in data.items():
            if not isinstance(entry, dict) or "session" not in entry or "adapter" not in entry:
                raise ValueError(f"{path}: entry {key!r} needs 'session' and 'adapter'")

            session_cls = _import_object(entry["session"])
            adapter_cls = _import_object(entry["adapter"])
            if not (isinstance(session_cls, type) and issubclass(session_cls, NavigationSession)):
                raise ValueError(f"{entry['session']} is not a NavigationSession")
            if not (isinstance(adapter_cls, type) and issubclass(adapter_cls, ExtractionAdapter)):
                raise ValueError(f"{entry['adapter']} is not an ExtractionAdapter")

            institution = Institution(
                key=key,
                name=str(entry.get("name") or key),
                session_cls=session_cls,
                adapter_cls=adapter_cls,
            )
            self.register(institution)
            added.append(institution)
        return added


def default_registry() -> InstitutionRegistry:
    """Registry with the built-in institutions."""
    registry = InstitutionRegistry()
    registry.register(Institution("champlain", "Champlain", ChamplainSession, ChamplainAdapter))
    registry.register(Institution("maisonneuve", "Maisonneuve", MaisonneuveSession, MaisonneuveAdapter))
    return registry
