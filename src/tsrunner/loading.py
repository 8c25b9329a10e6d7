"""Import test modules and let them register their sets on a runner."""
from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Iterable, List

from tsrunner.core.errors import LoadError

if TYPE_CHECKING:  # pragma: no cover
    from tsrunner.core.runner import TestRunner

log = logging.getLogger(__name__)

REGISTER_HOOK = "register"


def load_module(spec: str) -> ModuleType:
    """Import a module given as a dotted name or as a path to a ``.py`` file."""

    text = spec.strip()
    if not text:
        raise LoadError("Empty module specification provided")
    if text.endswith(".py") or "/" in text or "\\" in text:
        return _load_from_path(Path(text))
    try:
        return importlib.import_module(text)
    except ImportError as exc:
        raise LoadError(f"Unable to import test module '{text}': {exc}") from exc


def _load_from_path(source: Path) -> ModuleType:
    path = source.expanduser().resolve()
    if not path.is_file():
        raise LoadError(f"Test module file not found: {path}")
    module_name = f"tsrunner_sets_{path.stem}_{hash(str(path)) & 0xFFFF:x}"
    if module_name in sys.modules:
        return sys.modules[module_name]
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise LoadError(f"Unable to load module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        del sys.modules[module_name]
        raise
    return module


def register_module(module: ModuleType, runner: "TestRunner") -> None:
    """Call ``module.register(runner)``."""

    register = getattr(module, REGISTER_HOOK, None)
    if not callable(register):
        raise LoadError(f"Module '{module.__name__}' does not define a callable '{REGISTER_HOOK}(runner)'")
    log.debug("Registering test sets from %s", module.__name__)
    register(runner)


def register_all(specs: Iterable[str], runner: "TestRunner") -> List[ModuleType]:
    modules: List[ModuleType] = []
    for spec in specs:
        module = load_module(spec)
        register_module(module, runner)
        modules.append(module)
    return modules
