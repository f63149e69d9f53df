"""Build hooks and register plugin taps from a YAML manifest."""

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from hookforge.core.types import HookError, TapType
from hookforge.hooks.hook import Hook
from hookforge.hooks.kinds import get_hook_kind
from hookforge.manifest.validator import (
    ManifestIssue,
    load_manifest_yaml,
    validate_manifest_data,
)

logger = logging.getLogger(__name__)

_TAP_FIELDS = ("hook", "type", "callback")


class ManifestError(HookError, ValueError):
    """A manifest could not be loaded."""

    def __init__(self, issues: list[ManifestIssue]):
        self.issues = issues
        super().__init__("\n".join(str(issue) for issue in issues))


@dataclass
class TapConfig:
    """Tap declaration from a manifest."""

    hook: str
    name: str
    callback: str
    type: TapType = TapType.SYNC
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TapConfig":
        return cls(
            hook=data["hook"],
            name=data["name"],
            callback=data["callback"],
            type=TapType(data.get("type", "sync")),
            options={k: v for k, v in data.items() if k not in _TAP_FIELDS},
        )


def resolve_callback(reference: str) -> Callable[..., Any]:
    """Import a ``package.module:attribute`` reference.

    Raises:
        ValueError: If the reference cannot be imported or is not callable
    """
    module_name, _, attr_path = reference.partition(":")
    if not module_name or not attr_path:
        raise ValueError(f"Callback '{reference}' must look like 'package.module:function'")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{module_name}': {e}") from e
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise ValueError(f"Module '{module_name}' has no attribute '{attr_path}'") from e
    if not callable(target):
        raise ValueError(f"Callback '{reference}' is not callable")
    return target


class ManifestLoader:
    """Loads hook declarations and plugin taps from a manifest file.

    Example:
        loader = ManifestLoader(Path("hookforge.yaml"))
        loader.load()
        loader.get_hook("build").call(compilation)
    """

    def __init__(self, manifest_path: Path):
        self.manifest_path = manifest_path
        self.hooks: dict[str, Hook] = {}
        self.taps: list[TapConfig] = []

    def load(self) -> dict[str, Hook]:
        """Parse, validate, build every hook and register every tap.

        Raises:
            ManifestError: Listing every problem found
        """
        data, issues = load_manifest_yaml(self.manifest_path)
        if not issues:
            issues = [
                issue
                for issue in validate_manifest_data(data, self.manifest_path)
                if issue.severity == "error"
            ]
        if issues:
            raise ManifestError(issues)

        self.hooks = {}
        self.taps = []
        try:
            self._build_hooks(data["hooks"])
            self._register_taps(data.get("taps") or [])
        except ManifestError:
            # Never expose partially configured hooks
            self.hooks = {}
            self.taps = []
            raise
        logger.info(
            "Loaded %d hooks and %d taps from %s",
            len(self.hooks),
            len(self.taps),
            self.manifest_path,
        )
        return self.hooks

    def get_hook(self, name: str) -> Hook | None:
        return self.hooks.get(name)

    def list_hooks(self) -> list[str]:
        return list(self.hooks)

    def _build_hooks(self, declarations: dict[str, dict[str, Any]]) -> None:
        for name, declaration in declarations.items():
            kind = get_hook_kind(declaration["kind"])
            try:
                self.hooks[name] = kind(declaration.get("args", []), name=name)
            except HookError as e:
                raise ManifestError(
                    [ManifestIssue(file=self.manifest_path, message=str(e), path=f"hooks/{name}")]
                ) from e

    def _register_taps(self, declarations: list[dict[str, Any]]) -> None:
        issues: list[ManifestIssue] = []
        for index, data in enumerate(declarations):
            config = TapConfig.from_dict(data)
            try:
                fn = resolve_callback(config.callback)
                hook = self.hooks[config.hook]
                register = {
                    TapType.SYNC: hook.tap,
                    TapType.ASYNC: hook.tap_async,
                    TapType.PROMISE: hook.tap_promise,
                }[config.type]
                register({"name": config.name, **config.options}, fn)
            except (ValueError, HookError) as e:
                issues.append(
                    ManifestIssue(file=self.manifest_path, message=str(e), path=f"taps[{index}]")
                )
                continue
            self.taps.append(config)
        if issues:
            raise ManifestError(issues)
