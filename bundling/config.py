"""
Typed bundler configuration.

`BundleConfig` is the normalized form of whatever a config module's
`create_config()` returns. Unknown keys are kept and handed to the engine
unchanged.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Watcher never looks inside these
WATCH_EXCLUDE = (
    "dist/**",
    "doc/**",
    "node_modules/**",
    "devtool/**",
)


class PluginSpec(BaseModel):
    """A plugin declared by module name; the engine imports and instantiates it."""
    model_config = ConfigDict(frozen=True)

    name: str
    module: str
    export: str = "default"
    options: Dict[str, Any] = Field(default_factory=dict)


class OutputOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    file: str
    format: str
    sourcemap: bool = True
    banner: Optional[str] = None

    def to_options(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class BundleConfig(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, arbitrary_types_allowed=True)

    input: Union[str, List[str], Dict[str, str]]
    output: OutputOptions
    plugins: List[Any] = Field(default_factory=list)
    external: List[str] = Field(default_factory=list)

    def to_options(self) -> Dict[str, Any]:
        """Plain engine options (plugins stay as given, PluginSpecs become dicts)."""
        options = {key: value for key, value in self if key not in ("output", "plugins")}
        options["output"] = self.output.to_options()
        options["plugins"] = [
            plugin.model_dump() if isinstance(plugin, PluginSpec) else plugin
            for plugin in self.plugins
        ]
        return options


class WatchOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    build_delay: int = Field(0, alias="buildDelay")
    clear_screen: bool = Field(True, alias="clearScreen")
    # the process-runner plugin needs the bundle on disk
    skip_write: bool = Field(False, alias="skipWrite")
    exclude: List[str] = Field(default_factory=lambda: list(WATCH_EXCLUDE))

    def to_options(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def plugin_name(plugin) -> Optional[str]:
    """Name of a plugin object, PluginSpec or plugin dict (None if unnamed)."""
    if isinstance(plugin, dict):
        return plugin.get("name")
    return getattr(plugin, "name", None)
