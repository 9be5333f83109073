from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

BUNDLED_MANIFEST = Path(__file__).resolve().parent / "manifests" / "workstation.yaml"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class SnapApp:
    name: str
    label: str
    classic: bool = False


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _required(raw: Dict[str, Any], section: str, key: str) -> str:
    value = _section(raw, section).get(key)
    if value is None or str(value).strip() == "":
        raise ConfigError(f"Missing required setting {section}.{key}")
    return str(value).strip()


@dataclass(frozen=True)
class SetupConfig:
    raw: Dict[str, Any]

    @property
    def base_packages(self) -> List[str]:
        pkgs = _section(self.raw, "apt").get("base_packages") or []
        if not isinstance(pkgs, list):
            raise ConfigError("apt.base_packages must be a list")
        return [str(p).strip() for p in pkgs if str(p).strip()]

    @property
    def rust_installer_url(self) -> str:
        return _required(self.raw, "rust", "installer_url")

    @property
    def nushell_version(self) -> str:
        return _required(self.raw, "nushell", "version")

    @property
    def nushell_target(self) -> str:
        return str(_section(self.raw, "nushell").get("target") or "x86_64-unknown-linux-gnu")

    @property
    def nushell_dist_name(self) -> str:
        """Archive stem, which is also the top-level directory inside the archive."""
        return f"nu-{self.nushell_version}-{self.nushell_target}"

    @property
    def nushell_url(self) -> str:
        tmpl = _required(self.raw, "nushell", "release_url")
        return tmpl.format(version=self.nushell_version, target=self.nushell_target)

    @property
    def neovim_version(self) -> str:
        return _required(self.raw, "neovim", "version")

    @property
    def neovim_url(self) -> str:
        return _required(self.raw, "neovim", "release_url").format(version=self.neovim_version)

    @property
    def font_family(self) -> str:
        return str(_section(self.raw, "fonts").get("family") or "JetBrainsMono")

    @property
    def font_marker(self) -> str:
        return _required(self.raw, "fonts", "marker_file")

    @property
    def fonts_url(self) -> str:
        return _required(self.raw, "fonts", "release_url").format(
            version=_required(self.raw, "fonts", "version"),
            family=self.font_family,
        )

    @property
    def starship_installer_url(self) -> str:
        return _required(self.raw, "starship", "installer_url")

    @property
    def fnm_installer_url(self) -> str:
        return _required(self.raw, "fnm", "installer_url")

    @property
    def node_version(self) -> str:
        return _required(self.raw, "node", "version")

    @property
    def node_global_packages(self) -> List[str]:
        pkgs = _section(self.raw, "node").get("global_packages") or []
        if not isinstance(pkgs, list):
            raise ConfigError("node.global_packages must be a list")
        return [str(p).strip() for p in pkgs if str(p).strip()]

    def config_repo(self, name: str) -> str:
        return _required(self.raw, "config_repos", name)

    @property
    def snaps(self) -> List[SnapApp]:
        items = self.raw.get("snaps") or []
        if not isinstance(items, list):
            raise ConfigError("snaps must be a list")
        apps: List[SnapApp] = []
        for item in items:
            if isinstance(item, str):
                apps.append(SnapApp(name=item, label=item))
                continue
            if not isinstance(item, dict) or not item.get("name"):
                raise ConfigError(f"Invalid snap entry: {item!r}")
            name = str(item["name"]).strip()
            apps.append(
                SnapApp(
                    name=name,
                    label=str(item.get("label") or name),
                    classic=bool(item.get("classic", False)),
                )
            )
        return apps

    @property
    def set_login_shell(self) -> bool:
        return bool(_section(self.raw, "features").get("set_login_shell", True))

    @property
    def alacritty_default_terminal(self) -> bool:
        return bool(_section(self.raw, "features").get("alacritty_default_terminal", True))


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base. Mappings merge; anything else replaces."""

    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read the workstation manifest") from e

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")
    return raw


def load_setup_config(path: Optional[str] = None, *, manifest: Path = BUNDLED_MANIFEST) -> SetupConfig:
    raw = _load_yaml(manifest)
    if path:
        p = Path(path).expanduser()
        if not p.exists():
            raise FileNotFoundError(path)
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ConfigError("config overrides must be YAML")
        raw = deep_merge(raw, _load_yaml(p))
    return SetupConfig(raw=raw)


def require_home(environ: Optional[Dict[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    home = env.get("HOME")
    if not home:
        raise ConfigError("HOME is not set")
    return Path(home)
