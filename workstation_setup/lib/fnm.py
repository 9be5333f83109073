from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)


def load_fnm_env(ctx: "RunContext") -> Dict[str, str]:
    """Apply `fnm env` to the session environment.

    Equivalent of `eval "$(fnm env)"` in a shell: exports the FNM_* variables
    and puts the multishell bin dir on PATH.
    """

    ctx.prepend_path(ctx.paths.fnm_dir)
    if ctx.dry_run:
        ctx.run(["fnm", "env", "--json"])
        return {}

    r = ctx.run(["fnm", "env", "--json"])
    data = json.loads(r.stdout or "{}")
    if not isinstance(data, dict):
        raise RuntimeError("fnm env --json did not return an object")

    fnm_env = {str(k): str(v) for k, v in data.items()}
    ctx.env.update(fnm_env)
    multishell = fnm_env.get("FNM_MULTISHELL_PATH")
    if multishell:
        ctx.prepend_path(f"{multishell}/bin")
    logger.info("Loaded fnm environment (%s)", ", ".join(sorted(fnm_env)))
    return fnm_env


def fnm_exec(
    ctx: "RunContext",
    version: str,
    argv: list[str],
    *,
    check: bool = True,
    capture: bool = True,
    dry_run: bool | None = None,
):
    kwargs = {"check": check, "capture": capture}
    if dry_run is not None:
        kwargs["dry_run"] = dry_run
    return ctx.run(["fnm", "exec", f"--using={version}", "--", *argv], **kwargs)


def same_node_version(a: str, b: str) -> bool:
    """Compare Node versions, ignoring surrounding space and a leading "v"."""
    return a.strip().lstrip("v") == b.strip().lstrip("v")


def node_version_installed(ctx: "RunContext", version: str) -> bool:
    if not ctx.command_exists("fnm"):
        return False
    r = fnm_exec(ctx, version, ["node", "--version"], check=False, dry_run=False)
    return r.returncode == 0 and same_node_version(r.stdout, version)
