"""pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

import pytest

from workstation_setup.config import SetupConfig, load_setup_config
from workstation_setup.context import RunContext
from workstation_setup.lib.command import CmdResult, CommandError
from workstation_setup.lib.env import Paths


class FakeRunner:
    """Stands in for run_cmd: records argv and answers by argv prefix.

    Unmatched commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self.captured: List[bool] = []
        self._responses: List[Tuple[List[str], int, str, str, Optional[Callable[[List[str]], None]]]] = []

    def on(
        self,
        *prefix: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        effect: Optional[Callable[[List[str]], None]] = None,
    ) -> None:
        """Answer commands starting with prefix; effect(argv) simulates side effects."""
        self._responses.append((list(prefix), returncode, stdout, stderr, effect))

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Any = None,
        cwd: Any = None,
        input_text: Optional[str] = None,
        timeout: Any = None,
        capture: bool = True,
        dry_run: bool = False,
    ) -> CmdResult:
        argv_list = list(argv)
        self.calls.append(argv_list)
        self.inputs.append(input_text)
        self.captured.append(capture)

        rc, out, err = 0, "", ""
        for prefix, p_rc, p_out, p_err, effect in reversed(self._responses):
            if argv_list[: len(prefix)] == prefix:
                rc, out, err = p_rc, p_out, p_err
                if effect is not None:
                    effect(argv_list)
                break

        if check and rc != 0:
            raise CommandError(argv_list, rc, err)
        return CmdResult(argv=argv_list, returncode=rc, stdout=out, stderr=err)

    def ran(self, *prefix: str) -> bool:
        return any(c[: len(prefix)] == list(prefix) for c in self.calls)

    def streamed(self, *prefix: str) -> bool:
        """True if every command starting with prefix ran on the terminal."""
        hits = [cap for c, cap in zip(self.calls, self.captured) if c[: len(prefix)] == list(prefix)]
        return bool(hits) and not any(hits)

    def index(self, *prefix: str) -> int:
        for i, c in enumerate(self.calls):
            if c[: len(prefix)] == list(prefix):
                return i
        raise AssertionError(f"{prefix} was not run; calls: {self.calls}")


def make_exe(bin_dir: Path, name: str) -> Path:
    p = bin_dir / name
    p.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    p.chmod(0o755)
    return p


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    b = tmp_path / "bin"
    b.mkdir()
    return b


@pytest.fixture
def paths(home: Path, tmp_path: Path) -> Paths:
    return Paths(
        home=home,
        bin_dir=tmp_path / "usr-local-bin",
        opt_dir=tmp_path / "opt",
        shells_file=tmp_path / "etc-shells",
    )


@pytest.fixture
def cfg() -> SetupConfig:
    return load_setup_config()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def session_env(home: Path, bin_dir: Path) -> dict:
    return {"HOME": str(home), "PATH": str(bin_dir)}


@pytest.fixture
def ctx(cfg: SetupConfig, paths: Paths, runner: FakeRunner, session_env: dict, tmp_path: Path) -> RunContext:
    downloads = tmp_path / "downloads"
    downloads.mkdir()
    return RunContext(
        cfg=cfg,
        paths=paths,
        env=dict(session_env),
        runner=runner,
        tmp_dir=downloads,
    )


def fake_checkout(runner: FakeRunner, repo_dir: Path, url: str) -> None:
    """Make repo_dir look like a git clone of url."""
    (repo_dir / ".git").mkdir(parents=True, exist_ok=True)
    runner.on("git", "-C", str(repo_dir), "remote", "get-url", "origin", stdout=url + "\n")
