"""End-to-end runs over a faked host, plus CLI behaviour."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests.conftest import fake_checkout, make_exe
from workstation_setup import main as main_mod
from workstation_setup.config import load_setup_config
from workstation_setup.lib.command import CommandError
from workstation_setup.main import build_steps, exit_code_for, main, run
from workstation_setup.pipeline import PipelineAborted, PipelineResult, StepRecord

ALWAYS_RUN = [
    "10_system_update",
    "15_base_packages",
    "75_cleanup_tmp",
    "90_final_update",
    "95_version_report",
]


def _run(tmp_path, paths, session_env, runner):
    return run(
        state_path=str(tmp_path / "report" / "state.json"),
        log_path=str(tmp_path / "report" / "setup.log"),
        runner=runner,
        paths=paths,
        env=session_env,
    )


def _unzip_fonts(argv):
    dest = Path(argv[-1])
    dest.mkdir(parents=True, exist_ok=True)
    (dest / "JetBrainsMonoNerdFont-Regular.ttf").write_bytes(b"ttf")


@pytest.fixture
def fresh_host(runner):
    runner.on("snap", "list", returncode=1)
    runner.on("unzip", effect=_unzip_fonts)
    return runner


@pytest.fixture
def provisioned_host(runner, paths, bin_dir):
    for exe in ("rustc", "nu", "nvim", "starship", "fnm", "snap"):
        make_exe(bin_dir, exe)
    (paths.config_dir / "tmux").mkdir(parents=True)
    paths.fonts_dir.mkdir(parents=True)
    (paths.fonts_dir / "JetBrainsMonoNerdFont-Regular.ttf").write_bytes(b"ttf")
    fake_checkout(runner, paths.config_dir / "nvim", "https://github.com/cloud-np/nvim.git")
    runner.on("fnm", "exec", "--using=v23.10.0", "--", "node", stdout="v23.10.0\n")
    return runner


def test_step_order():
    ids = [s.step_id for s in build_steps(load_setup_config())]
    assert ids[:11] == [
        "10_system_update",
        "15_base_packages",
        "20_rust",
        "25_nushell",
        "30_tmux_config",
        "35_neovim",
        "40_fonts",
        "45_starship",
        "50_nvim_config_backup",
        "55_fnm",
        "60_node",
    ]
    assert ids[11:15] == ["65_pnpm", "70_nvim_config", "75_cleanup_tmp", "80_snapd"]
    assert ids[15:22] == [
        "81_snap_brave",
        "81_snap_vlc",
        "81_snap_spotify",
        "81_snap_alacritty",
        "81_snap_webstorm",
        "81_snap_code",
        "81_snap_obsidian",
    ]
    assert ids[22:] == ["90_final_update", "95_version_report"]


def test_fresh_host_installs_everything(tmp_path, paths, session_env, fresh_host):
    state = _run(tmp_path, paths, session_env, fresh_host)

    summary = state["execution"]["summary"]
    assert summary["already_present"] == ["50_nvim_config_backup"]
    assert "20_rust" in summary["installed"]
    assert "81_snap_obsidian" in summary["installed"]
    assert fresh_host.ran("sudo", "snap", "install", "obsidian", "--classic")
    assert (paths.fonts_dir / "JetBrainsMonoNerdFont-Regular.ttf").exists()
    assert not Path(state["execution"]["paths"]["download_dir"]).exists()
    assert state["execution"]["errors"] == []

    report = json.loads((tmp_path / "report" / "state.json").read_text(encoding="utf-8"))
    assert report["execution"]["records"][-1]["step_id"] == "95_version_report"
    assert report["versions"]["Obsidian"] == "Not installed"


def test_node_tooling_runs_after_fnm(tmp_path, paths, session_env, fresh_host):
    _run(tmp_path, paths, session_env, fresh_host)
    r = fresh_host
    assert r.index("bash") < r.index("fnm", "env") < r.index("fnm", "install", "v23.10.0")
    assert r.index("fnm", "install") < r.index("fnm", "exec", "--using=v23.10.0", "--", "npm")


def test_second_run_skips_every_guarded_step(tmp_path, paths, session_env, provisioned_host):
    for _ in range(2):
        state = _run(tmp_path, paths, session_env, provisioned_host)
        summary = state["execution"]["summary"]
        assert summary["installed"] == ALWAYS_RUN
        assert len(summary["already_present"]) == len(build_steps(load_setup_config())) - len(ALWAYS_RUN)

    assert not provisioned_host.ran("curl")
    assert not provisioned_host.ran("git", "clone")
    assert not provisioned_host.ran("sudo", "snap", "install")
    assert not provisioned_host.ran("chsh")


def test_existing_nvim_config_backed_up_before_clone(tmp_path, paths, session_env, provisioned_host):
    config = paths.config_dir / "nvim"
    # Replace the checkout with a hand-made config.
    (config / ".git").rmdir()
    (config / "init.lua").write_text("-- mine\n", encoding="utf-8")

    _run(tmp_path, paths, session_env, provisioned_host)

    backups = list(paths.config_dir.glob("nvim.backup.*"))
    assert len(backups) == 1
    assert (backups[0] / "init.lua").read_text(encoding="utf-8") == "-- mine\n"
    assert provisioned_host.calls[provisioned_host.index("git", "clone")][-1] == str(config)


def test_failure_aborts_and_reports(tmp_path, paths, session_env, fresh_host):
    fresh_host.on("curl", returncode=6, stderr="Could not resolve host")

    with pytest.raises(PipelineAborted) as info:
        _run(tmp_path, paths, session_env, fresh_host)

    assert info.value.step_id == "20_rust"
    assert exit_code_for(info.value) == 6
    assert not fresh_host.ran("git", "clone")
    assert not fresh_host.ran("sudo", "snap")
    assert fresh_host.calls[-1][0] == "curl"

    report = json.loads((tmp_path / "report" / "state.json").read_text(encoding="utf-8"))
    assert report["execution"]["errors"][0]["step"] == "20_rust"
    assert report["execution"]["records"][-1]["outcome"] == "failed"
    # Downloads are only cleaned up on success.
    assert Path(report["execution"]["paths"]["download_dir"]).exists()


def test_report_drops_summary_of_earlier_success(tmp_path, paths, session_env, provisioned_host):
    _run(tmp_path, paths, session_env, provisioned_host)
    provisioned_host.on("sudo", "apt", "update", returncode=100)

    with pytest.raises(PipelineAborted):
        _run(tmp_path, paths, session_env, provisioned_host)

    report = json.loads((tmp_path / "report" / "state.json").read_text(encoding="utf-8"))
    assert "summary" not in report["execution"]
    assert report["execution"]["errors"][0]["step"] == "10_system_update"


def test_partial_window_removes_download_dir(tmp_path, paths, session_env, provisioned_host):
    state = run(
        state_path=str(tmp_path / "report" / "state.json"),
        log_path=str(tmp_path / "report" / "setup.log"),
        stop_after="35_neovim",
        runner=provisioned_host,
        paths=paths,
        env=session_env,
    )
    assert state["execution"]["records"][-1]["step_id"] == "35_neovim"
    assert not Path(state["execution"]["paths"]["download_dir"]).exists()


def test_unwritable_log_falls_back_to_state_dir(tmp_path, paths, session_env, provisioned_host):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    requested = blocker / "setup.log"

    state = run(
        state_path=str(tmp_path / "report" / "state.json"),
        log_path=str(requested),
        runner=provisioned_host,
        paths=paths,
        env=session_env,
    )

    logs = state["execution"]["paths"]
    assert logs["log_path_requested"] == str(requested)
    assert logs["log_path_actual"] == str(paths.log_default)
    assert "Setup complete!" in paths.log_default.read_text(encoding="utf-8")


def test_xdg_data_home_used_for_fnm(tmp_path, paths, session_env, provisioned_host, monkeypatch):
    seen = {}

    def fake_pipeline(*, ctx, **kwargs):
        seen["fnm_dir"] = ctx.paths.fnm_dir
        return PipelineResult()

    monkeypatch.setattr(main_mod, "run_pipeline", fake_pipeline)
    env = dict(session_env, XDG_DATA_HOME=str(tmp_path / "data"))
    run(
        state_path=str(tmp_path / "report" / "state.json"),
        log_path=str(tmp_path / "report" / "setup.log"),
        runner=provisioned_host,
        env=env,
    )
    assert seen["fnm_dir"] == tmp_path / "data" / "fnm"


def test_missing_home_is_fatal(tmp_path, runner):
    from workstation_setup.config import ConfigError

    with pytest.raises(ConfigError):
        run(runner=runner, env={"PATH": ""}, state_path=str(tmp_path / "s.json"))


class TestExitCodes:
    def test_command_failure_status(self):
        err = PipelineAborted("35_neovim", [], CommandError(["curl"], 22))
        assert exit_code_for(err) == 22

    def test_other_failure_is_one(self):
        assert exit_code_for(PipelineAborted("x", [], RuntimeError("boom"))) == 1

    def test_status_is_clamped(self):
        assert exit_code_for(PipelineAborted("x", [], CommandError(["x"], -9))) == 1
        assert exit_code_for(PipelineAborted("x", [], CommandError(["x"], 300))) == 255


class TestCli:
    def test_list_steps(self, capsys):
        assert main(["--list-steps"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "10_system_update\tUpdating system packages"
        assert out[-1] == "95_version_report\tInstalled versions"

    def test_success(self, monkeypatch):
        seen = {}

        def fake_run(**kwargs):
            seen.update(kwargs)
            return {}

        monkeypatch.setattr(main_mod, "run", fake_run)
        assert main([]) == 0
        assert seen["dry_run"] is False
        assert seen["start_at"] is None

    def test_failure_maps_exit_code(self, monkeypatch):
        def fake_run(**kwargs):
            raise PipelineAborted("15_base_packages", [StepRecord("15_base_packages", "failed")], CommandError(["sudo"], 100))

        monkeypatch.setattr(main_mod, "run", fake_run)
        assert main([]) == 100

    def test_unknown_step_id_is_usage_error(self, monkeypatch, capsys):
        monkeypatch.setattr(main_mod, "run", lambda **kwargs: pytest.fail("run() must not start"))
        with pytest.raises(SystemExit) as info:
            main(["--start-at", "nope"])
        assert info.value.code == 2
        assert "unknown step id 'nope'" in capsys.readouterr().err

        with pytest.raises(SystemExit):
            main(["--stop-after", "36_neovim"])

    def test_known_step_ids_pass_through(self, monkeypatch):
        seen = {}
        monkeypatch.setattr(main_mod, "run", lambda **kwargs: seen.update(kwargs))
        assert main(["--start-at", "35_neovim", "--stop-after", "45_starship"]) == 0
        assert seen["start_at"] == "35_neovim"
        assert seen["stop_after"] == "45_starship"

    def test_interrupt(self, monkeypatch):
        def fake_run(**kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr(main_mod, "run", fake_run)
        assert main(["--dry-run"]) == 130
