from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from envs_provisioner.config import ConfigError, apply, build_context, plan, which
from envs_provisioner.core.platform import Platform
from envs_provisioner.engine.types import Action, Status

_FILES_YAML = """
settings:
  build_dir: out
files:
  - path: conf/pip.conf
    content: "[global]\\n"
links:
  - link: conf/pip.ini
    source: conf/pip.conf
  - link: conf/dangling
    source: conf/missing
"""


def test_build_context_uses_settings(make_config, tmp_path: Path) -> None:
    cfg = make_config(
        "settings:\n  pip_install_options: -q\n  java: /opt/java\n"
        "  jython_installer_version: 2.7.2\n"
    )
    ctx = build_context(cfg, platform=Platform.windows())
    assert ctx.platform.is_windows
    assert ctx.build_dir == tmp_path / "build"
    assert ctx.pip_options == ["-q"]
    assert ctx.java == "/opt/java"
    assert ctx.jython_installer_version == "2.7.2"


def test_files_and_links_end_to_end(make_config, tmp_path: Path) -> None:
    cfg = make_config(_FILES_YAML)

    first_plan = plan(cfg)
    assert [(c.address.split(".", 1)[0], c.action) for c in first_plan.changes] == [
        ("file", Action.PROVISION),
        ("link", Action.SKIP),
        ("link", Action.SKIP),
    ]

    result = apply(first_plan, cfg)

    assert (tmp_path / "out").is_dir()
    assert (tmp_path / "conf" / "pip.conf").read_text() == "[global]\n"
    # The link's source exists by the time links run.
    assert (tmp_path / "conf" / "pip.ini").read_text() == "[global]\n"
    assert not (tmp_path / "conf" / "dangling").exists()
    assert [o.status for o in result.outcomes] == [
        Status.PROVISIONED,
        Status.PROVISIONED,
        Status.SKIPPED,
    ]

    second = plan(cfg)
    assert [c.action for c in second.changes] == [Action.NOOP, Action.NOOP, Action.SKIP]


def test_existing_file_is_left_alone(make_config, tmp_path: Path) -> None:
    (tmp_path / "conf").mkdir()
    (tmp_path / "conf" / "pip.conf").write_text("mine")
    cfg = make_config("files:\n  - path: conf/pip.conf\n    content: theirs\n")

    result = apply(plan(cfg), cfg)

    assert result.outcomes[0].status == Status.SKIPPED
    assert (tmp_path / "conf" / "pip.conf").read_text() == "mine"


@patch("envs_provisioner.config.Platform.detect", return_value=Platform.linux())
def test_plan_orders_environment_categories(_detect, make_config) -> None:
    cfg = make_config(
        """
virtual_envs:
  - name: venv
    source_env: mc
conda_envs:
  - name: sub
    source_env: mc
    version: 3.6
condas:
  - name: mc
    version: Miniconda3-4.5.4
pythons:
  - name: py
    version: 3.6.8
"""
    )

    changes = plan(cfg).changes

    assert [c.address for c in changes] == [
        "python_build.python_build",
        "python.py",
        "conda.mc",
        "virtualenv.venv",
        "conda_env.sub",
    ]
    assert {c.action for c in changes} == {Action.PROVISION}
    assert changes[-1].desired is not None
    assert changes[-1].desired["version"] == "3.6"


def test_which(make_config, tmp_path: Path) -> None:
    cfg = make_config("pythons:\n  - name: py\n    version: 3.6.8\n")
    assert which(cfg, "py", "pip", platform=Platform.windows()) == (
        tmp_path / "build" / "envs" / "py" / "Scripts" / "pip.exe"
    )


def test_which_unknown_env(make_config) -> None:
    cfg = make_config("")
    with pytest.raises(ConfigError, match="Unknown environment 'nope'"):
        which(cfg, "nope", "python", platform=Platform.linux())
