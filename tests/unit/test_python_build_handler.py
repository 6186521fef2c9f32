import zipfile
from pathlib import Path

import pytest

from envs_provisioner.core.platform import Platform
from envs_provisioner.engine.errors import CorruptArchiveError, ExternalProcessError
from envs_provisioner.engine.python_build_handler import (
    PythonBuildHandler,
    python_build_executable,
)
from envs_provisioner.resources.environment import PythonBuildResource


def _write_pyenv_zip(url: str, dest: Path, *, with_plugin: bool = True) -> Path:
    _ = url
    dest.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(dest, "w") as zf:
        zf.writestr("pyenv-master/README.md", "")
        if with_plugin:
            zf.writestr("pyenv-master/plugins/python-build/install.sh", "echo")
    return dest


def _resource(ctx) -> PythonBuildResource:
    return PythonBuildResource(install_dir=ctx.build_dir / "python-build")


def test_executable_location(tmp_path: Path) -> None:
    assert python_build_executable(tmp_path) == tmp_path / "python-build" / "bin" / "python-build"
    resource = PythonBuildResource(install_dir=tmp_path / "python-build")
    assert resource.executable == python_build_executable(tmp_path)
    assert resource.address == "python_build.python_build"


def test_applies_only_on_unix(make_ctx) -> None:
    windows = make_ctx(Platform.windows())
    linux = make_ctx(Platform.linux())
    assert not PythonBuildHandler().applies(windows, _resource(windows))
    assert PythonBuildHandler().applies(linux, _resource(linux))
    assert PythonBuildHandler().skip_reason(linux, _resource(linux)) is None


def test_exists_checks_install_dir(make_ctx) -> None:
    ctx = make_ctx()
    resource = _resource(ctx)
    assert not PythonBuildHandler().exists(ctx, resource)
    resource.install_dir.mkdir(parents=True)
    assert PythonBuildHandler().exists(ctx, resource)


def test_provision_runs_install_script_and_cleans_up(make_ctx) -> None:
    ctx = make_ctx()
    ctx.downloader.fetch.side_effect = _write_pyenv_zip
    resource = _resource(ctx)

    PythonBuildHandler().provision(ctx, resource)

    ctx.downloader.fetch.assert_called_once_with(
        "https://github.com/pyenv/pyenv/archive/master.zip", ctx.build_dir / "pyenv.zip"
    )
    ctx.runner.run.assert_called_once_with(
        ["bash", ctx.build_dir / "python-build-tmp" / "install.sh"],
        env={"PREFIX": str(resource.install_dir)},
    )
    assert not (ctx.build_dir / "pyenv.zip").exists()
    assert not (ctx.build_dir / "python-build-tmp").exists()


def test_provision_archive_without_plugin(make_ctx) -> None:
    ctx = make_ctx()
    ctx.downloader.fetch.side_effect = lambda url, dest: _write_pyenv_zip(
        url, dest, with_plugin=False
    )

    with pytest.raises(CorruptArchiveError):
        PythonBuildHandler().provision(ctx, _resource(ctx))

    ctx.runner.run.assert_not_called()
    assert not (ctx.build_dir / "pyenv.zip").exists()


def test_provision_cleans_up_on_install_failure(make_ctx) -> None:
    ctx = make_ctx()
    ctx.downloader.fetch.side_effect = _write_pyenv_zip
    ctx.runner.run.side_effect = ExternalProcessError(["bash"], 1, "nope")

    with pytest.raises(ExternalProcessError):
        PythonBuildHandler().provision(ctx, _resource(ctx))

    assert not (ctx.build_dir / "python-build-tmp").exists()
