from pathlib import Path

import pytest

from envs_provisioner.core.platform import Platform
from envs_provisioner.engine.errors import ProvisionError, UnsupportedEnvironmentTypeError
from envs_provisioner.engine.python_handler import (
    PythonHandler,
    windows_installer_name,
    windows_installer_url,
)
from envs_provisioner.resources.environment import EnvType, PythonResource


@pytest.mark.parametrize(
    ("version", "is64", "expected"),
    [
        ("2.7.15", True, "python-2.7.15.amd64.msi"),
        ("2.7.15", False, "python-2.7.15.msi"),
        ("3.4.4", True, "python-3.4.4.amd64.msi"),
        ("3.5.0", True, "python-3.5.0-amd64.exe"),
        ("3.6.8", False, "python-3.6.8.exe"),
        ("3.10.11", True, "python-3.10.11-amd64.exe"),
        ("3.7", True, "python-3.7-amd64.exe"),
    ],
)
def test_windows_installer_name(version: str, is64: bool, expected: str) -> None:
    assert windows_installer_name(version, is64=is64) == expected


def test_windows_installer_url() -> None:
    assert (
        windows_installer_url("3.6.8", is64=True)
        == "https://www.python.org/ftp/python/3.6.8/python-3.6.8-amd64.exe"
    )


def _py(tmp_path: Path, **kwargs) -> PythonResource:
    return PythonResource(name="py", env_dir=tmp_path / "py", **{"version": "3.6.8", **kwargs})


class TestSkipReason:
    def test_python_on_known_os(self, make_ctx, tmp_path: Path) -> None:
        handler = PythonHandler()
        for platform in (Platform.linux(), Platform.windows(), Platform.macos()):
            assert handler.skip_reason(make_ctx(platform), _py(tmp_path)) is None

    def test_python_on_unknown_os(self, make_ctx, tmp_path: Path) -> None:
        with pytest.raises(UnsupportedEnvironmentTypeError, match="Something is wrong with os"):
            PythonHandler().skip_reason(make_ctx(Platform(system="")), _py(tmp_path))

    def test_pypy_on_windows_is_skipped(self, make_ctx, tmp_path: Path) -> None:
        env = _py(tmp_path, type=EnvType.PYPY, version="pypy2.7-5.8.0")
        reason = PythonHandler().skip_reason(make_ctx(Platform.windows()), env)
        assert reason is not None
        assert "pythons_from_zip" in reason

    def test_ironpython_is_unsupported(self, make_ctx, tmp_path: Path) -> None:
        env = _py(tmp_path, type=EnvType.IRONPYTHON, version="2.7.8")
        with pytest.raises(UnsupportedEnvironmentTypeError):
            PythonHandler().skip_reason(make_ctx(Platform.windows()), env)

    def test_jython_everywhere(self, make_ctx, tmp_path: Path) -> None:
        env = _py(tmp_path, type=EnvType.JYTHON, version="2.7.1")
        assert PythonHandler().skip_reason(make_ctx(Platform.windows()), env) is None


class TestProvision:
    def test_unix_uses_python_build(self, make_ctx, tmp_path: Path) -> None:
        ctx = make_ctx(Platform.linux())
        python_build = ctx.build_dir / "python-build" / "bin" / "python-build"
        python_build.parent.mkdir(parents=True)
        python_build.touch()
        env = _py(tmp_path, packages=["six"])

        PythonHandler().provision(ctx, env)

        calls = [c.args[0] for c in ctx.runner.run.call_args_list]
        assert calls[0] == [python_build, "3.6.8", tmp_path / "py"]
        assert calls[1][:2] == [tmp_path / "py" / "bin" / "pip", "install"]
        assert calls[1][-1] == "six"

    def test_unix_without_python_build_fails(self, make_ctx, tmp_path: Path) -> None:
        with pytest.raises(ProvisionError, match="python-build is not installed"):
            PythonHandler().provision(make_ctx(Platform.macos()), _py(tmp_path))

    def test_windows_exe_installer(self, make_ctx, tmp_path: Path) -> None:
        ctx = make_ctx(Platform.windows())
        env = _py(tmp_path)
        pip = tmp_path / "py" / "Scripts" / "pip.exe"
        pip.parent.mkdir(parents=True)
        pip.touch()

        PythonHandler().provision(ctx, env)

        installer = ctx.build_dir / "python-3.6.8-amd64.exe"
        ctx.downloader.fetch_cached.assert_called_once_with(
            "https://www.python.org/ftp/python/3.6.8/python-3.6.8-amd64.exe", installer
        )
        ctx.runner.run.assert_called_once_with(
            [
                installer,
                "/i",
                "/quiet",
                f"TargetDir={(tmp_path / 'py').absolute()}",
                "Include_launcher=0",
                "InstallLauncherAllUsers=0",
                "Shortcuts=0",
                "AssociateFiles=0",
            ]
        )

    def test_windows_msi_installer_bootstraps_pip(self, make_ctx, tmp_path: Path) -> None:
        ctx = make_ctx(Platform.windows())
        env = _py(tmp_path, version="2.7.15", is64=False)

        PythonHandler().provision(ctx, env)

        installer = ctx.build_dir / "python-2.7.15.msi"
        calls = [c.args[0] for c in ctx.runner.run.call_args_list]
        assert calls[0] == [
            "msiexec",
            "/i",
            installer,
            "/quiet",
            f"TARGETDIR={(tmp_path / 'py').absolute()}",
        ]
        assert calls[1] == [tmp_path / "py" / "python.exe", ctx.build_dir / "get-pip.py"]

    def test_jython_runs_installer_jar(self, make_ctx, tmp_path: Path) -> None:
        ctx = make_ctx(Platform.linux(), java="/usr/bin/java")
        env = _py(tmp_path, type=EnvType.JYTHON, version="2.7.1")

        PythonHandler().provision(ctx, env)

        jar = ctx.build_dir / "jython-installer-2.7.1.jar"
        ctx.downloader.fetch_cached.assert_called_once_with(
            "https://repo1.maven.org/maven2/org/python/jython-installer/2.7.1/"
            "jython-installer-2.7.1.jar",
            jar,
        )
        ctx.runner.run.assert_called_once_with(
            ["/usr/bin/java", "-jar", jar, "-s", "-d", tmp_path / "py", "-t", "standard"]
        )

    def test_pypy_on_windows_cannot_install(self, make_ctx, tmp_path: Path) -> None:
        env = _py(tmp_path, type=EnvType.PYPY, version="pypy2.7-5.8.0")
        with pytest.raises(UnsupportedEnvironmentTypeError):
            PythonHandler().provision(make_ctx(Platform.windows()), env)
