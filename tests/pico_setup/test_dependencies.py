from unittest.mock import call

import pytest

from pico_setup import config as static_config
from pico_setup.dependencies import (
    downgrade_broken_libusb,
    install_dependencies,
    resolve_dependencies,
)
from pico_setup.platform_detect import HostPlatform


class TestResolveDependencies:
    def test_raspberry_pi_full_set(self, app_settings, mock_logger):
        deps = resolve_dependencies(HostPlatform.RASPBERRY_PI, app_settings, current_logger=mock_logger)

        assert deps[:5] == ["git", "cmake", "gcc-arm-none-eabi", "gcc", "g++"]
        assert "libusb-1.0-0-dev" in deps
        assert "wget" in deps
        assert len(deps) == len(set(deps))

    def test_skip_openocd_excludes_openocd_packages(self, app_settings, mock_logger):
        settings = app_settings.model_copy(update={"skip_openocd": True})
        deps = resolve_dependencies(HostPlatform.RASPBERRY_PI, settings, current_logger=mock_logger)

        for package in static_config.APT_OPENOCD_PACKAGES:
            assert package not in deps
        mock_logger.info.assert_any_call("ℹ️ Skipping OpenOCD (debug support)", exc_info=False)

    def test_skip_vscode_excludes_wget(self, app_settings, mock_logger):
        settings = app_settings.model_copy(update={"skip_vscode": True})
        deps = resolve_dependencies(HostPlatform.OTHER_LINUX, settings, current_logger=mock_logger)
        assert "wget" not in deps

    def test_mingw64_without_git(self, app_settings, mock_logger):
        deps = resolve_dependencies(
            HostPlatform.WINDOWS_MINGW64, app_settings, git_present=False, current_logger=mock_logger
        )
        assert deps[0] == "git"
        assert "mingw-w64-x86_64-ninja" in deps
        assert deps.count("base-devel") == 1

    def test_mingw64_keeps_existing_git(self, app_settings, mock_logger):
        deps = resolve_dependencies(
            HostPlatform.WINDOWS_MINGW64, app_settings, git_present=True, current_logger=mock_logger
        )
        assert "git" not in deps

    def test_mingw64_looks_up_git(self, mocker, app_settings, mock_logger):
        exists = mocker.patch("pico_setup.dependencies.command_exists", return_value=True)
        deps = resolve_dependencies(HostPlatform.WINDOWS_MINGW64, app_settings, current_logger=mock_logger)
        exists.assert_called_once_with("git")
        assert "git" not in deps

    def test_unsupported_platform_has_no_packages(self, app_settings, mock_logger):
        assert resolve_dependencies(
            HostPlatform.WINDOWS_MSYS_UNSUPPORTED, app_settings, current_logger=mock_logger
        ) == []


class TestInstallDependencies:
    def test_apt_single_transaction(self, mocker, app_settings, mock_logger):
        elevated = mocker.patch("pico_setup.dependencies.run_elevated_command")
        deps = resolve_dependencies(HostPlatform.RASPBERRY_PI, app_settings, current_logger=mock_logger)

        install_dependencies(HostPlatform.RASPBERRY_PI, app_settings, mock_logger)

        assert elevated.call_args_list == [
            call(["apt", "update"], app_settings, current_logger=mock_logger),
            call(["apt", "install", "-y", *deps], app_settings, current_logger=mock_logger),
        ]

    def test_mingw64_uses_pacman(self, mocker, app_settings, mock_logger):
        mocker.patch("pico_setup.dependencies.command_exists", return_value=True)
        run_mock = mocker.patch("pico_setup.dependencies.run_command")
        downgrade = mocker.patch("pico_setup.dependencies.downgrade_broken_libusb")
        elevated = mocker.patch("pico_setup.dependencies.run_elevated_command")

        install_dependencies(HostPlatform.WINDOWS_MINGW64, app_settings, mock_logger)

        command = run_mock.call_args.args[0]
        assert command[:3] == ["pacman", "-S", "--needed"]
        downgrade.assert_called_once_with(app_settings, mock_logger)
        elevated.assert_not_called()

    def test_apt_failure_propagates(self, mocker, app_settings, mock_logger):
        import subprocess

        mocker.patch(
            "pico_setup.dependencies.run_elevated_command",
            side_effect=subprocess.CalledProcessError(100, ["apt", "update"]),
        )
        with pytest.raises(subprocess.CalledProcessError):
            install_dependencies(HostPlatform.RASPBERRY_PI, app_settings, mock_logger)


class TestDowngradeBrokenLibusb:
    def test_healthy_version_left_alone(self, mocker, app_settings, mock_logger):
        mocker.patch("pico_setup.dependencies.query_pacman_package", return_value="1.0.26-1")
        download = mocker.patch("pico_setup.dependencies.download_file")

        assert downgrade_broken_libusb(app_settings, mock_logger) is False
        download.assert_not_called()

    def test_broken_version_replaced(self, mocker, tmp_path, app_settings, mock_logger):
        mocker.patch(
            "pico_setup.dependencies.query_pacman_package",
            return_value=static_config.LIBUSB_BROKEN_VERSION,
        )
        package_path = tmp_path / "libusb.pkg.tar.xz"
        download = mocker.patch("pico_setup.dependencies.download_file", return_value=package_path)
        run_mock = mocker.patch("pico_setup.dependencies.run_command")

        assert downgrade_broken_libusb(app_settings, mock_logger) is True

        assert download.call_args.args[0] == static_config.LIBUSB_FALLBACK_URL
        run_mock.assert_called_once_with(
            ["pacman", "-U", str(package_path)], app_settings, current_logger=mock_logger
        )
