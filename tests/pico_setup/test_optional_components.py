from unittest.mock import call

import pytest

from pico_setup import config as static_config
from pico_setup.optional_components import (
    build_openocd,
    configure_uart,
    install_vscode,
    openocd_branch,
    openocd_configure_args,
    should_build_openocd,
    should_configure_uart,
    should_install_vscode,
    vscode_deb_url,
)


@pytest.fixture
def mock_run_command(mocker):
    return mocker.patch("pico_setup.optional_components.run_command")


@pytest.fixture
def mock_run_elevated_command(mocker):
    return mocker.patch("pico_setup.optional_components.run_elevated_command")


class TestOpenOCD:
    def test_should_build_by_default(self, app_settings, mock_logger):
        assert should_build_openocd(app_settings, mock_logger) is True

    def test_skip_flag(self, app_settings, mock_logger):
        settings = app_settings.model_copy(update={"skip_openocd": True})
        assert should_build_openocd(settings, mock_logger) is False
        mock_logger.info.assert_called_with("Won't build OpenOCD", exc_info=False)

    def test_existing_checkout_skips(self, app_settings, mock_logger):
        (app_settings.output_dir / "openocd").mkdir(parents=True)
        assert should_build_openocd(app_settings, mock_logger) is False
        mock_logger.info.assert_called_with("openocd already exists so skipping", exc_info=False)

    def test_branch_and_configure_args(self, app_settings):
        assert openocd_branch(app_settings) == "picoprobe"
        assert openocd_configure_args(app_settings) == [
            "--enable-ftdi",
            "--enable-sysfsgpio",
            "--enable-bcm2835gpio",
            "--enable-picoprobe",
        ]

    def test_mingw_without_picoprobe(self, app_settings):
        settings = app_settings.model_copy(
            update={"msystem": "MINGW64", "include_picoprobe": False}
        )
        assert openocd_branch(settings) == "rp2040"
        assert openocd_configure_args(settings) == ["--enable-ftdi"]

    def test_build_sequence(
        self, mocker, app_settings, mock_logger, mock_run_command, mock_run_elevated_command
    ):
        clone = mocker.patch("pico_setup.optional_components.clone_repository")

        build_openocd(app_settings, mock_logger)

        spec = clone.call_args.args[0]
        assert spec.branch == "picoprobe"
        assert spec.url == "https://github.com/raspberrypi/openocd.git"
        assert clone.call_args.kwargs == {"depth": 1}

        cwd = str(app_settings.output_dir / "openocd")
        assert [c.args[0][0] for c in mock_run_command.call_args_list] == [
            "./bootstrap",
            "./configure",
            "make",
        ]
        assert all(c.kwargs["cwd"] == cwd for c in mock_run_command.call_args_list)
        mock_run_elevated_command.assert_called_once_with(
            ["make", "install"], app_settings, current_logger=mock_logger, cwd=cwd
        )


class TestVSCode:
    def test_skip_flag(self, app_settings, mock_logger):
        settings = app_settings.model_copy(update={"skip_vscode": True})
        assert should_install_vscode(settings, mock_logger) is False

    def test_existing_deb_skips(self, app_settings, mock_logger):
        app_settings.output_dir.mkdir(parents=True)
        (app_settings.output_dir / "vscode.deb").write_bytes(b"")
        assert should_install_vscode(app_settings, mock_logger) is False
        mock_logger.info.assert_called_with("Skipping vscode as vscode.deb exists", exc_info=False)

    def test_should_install(self, app_settings, mock_logger):
        assert should_install_vscode(app_settings, mock_logger) is True

    @pytest.mark.parametrize(
        "machine, url",
        [
            ("aarch64", static_config.VSCODE_DEB_URL_ARM64),
            ("armv7l", static_config.VSCODE_DEB_URL_ARMHF),
        ],
    )
    def test_deb_url_by_architecture(self, machine, url):
        assert vscode_deb_url(machine) == url

    def test_install(
        self, mocker, app_settings, mock_logger, mock_run_command, mock_run_elevated_command
    ):
        mocker.patch("pico_setup.optional_components.get_machine_architecture", return_value="aarch64")
        deb_path = app_settings.output_dir / "vscode.deb"
        download = mocker.patch(
            "pico_setup.optional_components.download_file", return_value=deb_path
        )

        install_vscode(app_settings, mock_logger)

        download.assert_called_once_with(
            static_config.VSCODE_DEB_URL_ARM64, deb_path, app_settings, mock_logger
        )
        assert mock_run_elevated_command.call_args_list[0] == call(
            ["apt", "install", "-y", "./vscode.deb"],
            app_settings,
            current_logger=mock_logger,
            cwd=str(app_settings.output_dir),
        )
        assert [c.args[0][-1] for c in mock_run_command.call_args_list] == static_config.VSCODE_EXTENSIONS


class TestUART:
    def test_skip_flag(self, app_settings, mock_logger):
        settings = app_settings.model_copy(update={"skip_uart": True})
        assert should_configure_uart(settings, mock_logger) is False

    def test_configure(self, app_settings, mock_logger, mock_run_elevated_command):
        configure_uart(app_settings, mock_logger)

        assert mock_run_elevated_command.call_args_list == [
            call(["apt", "install", "-y", "minicom"], app_settings, current_logger=mock_logger),
            call(
                ["raspi-config", "nonint", "do_serial", "2"],
                app_settings,
                current_logger=mock_logger,
            ),
        ]
        mock_logger.warning.assert_called_with(
            "⚠️ You must run sudo reboot to finish UART setup", exc_info=False
        )
