"""
Tests for configuration loading, validation and the command line entry point.
"""

import os
from unittest.mock import patch

import pytest

from main import DEFAULT_CONFIG_PATH, build_display, build_session, load_config, main, validate_config
from models.config import Config
from models.status import SessionState
from rendering.display import HeadlessDisplay


class TestLoadConfig:
    def test_loads_default(self, temp_config_dir):
        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["camera"]["device_id"] == 0
        assert config["corridor"]["min_scale"] == 0.2
        assert config["corridor"]["detection_interval_ms"] == 150

    def test_local_overrides_merge(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("""
corridor:
  max_scale: 3.0
camera:
  device_id: 1
""")
        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["corridor"]["max_scale"] == 3.0
        assert config["corridor"]["min_scale"] == 0.2
        assert config["camera"]["device_id"] == 1
        assert config["camera"]["resolution"] == [640, 480]

    def test_explicit_path_applied_last(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("corridor:\n  max_scale: 3.0\n")
        explicit = temp_config_dir / "gallery.yaml"
        explicit.write_text("corridor:\n  max_scale: 4.0\n")

        config = load_config(str(explicit))

        assert config["corridor"]["max_scale"] == 4.0

    def test_empty_override_file(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("")
        config = load_config(str(temp_config_dir / "config.yaml"))
        assert config["log_level"] == "INFO"

    def test_invalid_yaml_exits(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("corridor: [unclosed\n")
        with pytest.raises(SystemExit):
            load_config(str(temp_config_dir / "config.yaml"))

    def test_checked_in_default_is_valid(self):
        root = os.path.join(os.path.dirname(__file__), "..")
        config = load_config(os.path.join(root, "config", "default.yaml"))

        is_valid, error = validate_config(config)
        assert is_valid, error
        cfg = Config.from_dict(config)
        assert cfg.corridor.min_scale == 0.2
        assert cfg.corridor.max_scale == 2.0
        assert cfg.corridor.detection_interval_ms == 150

    def test_default_path_independent_of_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

        assert DEFAULT_CONFIG_PATH == os.path.join(root, "config", "config.yaml")
        is_valid, error = validate_config(load_config(DEFAULT_CONFIG_PATH))
        assert is_valid, error


class TestValidateConfig:
    def test_valid(self, valid_config):
        assert validate_config(valid_config) == (True, None)

    @pytest.mark.parametrize("section", ["camera", "detection", "corridor", "log_level"])
    def test_missing_section(self, valid_config, section):
        del valid_config[section]
        is_valid, error = validate_config(valid_config)
        assert not is_valid
        assert section in error

    @pytest.mark.parametrize("corridor, fragment", [
        ({"min_scale": 0}, "min_scale"),
        ({"min_scale": -1}, "min_scale"),
        ({"min_scale": 1.0, "max_scale": 0.5}, "max_scale"),
        ({"max_scale": "big"}, "max_scale"),
        ({"detection_interval_ms": 0}, "detection_interval_ms"),
        ({"detection_interval_ms": True}, "detection_interval_ms"),
    ])
    def test_invalid_corridor(self, valid_config, corridor, fragment):
        valid_config["corridor"].update(corridor)
        is_valid, error = validate_config(valid_config)
        assert not is_valid
        assert fragment in error

    def test_equal_scales_allowed(self, valid_config):
        valid_config["corridor"].update({"min_scale": 1.0, "max_scale": 1.0})
        assert validate_config(valid_config)[0]

    @pytest.mark.parametrize("device_id, ok", [
        (0, True),
        (2, True),
        ("videos/walk.mp4", True),
        (-1, False),
        (True, False),
        (1.5, False),
    ])
    def test_device_id(self, valid_config, device_id, ok):
        valid_config["camera"]["device_id"] = device_id
        assert validate_config(valid_config)[0] is ok

    def test_unknown_camera_backend(self, valid_config):
        valid_config["camera"]["backend"] = "picamera2"
        is_valid, error = validate_config(valid_config)
        assert not is_valid
        assert "camera.backend" in error

    def test_bad_resolution(self, valid_config):
        valid_config["camera"]["resolution"] = [1280]
        assert not validate_config(valid_config)[0]

    def test_unknown_detection_backend(self, valid_config):
        valid_config["detection"]["backend"] = "hailo"
        is_valid, error = validate_config(valid_config)
        assert not is_valid
        assert "detection.backend" in error

    @pytest.mark.parametrize("key", ["conf_threshold", "iou_threshold"])
    def test_threshold_range(self, valid_config, key):
        valid_config["detection"]["yolo"][key] = 1.5
        is_valid, error = validate_config(valid_config)
        assert not is_valid
        assert key in error

    def test_empty_model(self, valid_config):
        valid_config["detection"]["yolo"]["model"] = ""
        assert not validate_config(valid_config)[0]

    def test_display_size(self, valid_config):
        valid_config["display"]["size"] = [0, 720]
        is_valid, error = validate_config(valid_config)
        assert not is_valid
        assert "display.size" in error

    def test_web_port(self, valid_config):
        valid_config["web"]["port"] = 70000
        is_valid, error = validate_config(valid_config)
        assert not is_valid
        assert "web.port" in error

    def test_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"
        is_valid, error = validate_config(valid_config)
        assert not is_valid
        assert "log_level" in error


class TestBuilders:
    def test_build_display_headless(self, valid_config):
        valid_config["display"]["enabled"] = False
        display = build_display(Config.from_dict(valid_config))
        assert isinstance(display, HeadlessDisplay)
        assert display.size() == (1280, 720)

    @patch("main.create_backend_from_config")
    @patch("main.create_source_from_config")
    def test_build_session_is_lazy(self, mock_source, mock_backend, valid_config):
        session = build_session(Config.from_dict(valid_config))

        mock_source.assert_not_called()
        mock_backend.assert_not_called()
        assert session.state == SessionState.IDLE

        session.start()
        mock_source.assert_called_once()
        mock_source.return_value.open.assert_called_once()
        mock_backend.assert_called_once()
        assert session.state == SessionState.RUNNING
        session.stop()


class TestMain:
    def test_invalid_config_returns_1(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("corridor:\n  min_scale: -1\n")
        assert main(["--config", str(temp_config_dir / "config.yaml")]) == 1

    def test_missing_config_returns_1(self, tmp_path):
        assert main(["--config", str(tmp_path / "nowhere" / "config.yaml")]) == 1

    @patch("main.install_stop_handlers")
    @patch("main.ensure_single_instance", return_value=True)
    @patch("main.setup_logging")
    @patch("main.create_engine")
    @patch("main.build_session")
    def test_runs_engine(self, mock_session, mock_engine, mock_logging, mock_single, mock_handlers,
                         temp_config_dir):
        mock_session.return_value.error = None
        engine = mock_engine.return_value

        code = main(["--config", str(temp_config_dir / "config.yaml"), "--no-display"])

        assert code == 0
        engine.run.assert_called_once()
        mock_handlers.assert_called_once_with(engine.stop)
        display = mock_engine.call_args.args[1]
        assert isinstance(display, HeadlessDisplay)

    @patch("main.install_stop_handlers")
    @patch("main.ensure_single_instance", return_value=True)
    @patch("main.setup_logging")
    @patch("main.create_engine")
    @patch("main.build_session")
    def test_start_failure_returns_1(self, mock_session, mock_engine, mock_logging, mock_single,
                                     mock_handlers, temp_config_dir):
        mock_session.return_value.error = RuntimeError("no camera")
        assert main(["--config", str(temp_config_dir / "config.yaml"), "--no-display"]) == 1

    @patch("main.ensure_single_instance", return_value=False)
    @patch("main.setup_logging")
    @patch("main.create_engine")
    def test_second_instance_refused(self, mock_engine, mock_logging, mock_single, temp_config_dir):
        assert main(["--config", str(temp_config_dir / "config.yaml"), "--no-display"]) == 1
        mock_engine.assert_not_called()

    @patch("main.start_web_server")
    @patch("main.install_stop_handlers")
    @patch("main.ensure_single_instance", return_value=True)
    @patch("main.setup_logging")
    @patch("main.create_engine")
    @patch("main.build_session")
    def test_web_flag_registers_viewer(self, mock_session, mock_engine, mock_logging, mock_single,
                                       mock_handlers, mock_web, temp_config_dir):
        mock_session.return_value.error = None

        main(["--config", str(temp_config_dir / "config.yaml"), "--no-display", "--web"])

        mock_web.assert_called_once()
        viewer, corridor_cfg, web_cfg = mock_web.call_args.args
        mock_engine.return_value.add_callback.assert_called_once_with(viewer.update)
        assert corridor_cfg.min_scale == 0.2
        assert web_cfg.enabled is True
