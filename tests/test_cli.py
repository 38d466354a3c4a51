"""Tests for the command-line interface."""

import pytest
import yaml


@pytest.fixture
def config_file(tmp_path, fast_config_dict):
    """Write the fast configuration to a YAML file."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(fast_config_dict), encoding="utf-8")
    return str(path)


class TestCli:
    """Test cases for faceid.cli."""

    def test_no_command_prints_help(self, capsys):
        """Running without a command shows help and exits cleanly."""
        from faceid.cli import main

        with pytest.raises(SystemExit) as exc:
            main([])

        assert exc.value.code == 0
        assert "faceid" in capsys.readouterr().out

    def test_register_and_list(self, config_file, capsys):
        """Registered members show up in the listing."""
        from faceid.cli import main

        main(["-c", config_file, "register", "Ada", "--no-camera"])
        main(["-c", config_file, "register", "Grace", "--no-camera"])
        capsys.readouterr()

        main(["-c", config_file, "list"])
        out = capsys.readouterr().out

        assert "Ada" in out
        assert "Grace" in out
        assert out.index("Ada") < out.index("Grace")
        assert "Total: 2" in out

    def test_register_blank_name_fails(self, config_file, capsys):
        """A blank name exits non-zero with a warning."""
        from faceid.cli import main

        with pytest.raises(SystemExit) as exc:
            main(["-c", config_file, "register", "   ", "--no-camera"])

        assert exc.value.code == 1
        assert "Please enter a name." in capsys.readouterr().out

    def test_list_empty(self, config_file, capsys):
        """An empty store says so."""
        from faceid.cli import main

        main(["-c", config_file, "list"])
        assert "No registered members." in capsys.readouterr().out

    def test_scan_grants_latest_member(self, config_file, capsys):
        """A scan after registering grants the latest member."""
        from faceid.cli import main

        main(["-c", config_file, "register", "Ada", "--no-camera"])
        main(["-c", config_file, "register", "Grace", "--no-camera"])
        capsys.readouterr()

        main(["-c", config_file, "scan", "--no-camera", "--no-redirect"])

        assert "IDENTITY CONFIRMED: Grace" in capsys.readouterr().out

    def test_scan_without_members_fails(self, config_file, capsys):
        """Denied scans exit non-zero with the reason."""
        from faceid.cli import main

        with pytest.raises(SystemExit) as exc:
            main(["-c", config_file, "scan", "--no-camera", "--no-redirect"])

        assert exc.value.code == 1
        assert "Access Denied: No Registered Members" in capsys.readouterr().out

    def test_scan_missing_image_fails(self, config_file, tmp_path):
        """An unreadable image is an error."""
        from faceid.cli import main

        with pytest.raises(SystemExit) as exc:
            main(["-c", config_file, "scan", "-i", str(tmp_path / "missing.png")])

        assert exc.value.code == 1

    def test_detect_on_image(self, tmp_path, fast_config_dict):
        """detect reports on an image and writes the annotated copy."""
        import cv2
        import numpy as np

        from faceid.cli import main

        fast_config_dict["detection"] = {"backend": "haar_cascade"}
        config_path = tmp_path / "haar.yaml"
        config_path.write_text(yaml.safe_dump(fast_config_dict), encoding="utf-8")

        image_path = tmp_path / "black.png"
        cv2.imwrite(str(image_path), np.zeros((120, 160, 3), dtype=np.uint8))
        output_path = tmp_path / "out.png"

        main(["-c", str(config_path), "detect", "-i", str(image_path), "-o", str(output_path)])

        assert output_path.exists()
