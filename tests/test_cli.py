import json
import cv2
import pytest

from conftest import bgr_canvas, filled_disc
from pixel_info.cli.demo import main


@pytest.fixture
def line_png(tmp_path):
    pixels = bgr_canvas(60, 80)
    pixels[:, 20] = (255, 255, 255)
    path = tmp_path / "line.png"
    cv2.imwrite(str(path), pixels)
    return path


def test_line_command(line_png, capsys):
    assert main(["line", str(line_png)]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["status"] == "found"
    assert summary["offset"] == pytest.approx(20 / 80 * 2 - 1)
    assert summary["orientation"] == 0.0


def test_blur_command(line_png, capsys):
    assert main(["blur", str(line_png), "--threshold", "1e9"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["blurry"] is True
    assert summary["threshold"] == 1e9


def test_blob_command_writes_annotation(tmp_path, capsys):
    path = tmp_path / "ball.png"
    cv2.imwrite(str(path), filled_disc(120, 120, (60, 60), 25, (0, 255, 0)).pixels)
    output = tmp_path / "ball_out.png"
    argv = ["blob", str(path), "--low", "50", "100", "100", "--high", "70", "255", "255",
            "--output", str(output)]
    assert main(argv) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["found"] is True
    assert summary["centre"] == pytest.approx([60, 60], abs=2)
    assert output.is_file()


def test_blob_command_nothing_in_range(line_png, capsys):
    argv = ["blob", str(line_png), "--low", "0", "0", "0", "--high", "10", "10", "10"]
    assert main(argv) == 0
    assert json.loads(capsys.readouterr().out) == {"found": False}


def test_missing_image(tmp_path):
    assert main(["shape", str(tmp_path / "missing.png")]) == 1


def test_unknown_command():
    with pytest.raises(SystemExit):
        main(["sharpen", "x.png"])


def test_invalid_parameter_exits_non_zero(line_png):
    assert main(["shape", str(line_png), "--epsilon", "-1"]) == 1
