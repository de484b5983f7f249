import subprocess
import sys

import pytest

from clapboard.errors import LauncherError
from clapboard.services import LauncherPicker


def python_launcher(code: str):
    return [sys.executable, "-c", code]


def test_returns_chosen_line_and_receives_menu_on_stdin():
    picker = LauncherPicker(python_launcher(
        "import sys; lines = sys.stdin.buffer.read().split(b'\\n'); sys.stdout.buffer.write(lines[1] + b'\\n')"
    ))

    assert picker.present(["1: first", "2: second ★", "3: third"]) == "2: second ★"


def test_launcher_arguments_are_passed_through():
    picker = LauncherPicker(python_launcher("import sys; print(sys.argv[1])") + ["--prompt=clip: "])

    assert picker.present(["1: x"]) == "--prompt=clip: "


@pytest.mark.parametrize("code", ["import sys; sys.exit(0)", "import sys; sys.exit(1)"])
def test_empty_output_is_cancellation(code):
    assert LauncherPicker(python_launcher(code)).present(["1: a"]) is None


def test_missing_program_raises_launcher_error():
    picker = LauncherPicker(["clapboard-no-such-launcher-binary"])

    with pytest.raises(LauncherError):
        picker.present(["1: a"])


def test_abnormal_exit_raises_launcher_error():
    picker = LauncherPicker(python_launcher("import sys; sys.exit(3)"))

    with pytest.raises(LauncherError):
        picker.present(["1: a"])


def test_output_with_error_status_raises_launcher_error():
    picker = LauncherPicker(python_launcher("import sys; print('1: a'); sys.exit(2)"))

    with pytest.raises(LauncherError):
        picker.present(["1: a"])


def test_killed_launcher_raises_launcher_error(monkeypatch):
    def killed(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, -9, stdout=b"")

    monkeypatch.setattr(subprocess, "run", killed)

    with pytest.raises(LauncherError, match="signal 9"):
        LauncherPicker(["tofi"]).present(["1: a"])


def test_windows_line_endings_are_stripped(monkeypatch):
    seen = {}

    def fake_run(cmd, input, stdout, check):
        seen["input"] = input
        return subprocess.CompletedProcess(cmd, 0, stdout=b"2: b\r\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert LauncherPicker(["rofi", "-dmenu"]).present(["1: a", "2: b"]) == "2: b"
    assert seen["input"] == b"1: a\n2: b"


def test_empty_command_rejected():
    with pytest.raises(ValueError):
        LauncherPicker([])
