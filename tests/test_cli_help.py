import os
from pathlib import Path
import subprocess
import sys

_SRC = Path(__file__).resolve().parents[1] / "src"


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(_SRC), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "chartmodel.cli", *args],
        capture_output=True,
        text=True,
        env=env,
    )


def test_cli_help_top_level() -> None:
    result = _run_cli("--help")
    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()


def test_cli_help_subcommands() -> None:
    for subcommand in ("compute", "infer", "interpolate", "charts"):
        result = _run_cli(subcommand, "--help")
        assert result.returncode == 0
        assert "usage:" in result.stdout.lower()
