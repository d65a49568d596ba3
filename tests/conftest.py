"""Shared test fixtures for orca-mcp tests."""

from __future__ import annotations

import json
import stat
import sys
from pathlib import Path

import pytest

from orca_mcp.config import AllowedRoots, ServerSettings
from orca_mcp.security import PathSandbox
from orca_mcp.storage import AuditLog, SafeFileIO

SAMPLE_GCODE = "\n".join(
    [
        "G28 ; home all axes",
        "G1 Z5 F5000",
        "G1 X100 Y100 F3000",
        "G1 Z0.2",
        "; ... (body of gcode) ...",
        "; filament used [mm] = 12345.67",
        "; filament used [g] = 37.5",
        "; filament cost = 1.23",
        "; total layers count = 150",
        "; estimated printing time = 2h 15m 30s",
    ]
)

PROFILES: dict[str, dict[str, dict[str, object]]] = {
    "machine": {
        "my_printer.json": {
            "machine_name": "Test Printer",
            "bed_size_x": 220,
            "bed_size_y": 220,
            "max_print_speed": 200,
        },
    },
    "filament": {
        "pla_generic.json": {
            "filament_type": "PLA",
            "temperature_nozzle": 210,
            "temperature_bed": 60,
            "fan_speed": 100,
        },
    },
    "process": {
        "standard_quality.json": {
            "layer_height": 0.2,
            "infill_density": 20,
            "infill_pattern": "grid",
            "print_speed": 60,
            "travel_speed": 120,
            "support_enabled": False,
        },
    },
}

# Stand-in for the OrcaSlicer CLI: writes a G-code file to the path after -o.
FAKE_SLICER = """\
import json
import sys

args = sys.argv[1:]
if any(arg.endswith("explode.stl") for arg in args):
    sys.stderr.write("slicing exploded\\n")
    sys.exit(3)
output = args[args.index("-o") + 1]
with open(output, "w") as handle:
    handle.write("G28\\n; total layers count = 42\\n")
print(json.dumps(args))
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host configuration out of settings built during tests."""
    for var in ("ORCA_SLICER_PATH", "ORCA_USER_DIR", "ORCA_WORKDIR", "MCP_LOG_LEVEL", "SLICE_TIMEOUT_MS"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Create a work directory containing one sample G-code file and one model."""
    work = tmp_path / "work"
    work.mkdir()
    (work / "test_output.gcode").write_text(SAMPLE_GCODE)
    (work / "cube.stl").write_text("solid cube\nendsolid cube\n")
    return work


@pytest.fixture
def user_dir(tmp_path: Path) -> Path:
    """Create an OrcaSlicer user directory with one profile per category."""
    orca = tmp_path / "orca-user"
    for category, profiles in PROFILES.items():
        directory = orca / category
        directory.mkdir(parents=True)
        for name, content in profiles.items():
            (directory / name).write_text(json.dumps(content))
    return orca


@pytest.fixture
def roots(workdir: Path, user_dir: Path) -> AllowedRoots:
    return AllowedRoots.from_paths(workdir, user_dir)


@pytest.fixture
def sandbox(roots: AllowedRoots) -> PathSandbox:
    return PathSandbox(roots)


@pytest.fixture
def files(sandbox: PathSandbox) -> SafeFileIO:
    return SafeFileIO(sandbox)


@pytest.fixture
def audit(workdir: Path) -> AuditLog:
    return AuditLog(workdir / "tuning_history.log")


@pytest.fixture
def fake_slicer(tmp_path: Path) -> Path:
    """Write an executable script that behaves like a minimal OrcaSlicer CLI."""
    script = tmp_path / "bin" / "fake-orca-slicer"
    script.parent.mkdir()
    script.write_text(f"#!{sys.executable}\n{FAKE_SLICER}")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def settings(workdir: Path, user_dir: Path, fake_slicer: Path) -> ServerSettings:
    return ServerSettings(
        workdir=workdir,
        user_dir=user_dir,
        slicer_path=fake_slicer,
        log_level="error",
    )


@pytest.fixture
def read_audit(workdir: Path):
    """Return a callable that loads every audit entry written so far."""

    def _read() -> list[dict[str, object]]:
        path = workdir / "tuning_history.log"
        if not path.exists():
            return []
        return [json.loads(line) for line in path.read_text().splitlines() if line]

    return _read



@pytest.fixture
def sample_gcode() -> str:
    return SAMPLE_GCODE
