"""Slicing through the OrcaSlicer CLI and G-code inspection."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from orca_mcp.config.settings import SLICE_TIMEOUT_MS, ServerSettings
from orca_mcp.errors import NotFoundError, ProcessFailureError
from orca_mcp.parsing.gcode import GcodeMetadata, parse_gcode_metadata
from orca_mcp.profiles.store import ProfileCategory, ProfileStore
from orca_mcp.runner.process import SubprocessRunner
from orca_mcp.security.filenames import validate_filename
from orca_mcp.security.sandbox import PathSandbox
from orca_mcp.storage.audit import AuditLog
from orca_mcp.storage.files import SafeFileIO

logger = logging.getLogger(__name__)

# CLI flag used to load each optional profile category.
PROFILE_FLAGS: dict[ProfileCategory, str] = {
    ProfileCategory.MACHINE: "--load-settings",
    ProfileCategory.FILAMENT: "--load-filaments",
    ProfileCategory.PROCESS: "--load-process",
}


class SliceRequest(BaseModel):
    """Arguments for a slicing run. Filenames are leaf names, not paths."""

    input_file: str = Field(min_length=1, description="STL / 3MF input file in the work directory")
    output_file: str = Field(min_length=1, description="G-code output file name")
    profile_machine: str | None = Field(default=None, description="Machine profile filename")
    profile_filament: str | None = Field(default=None, description="Filament profile filename")
    profile_process: str | None = Field(default=None, description="Process profile filename")
    timeout_ms: int = Field(default=SLICE_TIMEOUT_MS, gt=0, description="Timeout in milliseconds")

    def profiles(self) -> dict[ProfileCategory, str]:
        selected = {
            ProfileCategory.MACHINE: self.profile_machine,
            ProfileCategory.FILAMENT: self.profile_filament,
            ProfileCategory.PROCESS: self.profile_process,
        }
        return {category: name for category, name in selected.items() if name}


class SliceResult(BaseModel):
    success: bool = True
    output_file: str
    stdout: str = ""
    stderr: str = ""


class HealthReport(BaseModel):
    """Availability of the binary and both sandbox roots."""

    orca_slicer_path: str = Field(serialization_alias="orcaSlicerPath")
    binary_found: bool = Field(serialization_alias="binaryFound")
    user_dir: str = Field(serialization_alias="userDir")
    user_dir_accessible: bool = Field(serialization_alias="userDirAccessible")
    work_dir: str = Field(serialization_alias="workDir")
    work_dir_accessible: bool = Field(serialization_alias="workDirAccessible")


class SliceService:
    """Composes the sandbox, file I/O, runner and audit log for slicing."""

    def __init__(
        self,
        settings: ServerSettings,
        sandbox: PathSandbox,
        files: SafeFileIO,
        runner: SubprocessRunner,
        profiles: ProfileStore,
        audit: AuditLog,
    ) -> None:
        self.settings = settings
        self.sandbox = sandbox
        self.files = files
        self.runner = runner
        self.profiles = profiles
        self.audit = audit

    @property
    def workdir(self) -> Path:
        return self.settings.workdir

    def build_arguments(self, request: SliceRequest) -> list[str]:
        """Build the OrcaSlicer argument vector.

        Every filename is validated and every resulting path sandboxed before
        it becomes an argument.
        """
        input_path = self.sandbox.resolve(self.workdir / validate_filename(request.input_file))
        output_path = self.sandbox.resolve(self.workdir / validate_filename(request.output_file))

        argv = ["--slice", str(input_path), "-o", str(output_path)]
        for category, name in request.profiles().items():
            profile_path = self.sandbox.resolve(self.profiles.path_for(category, name))
            argv.extend([PROFILE_FLAGS[category], str(profile_path)])
        return argv

    def slice_model(self, request: SliceRequest) -> SliceResult:
        """Slice a model into G-code.

        Raises:
            AccessDeniedError: If a filename is unsafe or a path escapes the sandbox.
            NotFoundError: If the input model does not exist.
            ProcessFailureError: If the slicer fails, cannot start or times out.
        """
        argv = self.build_arguments(request)

        if not self.files.exists(self.workdir / request.input_file):
            raise NotFoundError(
                f"Input file not found: {request.input_file}",
                path=request.input_file,
            )

        logger.info("Slicing", extra={"input_file": request.input_file, "output_file": request.output_file})
        try:
            result = self.runner.run(argv, timeout_ms=request.timeout_ms)
        except ProcessFailureError as e:
            self.audit.record(
                "slice_model_failed",
                {
                    "input": request.input_file,
                    "output": request.output_file,
                    "exitCode": e.exit_code,
                    "timedOut": e.timed_out,
                },
            )
            raise

        self.audit.record(
            "slice_model",
            {
                "input": request.input_file,
                "output": request.output_file,
                "exitCode": result.exit_code,
            },
        )
        return SliceResult(
            output_file=request.output_file,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    def analyze_gcode(self, name: str) -> GcodeMetadata:
        """Read a G-code file from the work directory and extract its metadata."""
        content = self.files.read_bytes(self.workdir / validate_filename(name))
        return parse_gcode_metadata(content.decode("utf-8", errors="replace"))

    def health(self) -> HealthReport:
        user_dir = self.settings.user_dir
        user_dir_accessible = self.sandbox.contains(user_dir) and user_dir.is_dir()
        return HealthReport(
            orca_slicer_path=self.runner.binary_path,
            binary_found=self.runner.binary_available(),
            user_dir=str(user_dir),
            user_dir_accessible=user_dir_accessible,
            work_dir=str(self.workdir),
            work_dir_accessible=self.workdir.is_dir(),
        )
