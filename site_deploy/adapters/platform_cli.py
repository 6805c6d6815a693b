"""Shared behavior of adapters that delegate to a platform CLI"""

from abc import abstractmethod
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from ..constants import DeployLogLevel, DeployPhase
from ..models.deploy_config import DeployConfig
from ..models.result import DeployResult
from .base import DeployAdapter, UploadFile

# (substring, phase, overall progress, phase progress, message)
ProgressMarker = Tuple[str, DeployPhase, int, int, str]


class PlatformCliAdapter(DeployAdapter):
    """Adapter that runs ``npx <cli>`` and reads the deploy URL from its output"""

    required_tools = ("npx",)

    # First capture group is the deploy URL
    url_pattern: Optional[Pattern] = None
    progress_markers: Sequence[ProgressMarker] = (
        ("Uploading", DeployPhase.UPLOAD, 60, 30, "Uploading files..."),
    )

    @abstractmethod
    def build_args(self, config: DeployConfig, files: List[UploadFile]) -> List[str]:
        """Arguments passed to ``npx``"""

    def build_env(self, config: DeployConfig) -> Dict[str, str]:
        """Extra environment of the CLI process"""
        return {}

    def before_upload(self, config: DeployConfig) -> None:
        """Hook run after the files are collected, before the CLI starts"""

    def build_result(self, config: DeployConfig, urls: Dict[str, str],
                     files: List[UploadFile]) -> DeployResult:
        """Success result from the URLs seen in the output"""
        return self.create_success_result(
            urls.get("url"),
            platform_info={"files": len(files)},
        )

    def parse_line(self, line: str, urls: Dict[str, str]) -> None:
        """Record URLs found in one output line"""
        if self.url_pattern is not None:
            match = self.url_pattern.search(line)
            if match:
                urls["url"] = match.group(1)

    def _track_progress(self, line: str, file_count: int) -> None:
        for marker, phase, progress, phase_progress, message in self.progress_markers:
            if marker in line:
                self.update_progress(phase, progress, phase_progress, message,
                                     total_files=file_count)
                break

    async def _do_deploy(self, config: DeployConfig) -> DeployResult:
        files = self.prepare_files(config)
        self.before_upload(config)
        self.raise_if_cancelled()

        self.log(DeployLogLevel.INFO, f"Deploying with the {self.display_name} CLI...",
                 DeployPhase.UPLOAD)
        self.update_progress(DeployPhase.UPLOAD, 50, 0, f"Uploading to {self.display_name}...")

        urls: Dict[str, str] = {}

        def on_line(line: str) -> None:
            self.parse_line(line, urls)
            self._track_progress(line, len(files))

        result = await self.run_platform_cli(
            self.build_args(config, files),
            env=self.build_env(config),
            on_line=on_line,
        )
        if not result.ok:
            return self.cli_failed_result(result)

        self.update_progress(DeployPhase.PROCESS, 95, 100, "Deployment published")
        deploy_result = self.build_result(config, urls, files)
        if deploy_result.url:
            self.log(DeployLogLevel.SUCCESS, f"Deployed to {deploy_result.url}", DeployPhase.PROCESS)
        else:
            self.log(DeployLogLevel.WARN, "No deploy URL found in the CLI output", DeployPhase.PROCESS)
        return deploy_result
