"""
Bootstrapper installer — download a package and run its installer.

Two suspension points, both cancellable:

    1. Download: ``urllib.request`` on a worker thread, 64 KiB chunks,
       the token checked between chunks. The partial file is deleted on
       cancellation or failure.
    2. Install: the platform installer is launched through
       ``run_process``, which kills it if the token fires.

Supported package types:
    .pkg  → installer -pkg <file> -target /        (macOS)
    .msi  → msiexec /i <file> /qn /norestart        (Windows)
    .exe  → <file> /install /quiet /norestart       (Windows)
    .sh   → bash <file>                             (macOS / Linux)
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
import urllib.parse
import urllib.request
from pathlib import Path

from sdkdoctor.adapters.base import Installer, InstallerError
from sdkdoctor.adapters.shell.command import run_process
from sdkdoctor.core.engine.cancellation import CancellationToken, OperationCancelled
from sdkdoctor.core.services import host

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_USER_AGENT = "sdkdoctor/0.1"


def _fmt_size(n: int) -> str:
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.0f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


def installer_command(package: Path) -> list[str]:
    """Build the platform command that installs ``package``.

    Raises:
        InstallerError: For unsupported package types.
    """
    suffix = package.suffix.lower()
    if suffix == ".pkg":
        return ["installer", "-pkg", str(package), "-target", "/"]
    if suffix == ".msi":
        return ["msiexec", "/i", str(package), "/qn", "/norestart"]
    if suffix == ".exe":
        return [str(package), "/install", "/quiet", "/norestart"]
    if suffix == ".sh":
        return ["bash", str(package)]
    raise InstallerError(f"Unsupported installer type: {package.name}")


def _file_name_for(url: str) -> str:
    name = Path(urllib.parse.urlparse(url).path).name
    return name or "installer"


def _download(url: str, dest: Path, token: CancellationToken, timeout: int) -> int:
    """Blocking download; runs on a worker thread."""
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    downloaded = 0
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            total = int(resp.headers.get("Content-Length", 0) or 0)
            last_progress = -1
            with open(dest, "wb") as f:
                while True:
                    token.raise_if_cancelled()
                    chunk = resp.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    f.write(chunk)
                    downloaded += len(chunk)

                    # Log every 10%
                    if total > 0:
                        pct = int(downloaded * 100 / total)
                        if pct >= last_progress + 10:
                            last_progress = pct
                            logger.info(
                                "Download progress: %d%% (%s / %s)",
                                pct, _fmt_size(downloaded), _fmt_size(total),
                            )
    except OperationCancelled:
        dest.unlink(missing_ok=True)
        raise
    except Exception as e:
        dest.unlink(missing_ok=True)
        raise InstallerError(f"Download failed: {e}") from e

    return downloaded


class BootstrapperInstaller(Installer):
    """Download-and-run installer for ``.pkg``, ``.msi``, ``.exe`` and ``.sh`` packages."""

    def __init__(
        self,
        download_dir: str | Path | None = None,
        timeout: int = 1800,
        download_timeout: int = 60,
    ):
        self._download_dir = Path(download_dir).expanduser() if download_dir else None
        self._timeout = timeout
        self._download_timeout = download_timeout

    @property
    def name(self) -> str:
        return "bootstrapper"

    @property
    def tool(self) -> str:
        """The platform program that runs downloaded packages."""
        platform_name = host.current_platform()
        if platform_name == host.MACOS:
            return "installer"
        if platform_name == host.WINDOWS:
            return "msiexec"
        return "bash"

    def is_available(self) -> bool:
        return shutil.which(self.tool) is not None

    async def install(self, url: str, token: CancellationToken) -> None:
        if not url:
            raise InstallerError("No installer URL specified")
        token.raise_if_cancelled()

        if self._download_dir is not None:
            self._download_dir.mkdir(parents=True, exist_ok=True)
            await self._install_into(self._download_dir, url, token, keep=True)
            return

        with tempfile.TemporaryDirectory(prefix="sdkdoctor-") as tmp:
            await self._install_into(Path(tmp), url, token, keep=False)

    async def _install_into(
        self,
        directory: Path,
        url: str,
        token: CancellationToken,
        keep: bool,
    ) -> None:
        package = directory / _file_name_for(url)
        # Fail fast on unsupported types before downloading anything.
        cmd = installer_command(package)

        logger.info("Downloading %s → %s", url, package)
        size = await asyncio.to_thread(_download, url, package, token, self._download_timeout)
        logger.info("Downloaded %s (%s)", package.name, _fmt_size(size))

        if package.suffix.lower() in (".exe", ".sh"):
            package.chmod(0o755)

        try:
            result = await run_process(cmd, token, timeout=self._timeout)
        finally:
            if not keep:
                package.unlink(missing_ok=True)

        if result.error:
            raise InstallerError(f"{package.name}: {result.error}")
        if result.returncode != 0:
            detail = result.stderr.strip().splitlines()[-1:] if result.stderr else []
            raise InstallerError(
                f"{package.name} exited with code {result.returncode}"
                + (f": {detail[0]}" if detail else "")
            )
        logger.info("Installed %s", package.name)
