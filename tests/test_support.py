import asyncio
import io
import os
import tempfile
import time
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Generator
from unittest import mock

from qrpress.core.models import (
    GenerationConfig,
    GenerationMethod,
    GenerationResult,
    ImageFormat,
)
from qrpress.history.records import HistoryEntry, QrSettings

# =============================================================================
# Test Constants
# =============================================================================

TEST_URL = "https://example.com/path?q=1"
TEST_WIFI = "WIFI:T:WPA;S:HomeNet;P:secret123;;"
TEST_PDF_PASSWORD = "correct-horse"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
TINY_PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="
REPO_ROOT = Path(__file__).resolve().parents[1]


# =============================================================================
# Environment Helpers
# =============================================================================


@contextmanager
def temp_env(overrides: dict[str, str], *, clear: bool = False):
    with mock.patch.dict(os.environ, overrides, clear=clear):
        yield


@contextmanager
def isolated_dirs() -> Generator[Path, None, None]:
    """Point XDG config and data dirs at a throwaway directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        with temp_env(
            {
                "XDG_CONFIG_HOME": str(root / "config"),
                "XDG_DATA_HOME": str(root / "data"),
            }
        ):
            yield root


def build_cli_env(*, overrides: dict[str, str] | None = None) -> dict[str, str]:
    env = os.environ.copy()
    src = str(REPO_ROOT / "src")
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [src, env.get("PYTHONPATH")]))
    if overrides:
        env.update(overrides)
    return env


@contextmanager
def suppress_output():
    stdout = io.StringIO()
    stderr = io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        yield


# =============================================================================
# Clocks
# =============================================================================


class FakeClock:
    """Manually advanced clock usable wherever a ``clock`` callable is accepted."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Result / Strategy Builders
# =============================================================================


def make_result(
    *,
    method: GenerationMethod = GenerationMethod.CLIENT_CANVAS,
    image_format: str = ImageFormat.PNG.value,
    size: int = 512,
    data_url: str = TINY_PNG_DATA_URL,
    warning: str | None = None,
) -> GenerationResult:
    return GenerationResult(
        data_url=data_url,
        format=image_format,
        size=size,
        timestamp=time.time(),
        method=method,
        warning=warning,
    )


class StubStrategy:
    """Strategy double that counts calls and either returns or raises."""

    def __init__(
        self,
        method: GenerationMethod,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
        warning: str | None = None,
    ) -> None:
        self.method = method
        self.error = error
        self.delay = delay
        self.warning = warning
        self.calls: list[tuple[str, GenerationConfig]] = []

    async def render(self, text: str, config: GenerationConfig) -> GenerationResult:
        self.calls.append((text, config))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return make_result(
            method=self.method,
            image_format=config.format,
            size=config.size,
            warning=self.warning,
        )


# =============================================================================
# History Builders
# =============================================================================


def make_settings(*, image_format: str = "png", size: int = 512) -> QrSettings:
    return QrSettings.from_config(GenerationConfig(format=image_format, size=size))


def make_entry(text: str = TEST_URL, *, image_format: str = "png", size: int = 512) -> HistoryEntry:
    return HistoryEntry(
        text_content=text,
        settings=make_settings(image_format=image_format, size=size),
        generation_method=GenerationMethod.CLIENT_CANVAS.value,
        browser_info="unknown",
    )


# =============================================================================
# File System Helpers
# =============================================================================


@contextmanager
def temp_files(
    **kwargs: bytes | str,
) -> Generator[dict[str, Path], None, None]:
    """Create temporary files with specified content.

    Usage:
        with temp_files(config="[qr]\\nsize = 256\\n") as paths:
            paths["config"]  # Path to file with the TOML text
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        tmp_path = Path(tmpdir)
        result: dict[str, Path] = {}
        for name, content in kwargs.items():
            file_path = tmp_path / name
            if isinstance(content, bytes):
                file_path.write_bytes(content)
            else:
                file_path.write_text(content, encoding="utf-8")
            result[name] = file_path
        result["_dir"] = tmp_path
        yield result


@contextmanager
def temp_directory() -> Generator[Path, None, None]:
    """Create a temporary directory with cleanup."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Image / PDF Helpers
# =============================================================================


def is_valid_pdf(data: bytes) -> bool:
    """Check if bytes represent a valid PDF file."""
    return data.startswith(b"%PDF-") and b"%%EOF" in data[-128:]


def decode_qr_text(image_bytes: bytes) -> str | None:
    """Decode a QR image with zxing-cpp; ``None`` when zxing-cpp is not installed."""
    try:
        import zxingcpp
    except ImportError:
        return None
    from PIL import Image

    image = Image.open(io.BytesIO(image_bytes))
    image.load()
    results = zxingcpp.read_barcodes(image)
    if not results:
        return ""
    return results[0].text
