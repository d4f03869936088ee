#!/usr/bin/env python3
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import Config, config as default_config
from .diagnostics import get_logger
from .models import CaptureResult
from .pipeline import capture_long_screenshot, disable_animations

logger = get_logger(__name__)

CHROME_CANDIDATES = [
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/Applications/Google Chrome Canary.app/Contents/MacOS/Google Chrome Canary",
    "/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge",
    "/Applications/Chromium.app/Contents/MacOS/Chromium",
    "/usr/bin/google-chrome",
    "/usr/bin/google-chrome-stable",
    "/usr/bin/microsoft-edge",
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
    r"C:\Program Files\Google\Chrome\Application\chrome.exe",
    r"C:\Program Files (x86)\Microsoft\Edge\Application\msedge.exe",
]


def pick_chrome_executable(
    explicit_path: Optional[str] = None,
    candidates: Optional[List[str]] = None,
) -> Optional[str]:
    """
    Locate a Chromium-based browser.

    Returns the explicit path when it exists, then the first installed
    well-known browser, otherwise None so Playwright uses its bundled Chromium.
    """
    if explicit_path:
        if os.path.exists(explicit_path):
            return explicit_path
        logger.warning(f"Browser not found at {explicit_path}; looking for an installed one")
    for candidate in candidates if candidates is not None else CHROME_CANDIDATES:
        if os.path.exists(candidate):
            return candidate
    return None


def _launch_args(settings: Config) -> Dict[str, Any]:
    args = []
    if settings.profile_directory:
        args.append(f"--profile-directory={settings.profile_directory}")
    launch_args: Dict[str, Any] = {
        "headless": bool(settings.headless),
        "args": args,
    }
    executable = pick_chrome_executable(settings.chrome_path)
    if executable:
        launch_args["executable_path"] = executable
    else:
        logger.info("No installed Chrome/Edge/Chromium found; using Playwright's Chromium")
    return launch_args


async def launch_capture_context(playwright, settings: Optional[Config] = None):
    """
    Start a browser context sized for capture.

    With settings.user_data_dir the profile persists between runs, so a login
    made once in a headful session is reused by later headless captures.
    """
    settings = settings or default_config
    launch_args = _launch_args(settings)
    context_args = {
        "viewport": {"width": settings.viewport_width, "height": settings.viewport_height},
        "device_scale_factor": settings.device_scale_factor,
    }

    if settings.user_data_dir:
        Path(settings.user_data_dir).mkdir(parents=True, exist_ok=True)
        context = await playwright.chromium.launch_persistent_context(
            settings.user_data_dir, **launch_args, **context_args
        )
        setattr(context, "_longshot_browser", None)
        return context

    browser = await playwright.chromium.launch(**launch_args)
    context = await browser.new_context(**context_args)
    setattr(context, "_longshot_browser", browser)
    return context


async def close_capture_context(context) -> None:
    await context.close()
    browser = getattr(context, "_longshot_browser", None)
    if browser is not None:
        await browser.close()


async def open_capture_page(context):
    """Reuse the page a persistent context opens with, or create one."""
    pages = context.pages
    if pages:
        return pages[0]
    return await context.new_page()


async def capture_url(
    url: str,
    output_path: Union[str, Path],
    settings: Optional[Config] = None,
) -> CaptureResult:
    """
    Open url in a fresh browser and write its long screenshot.

    The browser is always closed, also when the capture fails.
    """
    from playwright.async_api import async_playwright

    settings = settings or default_config
    async with async_playwright() as playwright:
        context = await launch_capture_context(playwright, settings)
        try:
            page = await open_capture_page(context)
            logger.info(f"Opening {url}")
            await page.goto(url, wait_until="domcontentloaded", timeout=settings.timeout_ms)
            await disable_animations(page)
            if settings.wait_ms > 0:
                logger.debug(f"Waiting {settings.wait_ms}ms for the page to settle")
                await page.wait_for_timeout(settings.wait_ms)
            return await capture_long_screenshot(page, output_path, settings)
        finally:
            await close_capture_context(context)
