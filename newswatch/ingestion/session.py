"""Headless browser session lifecycle."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Browser, Error as PlaywrightError, async_playwright

from ..exceptions import SessionUnavailableError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def browser_session(headless: bool = True) -> AsyncIterator[Browser]:
    """
    Launch one Chromium instance for a whole crawl cycle.

    The browser and the playwright driver are stopped on every exit path.

    Raises:
        SessionUnavailableError: the driver or the browser could not be started
    """
    try:
        playwright = await async_playwright().start()
    except (PlaywrightError, OSError) as e:
        raise SessionUnavailableError(f"Could not start playwright driver: {e}") from e

    try:
        try:
            browser = await playwright.chromium.launch(headless=headless)
        except PlaywrightError as e:
            raise SessionUnavailableError(f"Could not launch browser: {e}") from e

        logger.info("Browser session started")
        try:
            yield browser
        finally:
            await browser.close()
            logger.info("Browser session closed")
    finally:
        await playwright.stop()
