"""Init scripts that hide the most common automation fingerprints."""

import re
from typing import List, Optional, Union

from loguru import logger
from playwright.async_api import BrowserContext, Page

ScriptTarget = Union[BrowserContext, Page]

_LANGUAGE_PATTERN = re.compile(r"^[a-zA-Z]{2}(-[a-zA-Z]{2,4})?$")


class StealthConfig:
    """Apply stealth scripts to a browser context or page."""

    DEFAULT_LANGUAGES: List[str] = ["en-US", "en"]

    @staticmethod
    async def apply_stealth(target: ScriptTarget, languages: Optional[List[str]] = None) -> None:
        """
        Apply all stealth configurations.

        Scripts registered on a context run in every page it opens, before
        any site script.

        Args:
            target: Playwright browser context or page
            languages: Language codes for navigator.languages spoofing

        Raises:
            ValueError: If a language code contains invalid characters
        """
        await StealthConfig._override_webdriver(target)
        await StealthConfig._spoof_plugins(target)
        await StealthConfig._spoof_languages(target, languages=languages)
        await StealthConfig._add_chrome_runtime(target)
        await StealthConfig._override_permissions(target)
        logger.debug("Stealth configurations applied")

    @staticmethod
    async def _override_webdriver(target: ScriptTarget) -> None:
        """Override navigator.webdriver flag."""
        await target.add_init_script(
            """
            Object.defineProperty(navigator, 'webdriver', {
                get: () => undefined,
                configurable: true
            });
        """
        )

    @staticmethod
    async def _spoof_plugins(target: ScriptTarget) -> None:
        """Report the PDF viewer plugins a desktop Chrome exposes."""
        await target.add_init_script(
            """
            Object.defineProperty(navigator, 'plugins', {
                get: () => [
                    {
                        0: {type: "application/pdf", suffixes: "pdf", description: "Portable Document Format"},
                        description: "Portable Document Format",
                        filename: "internal-pdf-viewer",
                        length: 1,
                        name: "PDF Viewer"
                    },
                    {
                        0: {type: "application/pdf", suffixes: "pdf", description: "Portable Document Format"},
                        description: "Portable Document Format",
                        filename: "internal-pdf-viewer",
                        length: 1,
                        name: "Chrome PDF Viewer"
                    }
                ],
                configurable: true
            });
        """
        )

    @staticmethod
    async def _spoof_languages(target: ScriptTarget, languages: Optional[List[str]] = None) -> None:
        """Spoof navigator.languages.

        Args:
            target: Playwright browser context or page
            languages: Language codes to report, defaults to US English

        Raises:
            ValueError: If language codes contain invalid characters
        """
        if languages is None:
            languages = StealthConfig.DEFAULT_LANGUAGES

        for lang in languages:
            if not _LANGUAGE_PATTERN.match(lang):
                raise ValueError(f"Invalid language code: {lang}. Must match pattern 'xx' or 'xx-YY'")

        languages_js = ", ".join(f"'{lang}'" for lang in languages)
        await target.add_init_script(f"""
            Object.defineProperty(navigator, 'languages', {{
                get: () => [{languages_js}],
                configurable: true
            }});
        """)

    @staticmethod
    async def _add_chrome_runtime(target: ScriptTarget) -> None:
        """Add chrome runtime object."""
        await target.add_init_script(
            """
            window.chrome = window.chrome || {
                runtime: {},
                loadTimes: function() {},
                csi: function() {},
                app: {}
            };
        """
        )

    @staticmethod
    async def _override_permissions(target: ScriptTarget) -> None:
        """Answer notification permission queries like a real profile."""
        await target.add_init_script(
            """
            const originalQuery = window.navigator.permissions.query;
            window.navigator.permissions.query = (parameters) => (
                parameters.name === 'notifications' ?
                    Promise.resolve({ state: Notification.permission }) :
                    originalQuery(parameters)
            );
        """
        )
