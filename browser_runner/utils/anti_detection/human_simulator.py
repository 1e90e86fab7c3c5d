"""Simulate human interaction timing using eased Bézier paths and random delays."""

import asyncio
import random
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from browser_runner.constants import Delays, Timeouts
from browser_runner.services.browser.page_driver import PageDriver

Point = Tuple[float, float]


def _ease_in_out(t: float) -> float:
    return t * t * (3 - 2 * t)


class HumanSimulator:
    """Human-scale pauses, pointer movement, typing and scrolling over a PageDriver."""

    def __init__(
        self,
        driver: PageDriver,
        config: Optional[dict] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize human simulator.

        Args:
            driver: Page driver to act on
            config: Human behaviour settings (``time_scale``, ``typing_wpm_range``,
                ``click_delay_range``); a ``time_scale`` of 0 disables every pause
            rng: Random source, injectable for deterministic tests
        """
        self.driver = driver
        self.config = config or {}
        self.time_scale = float(self.config.get("time_scale", 1.0))
        self.typing_wpm_range = self.config.get("typing_wpm_range", [40, 80])
        self.click_delay_range = self.config.get("click_delay_range", [0.1, 0.5])
        self.rng = rng or random.Random()
        self.pointer: Point = (self.rng.uniform(50, 150), self.rng.uniform(50, 150))

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.rng.random() < probability

    async def pause(self, bounds: Sequence[float]) -> float:
        """
        Sleep for a random duration within ``bounds`` seconds.

        Args:
            bounds: (min, max) seconds before time scaling

        Returns:
            Seconds actually slept
        """
        seconds = self.rng.uniform(bounds[0], bounds[1]) * self.time_scale
        if seconds > 0:
            await asyncio.sleep(seconds)
        return seconds

    def pointer_path(self, start: Point, end: Point, steps: int = 30) -> List[Point]:
        """
        Generate a cubic Bézier path with eased progress and jitter.

        Formula: B(t) = (1-t)³P₀ + 3(1-t)²tP₁ + 3(1-t)t²P₂ + t³P₃
        where t follows a smoothstep easing, P₀=start, P₃=end, and P₁, P₂ are
        random control points. Every intermediate point gets up to one pixel
        of jitter; the last point is exactly ``end``.

        Args:
            start: Starting point (x, y)
            end: Ending point (x, y)
            steps: Number of points to generate (at least 2)

        Returns:
            List of (x, y) points along the curve
        """
        steps = max(steps, 2)
        dx = end[0] - start[0]
        dy = end[1] - start[1]

        cp1 = (
            start[0] + dx * self.rng.uniform(0.2, 0.4) + self.rng.uniform(-50, 50),
            start[1] + dy * self.rng.uniform(0.2, 0.4) + self.rng.uniform(-50, 50),
        )
        cp2 = (
            start[0] + dx * self.rng.uniform(0.6, 0.8) + self.rng.uniform(-50, 50),
            start[1] + dy * self.rng.uniform(0.6, 0.8) + self.rng.uniform(-50, 50),
        )

        points: List[Point] = []
        for i in range(steps - 1):
            t = _ease_in_out(i / (steps - 1))
            x = (1-t)**3 * start[0] + 3*(1-t)**2*t * cp1[0] + 3*(1-t)*t**2 * cp2[0] + t**3 * end[0]
            y = (1-t)**3 * start[1] + 3*(1-t)**2*t * cp1[1] + 3*(1-t)*t**2 * cp2[1] + t**3 * end[1]
            points.append((x + self.rng.uniform(-1, 1), y + self.rng.uniform(-1, 1)))
        points.append((float(end[0]), float(end[1])))
        return points

    async def move_to(self, x: float, y: float, steps: Optional[int] = None) -> None:
        """
        Move the pointer along a human-like path.

        Args:
            x: Target x coordinate
            y: Target y coordinate
            steps: Number of path points, random 15-30 when omitted
        """
        steps = steps or self.rng.randint(15, 30)
        for px, py in self.pointer_path(self.pointer, (x, y), steps):
            await self.driver.mouse_move(px, py)
            await self.pause(Delays.POINTER_STEP)
        self.pointer = (x, y)

    async def click(
        self,
        selector: str,
        nth: int = 0,
        frame: Optional[str] = None,
        timeout: int = Timeouts.CLICK,
    ) -> None:
        """
        Move to a random point inside the element, hesitate, then click it.

        Elements without a layout box (e.g. hidden behind an overlay) are
        clicked directly so the driver reports the real failure.

        Args:
            selector: Element selector
            nth: Index among matches (negative counts from the end)
            frame: Optional iframe selector
            timeout: Click timeout in milliseconds
        """
        box = await self.driver.bounding_box(selector, timeout=timeout, nth=nth, frame=frame)
        if box:
            target_x = box["x"] + self.rng.uniform(box["width"] * 0.2, box["width"] * 0.8)
            target_y = box["y"] + self.rng.uniform(box["height"] * 0.2, box["height"] * 0.8)
            await self.move_to(target_x, target_y)

        await self.pause(self.click_delay_range)
        await self.driver.click(selector, timeout=timeout, nth=nth, frame=frame)
        await self.pause(Delays.AFTER_CLICK)
        logger.debug(f"Human click on {selector}")

    def keystroke_delay(self) -> float:
        """Milliseconds between keys for a random 40-80 WPM typist (5 chars per word)."""
        wpm = self.rng.uniform(*self.typing_wpm_range)
        return 60_000 / (wpm * 5) * self.time_scale

    async def type(
        self,
        selector: str,
        text: str,
        nth: int = 0,
        frame: Optional[str] = None,
        timeout: int = Timeouts.SELECTOR_WAIT,
    ) -> None:
        """
        Focus an input with a human click and type into it key by key.

        Args:
            selector: Input selector
            text: Text to type
            nth: Index among matches
            frame: Optional iframe selector
            timeout: Timeout in milliseconds
        """
        await self.click(selector, nth=nth, frame=frame, timeout=timeout)
        delay = self.keystroke_delay()
        await self.driver.type(selector, text, delay=delay, timeout=timeout, nth=nth, frame=frame)
        logger.debug(f"Typed {len(text)} characters at {delay:.0f} ms/key")

    def random_scroll_distance(self, viewport_height: int) -> int:
        """Random distance between half and a full viewport height."""
        return int(viewport_height * 0.5 + self.rng.random() * viewport_height * 0.5)

    async def smooth_scroll(self, distance: float, direction: str = "down", steps: int = 30) -> None:
        """
        Scroll ``distance`` pixels in small steps with tiny random pauses.

        Args:
            distance: Total pixels to scroll
            direction: "down" or "up"
            steps: Number of increments
        """
        if distance <= 0:
            return
        step = distance / steps
        sign = -1 if direction == "up" else 1
        for _ in range(steps):
            await self.driver.scroll_by(sign * step)
            await self.pause(Delays.SCROLL_STEP)

    async def wander(self) -> None:
        """Drift the pointer across the page and back near the top-left, below the navbar."""
        await self.move_to(self.rng.uniform(50, 150), self.rng.uniform(50, 150), steps=30)
        await self.pause(Delays.MEDIUM)
        await self.move_to(self.rng.uniform(10, 60), self.rng.uniform(60, 90), steps=30)
        await self.pause(Delays.MEDIUM)
