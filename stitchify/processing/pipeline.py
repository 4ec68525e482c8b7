"""Runs a catalog style over a pixel buffer one step at a time."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .buffer import PixelBuffer
from .catalog import CATALOG, Step, StyleCatalog, Transform
from .params import StyleParameters
from ..config import SETTINGS, StudioSettings
from ..errors import ImageTooLargeError

logger = logging.getLogger(__name__)

StepListener = Callable[[int, str], None]
CancelCheck = Callable[[], bool]


class PipelineState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class StepSnapshot:
    index: int
    name: str
    buffer: PixelBuffer


class PipelineRunner:
    """Single-use executor for one style invocation.

    Every step receives the buffer returned by the previous one and returns a
    new buffer, so the caller's input is never modified. Cancellation is
    checked between steps only.
    """

    def __init__(
        self,
        style: Optional[str] = None,
        params: Optional[StyleParameters] = None,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        on_step: Optional[StepListener] = None,
        should_cancel: Optional[CancelCheck] = None,
        catalog: StyleCatalog = CATALOG,
        settings: StudioSettings = SETTINGS,
    ) -> None:
        self.settings = settings.validate()
        self.requested_style = style or settings.default_style
        self.style = catalog.get(
            self.requested_style,
            strict=settings.strict_styles,
            default=settings.default_style,
        )
        if self.requested_style not in catalog:
            logger.warning(
                "Unknown style %r, falling back to %r", self.requested_style, self.style.key
            )
        self.params = (params or StyleParameters.from_settings(settings)).clamped()
        self.rng = rng if rng is not None else random.Random(seed)
        self.on_step = on_step
        self.should_cancel = should_cancel
        self.state = PipelineState.IDLE
        self.step_index: Optional[int] = None
        self._transforms = catalog.transforms

    @property
    def steps(self) -> Tuple[Step, ...]:
        return self.style.steps

    def _bind_steps(self) -> List[Tuple[Step, Transform, Dict[str, Any]]]:
        bound = []
        for step in self.steps:
            transform = self._transforms.get(step.transform)
            args = step.bind(self.params, self.settings)
            if transform.stochastic:
                args["rng"] = self.rng
            bound.append((step, transform, args))
        return bound

    def _check_buffer(self, buffer: PixelBuffer) -> None:
        pixel_count = buffer.width * buffer.height
        if pixel_count > self.settings.max_pixels:
            raise ImageTooLargeError(
                f"Image has {pixel_count} pixels, limit is {self.settings.max_pixels}"
            )

    def iter_steps(self, buffer: PixelBuffer) -> Iterator[StepSnapshot]:
        """Yield a snapshot after each completed step.

        Snapshots are independent copies; modifying one does not affect the
        rest of the run.
        """
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"Pipeline already {self.state.value}")
        self._check_buffer(buffer)
        bound = self._bind_steps()

        current = buffer.copy()
        self.state = PipelineState.RUNNING
        try:
            for index, (step, transform, args) in enumerate(bound):
                if self.should_cancel is not None and self.should_cancel():
                    logger.info("Style %s cancelled before step %d", self.style.key, index)
                    self.state = PipelineState.CANCELLED
                    return
                self.step_index = index
                if self.on_step is not None:
                    self.on_step(index, step.name)
                started = time.perf_counter()
                current = transform.fn(current, **args)
                logger.debug(
                    "%s step %d (%s) took %.1f ms",
                    self.style.key,
                    index,
                    step.transform,
                    (time.perf_counter() - started) * 1000.0,
                )
                yield StepSnapshot(index, step.name, current.copy())
        except GeneratorExit:
            self.state = PipelineState.CANCELLED
            raise
        except Exception:
            self.state = PipelineState.FAILED
            logger.exception("Style %s failed at step %s", self.style.key, self.step_index)
            raise
        self.state = PipelineState.DONE

    def run(self, buffer: PixelBuffer) -> PixelBuffer:
        result = buffer.copy()
        for snapshot in self.iter_steps(buffer):
            result = snapshot.buffer
        return result


def run_style(
    buffer: PixelBuffer,
    style: Optional[str] = None,
    params: Optional[StyleParameters] = None,
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    on_step: Optional[StepListener] = None,
    settings: StudioSettings = SETTINGS,
) -> PixelBuffer:
    runner = PipelineRunner(style, params, rng=rng, seed=seed, on_step=on_step, settings=settings)
    return runner.run(buffer)
