from __future__ import annotations

from typing import Optional

from tqdm import tqdm


class PhaseProgressBar:
    """tqdm bar usable as a ``progress_callback``.

    The run reports a fraction per phase, so the bar restarts whenever the
    phase name changes instead of stepping backwards.
    """

    def __init__(self, resolution: int = 1000, bar: Optional[tqdm] = None, **tqdm_kwargs):
        self.resolution = int(resolution)
        self.bar = bar if bar is not None else tqdm(total=self.resolution, unit="‰", **tqdm_kwargs)
        self.phase: Optional[str] = None

    def __call__(self, t: float, frac: float, phase: str) -> None:
        if phase != self.phase:
            self.phase = phase
            self.bar.reset(total=self.resolution)
        self.bar.set_description(f"{phase} t={t:.0f}M")
        target = int(min(1.0, max(0.0, frac)) * self.resolution)
        if target > self.bar.n:
            self.bar.update(target - self.bar.n)

    def close(self) -> None:
        self.bar.close()
