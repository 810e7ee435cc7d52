import asyncio
import math
import re
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from io import BytesIO
from typing import Any, TypeVar

import matplotlib.figure
from matplotlib.axes import Axes
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.patches import Rectangle

from chart_lambda.core.ports.renderer import ImageStream

T = TypeVar("T")

CHART_TYPES = ("line", "bar", "horizontalBar", "scatter", "pie", "doughnut")

# content type -> matplotlib savefig format
ENCODINGS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
}

_RGB_PATTERN = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)$"
)


def to_color(value: Any) -> Any:
    """Convert CSS colour strings (names, hex, rgb(), rgba()) to matplotlib colours."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [to_color(v) for v in value]
    if not isinstance(value, str):
        raise ValueError(f"Unsupported colour value: {value!r}")

    color = value.strip()
    match = _RGB_PATTERN.match(color.lower())
    if match:
        r, g, b, a = match.groups()
        alpha = float(a) if a is not None else 1.0
        return (float(r) / 255, float(g) / 255, float(b) / 255, alpha)
    return color


def to_number(value: Any) -> float:
    """Numeric data point; null gaps become NaN."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        raise ValueError(f"Invalid data point: {value!r}")
    return float(value)


def _first_color(value: Any) -> Any:
    color = to_color(value)
    if isinstance(color, list):
        return color[0] if color else None
    return color


class MatplotlibSurface:
    """
    Rendering surface backed by a matplotlib Agg figure.

    Accepts Chart.js-style specifications:
    {
        "type": "line" | "bar" | "horizontalBar" | "scatter" | "pie" | "doughnut",
        "data": {
            "labels": list[str],
            "datasets": [{"label": str, "data": list, "backgroundColor": ..., ...}]
        },
        "options": {"title": {...}, "legend": {...}, "plugins": ...}
    }

    The canvas is transparent; plugins exposing before_draw(chart) paint
    the background before datasets are drawn.

    Blocking work runs on a worker thread owned by the surface. A stage that
    outlives its timeout keeps that thread; destroy() abandons it rather than
    waiting, and leaves the figure alone while the thread still holds it.
    """

    def __init__(self, width: int, height: int, dpi: int = 100) -> None:
        self.width = width
        self.height = height
        self.dpi = dpi
        self._figure: matplotlib.figure.Figure | None = matplotlib.figure.Figure(
            figsize=(width / dpi, height / dpi), dpi=dpi
        )
        self._canvas = FigureCanvasAgg(self._figure)  # Attach canvas backend
        self._figure.patch.set_alpha(0.0)
        self._encoded: dict[str, bytes] = {}
        self._drawn = False
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="chart-surface")
        self._busy = threading.Lock()

    @property
    def figure(self) -> matplotlib.figure.Figure:
        if self._figure is None:
            raise RuntimeError("Surface has been destroyed")
        return self._figure

    @property
    def destroyed(self) -> bool:
        return self._figure is None

    # --- Plugin API ---

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        """Fill a rectangle in canvas pixels (origin top-left)."""
        rect = Rectangle(
            (x / self.width, 1 - (y + h) / self.height),
            w / self.width,
            h / self.height,
            transform=self.figure.transFigure,
            facecolor=to_color(color),
            edgecolor="none",
            zorder=-1000,
        )
        self.figure.add_artist(rect)

    # --- Drawing ---

    def _run_plugins(self, options: dict[str, Any]) -> None:
        plugins = options.get("plugins")
        if plugins is None:
            return
        for plugin in plugins if isinstance(plugins, (list, tuple)) else [plugins]:
            hook = getattr(plugin, "before_draw", None)
            if callable(hook):
                hook(self)

    def draw_sync(self, spec: dict[str, Any]) -> None:
        if self._drawn:
            raise RuntimeError("Surface already holds a drawn chart")

        c_type = spec.get("type")
        if c_type not in CHART_TYPES:
            raise ValueError(f"Unsupported chart type: {c_type!r}")

        data = spec.get("data") or {}
        options = spec.get("options") or {}
        if not isinstance(data, dict) or not isinstance(options, dict):
            raise ValueError("Chart 'data' and 'options' must be objects")

        labels = [str(label) for label in data.get("labels") or []]
        datasets = data.get("datasets") or []
        if not isinstance(datasets, list) or not all(isinstance(d, dict) for d in datasets):
            raise ValueError("Chart 'datasets' must be a list of objects")

        self._run_plugins(options)

        ax = self.figure.add_subplot(111)
        ax.set_facecolor("none")

        if c_type in ("pie", "doughnut"):
            self._draw_pie(ax, labels, datasets, doughnut=c_type == "doughnut")
        elif c_type == "scatter":
            self._draw_scatter(ax, datasets)
        elif c_type in ("bar", "horizontalBar"):
            self._draw_bars(ax, labels, datasets, horizontal=c_type == "horizontalBar")
        else:
            self._draw_lines(ax, labels, datasets)

        title = options.get("title") or {}
        if isinstance(title, dict) and title.get("display") and title.get("text"):
            text = title["text"]
            ax.set_title("\n".join(text) if isinstance(text, list) else str(text))

        legend = options.get("legend") or {}
        show_legend = legend.get("display", True) if isinstance(legend, dict) else True
        handles, _ = ax.get_legend_handles_labels()
        if show_legend and handles:
            ax.legend()

        self.figure.tight_layout()
        # Rasterize now so drawing errors surface in this stage
        self._canvas.draw()
        self._drawn = True

    def _draw_lines(self, ax: Axes, labels: list[str], datasets: list[dict[str, Any]]) -> None:
        for ds in datasets:
            values = [to_number(v) for v in ds.get("data") or []]
            x = list(range(len(values)))
            color = _first_color(ds.get("borderColor") or ds.get("backgroundColor"))
            radius = ds.get("pointRadius", 3)
            ax.plot(
                x,
                values,
                color=color,
                label=ds.get("label"),
                linewidth=ds.get("borderWidth", 3),
                marker="o" if radius else None,
                markersize=radius * 2 if radius else 0,
            )
            if ds.get("fill"):
                ax.fill_between(
                    x, values, color=_first_color(ds.get("backgroundColor")) or color, alpha=0.3
                )
        if labels:
            ax.set_xticks(range(len(labels)))
            ax.set_xticklabels(labels)

    def _draw_bars(
        self,
        ax: Axes,
        labels: list[str],
        datasets: list[dict[str, Any]],
        *,
        horizontal: bool,
    ) -> None:
        count = max(len(datasets), 1)
        bar_width = 0.8 / count
        longest = max((len(ds.get("data") or []) for ds in datasets), default=len(labels))
        for i, ds in enumerate(datasets):
            values = [to_number(v) for v in ds.get("data") or []]
            positions = [p - 0.4 + bar_width * (i + 0.5) for p in range(len(values))]
            style = {
                "color": to_color(ds.get("backgroundColor")),
                "edgecolor": to_color(ds.get("borderColor")),
                "linewidth": ds.get("borderWidth", 0),
                "label": ds.get("label"),
            }
            if horizontal:
                ax.barh(positions, values, height=bar_width, **style)
            else:
                ax.bar(positions, values, width=bar_width, **style)

        ticks = list(range(max(len(labels), longest)))
        tick_labels = labels + [str(t) for t in ticks[len(labels) :]]
        if horizontal:
            ax.set_yticks(ticks)
            ax.set_yticklabels(tick_labels)
        else:
            ax.set_xticks(ticks)
            ax.set_xticklabels(tick_labels)

    def _draw_scatter(self, ax: Axes, datasets: list[dict[str, Any]]) -> None:
        for ds in datasets:
            xs: list[float] = []
            ys: list[float] = []
            for i, point in enumerate(ds.get("data") or []):
                if isinstance(point, dict):
                    xs.append(to_number(point.get("x")))
                    ys.append(to_number(point.get("y")))
                else:
                    xs.append(float(i))
                    ys.append(to_number(point))
            radius = ds.get("pointRadius", 3) or 3
            ax.scatter(
                xs,
                ys,
                color=_first_color(ds.get("backgroundColor") or ds.get("borderColor")),
                s=(radius * 2) ** 2,
                label=ds.get("label"),
            )

    def _draw_pie(
        self,
        ax: Axes,
        labels: list[str],
        datasets: list[dict[str, Any]],
        *,
        doughnut: bool,
    ) -> None:
        ax.set_aspect("equal")
        ax.axis("off")
        if not datasets:
            return
        ds = datasets[0]
        values = [to_number(v) for v in ds.get("data") or []]
        if not values:
            return
        colors = to_color(ds.get("backgroundColor"))
        ax.pie(
            values,
            labels=labels[: len(values)] if len(labels) >= len(values) else None,
            colors=colors if isinstance(colors, list) else None,
            wedgeprops={"width": 0.5} if doughnut else None,
        )

    # --- Encoding ---

    def encode_sync(self, content_type: str) -> bytes:
        if not self._drawn:
            raise RuntimeError("Nothing has been drawn on this surface")
        if content_type not in ENCODINGS:
            raise ValueError(f"Unsupported content type: {content_type}")

        if content_type not in self._encoded:
            buf = BytesIO()
            self.figure.savefig(buf, format=ENCODINGS[content_type], dpi=self.dpi)
            self._encoded[content_type] = buf.getvalue()
            buf.close()
        return self._encoded[content_type]

    # --- RenderingSurfacePort ---

    def _locked(self, fn: Callable[..., T], *args: Any) -> T:
        with self._busy:
            return fn(*args)

    async def _offload(self, fn: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._locked, fn, *args)

    async def draw_chart(self, spec: dict[str, Any]) -> None:
        await self._offload(self.draw_sync, spec)

    async def get_image_buffer(self, content_type: str) -> bytes:
        return await self._offload(self.encode_sync, content_type)

    async def get_image_stream(self, content_type: str) -> ImageStream:
        data = await self._offload(self.encode_sync, content_type)
        return ImageStream(stream=BytesIO(data), length=len(data))

    def destroy(self) -> None:
        if self._figure is None:
            return
        figure, self._figure = self._figure, None
        self._encoded.clear()
        self._executor.shutdown(wait=False, cancel_futures=True)

        # A timed-out stage may still be drawing on the worker thread
        if not self._busy.acquire(blocking=False):
            return
        try:
            figure.clear()
        finally:
            self._busy.release()


class MatplotlibSurfaceFactory:
    def __init__(self, dpi: int = 100) -> None:
        self.dpi = dpi

    def create(self, width: int, height: int) -> MatplotlibSurface:
        return MatplotlibSurface(width, height, dpi=self.dpi)
