import asyncio
import threading
from io import BytesIO

import pytest
from PIL import Image

from chart_lambda.adapters.render.mpl_renderer import (
    CHART_TYPES,
    MatplotlibSurface,
    MatplotlibSurfaceFactory,
    to_color,
    to_number,
)
from chart_lambda.components.request import BackgroundFill


@pytest.fixture
def surface():
    s = MatplotlibSurface(480, 320)
    yield s
    s.destroy()


def _spec(chart_type="line", **options):
    return {
        "type": chart_type,
        "data": {
            "labels": ["A", "B", "C"],
            "datasets": [
                {"label": "Demand", "data": [4, 5, 6], "backgroundColor": "tomato"},
                {"label": "Supply", "data": [1, None, 3], "borderColor": "rgba(0, 0, 255, 0.5)"},
            ],
        },
        "options": options,
    }


def test_draw_and_encode_png(surface):
    surface.draw_sync(_spec())

    data = surface.encode_sync("image/png")

    # PNG signature: 89 50 4E 47 0D 0A 1A 0A
    assert data.startswith(b"\x89PNG")
    with Image.open(BytesIO(data)) as img:
        assert img.size == (480, 320)


def test_encode_jpeg(surface):
    surface.draw_sync(_spec())

    data = surface.encode_sync("image/jpeg")

    assert data.startswith(b"\xff\xd8")


def test_render_supported_types():
    # Just ensure no exceptions for supported types
    for t in CHART_TYPES:
        s = MatplotlibSurface(320, 240)
        try:
            s.draw_sync(_spec(t))
            assert s.encode_sync("image/png").startswith(b"\x89PNG")
        finally:
            s.destroy()


def test_scatter_points(surface):
    spec = {
        "type": "scatter",
        "data": {"datasets": [{"data": [{"x": 1, "y": 2}, {"x": 3, "y": 1}], "pointRadius": 4}]},
        "options": {},
    }

    surface.draw_sync(spec)

    assert surface.encode_sync("image/png").startswith(b"\x89PNG")


def test_minimal_spec_draws_empty_chart(surface):
    surface.draw_sync({"type": "bar", "options": {}})

    assert surface.encode_sync("image/png").startswith(b"\x89PNG")


def test_background_fill_plugin_paints_canvas(surface):
    surface.draw_sync(_spec(plugins=BackgroundFill(color="black")))

    with Image.open(BytesIO(surface.encode_sync("image/png"))) as img:
        assert img.convert("RGBA").getpixel((0, 0)) == (0, 0, 0, 255)


def test_canvas_transparent_without_plugin(surface):
    surface.draw_sync(_spec())

    with Image.open(BytesIO(surface.encode_sync("image/png"))) as img:
        assert img.convert("RGBA").getpixel((0, 0))[3] == 0


def test_title_and_legend_options(surface):
    surface.draw_sync(
        _spec(title={"display": True, "text": ["Demand", "2024"]}, legend={"display": False})
    )

    ax = surface.figure.axes[0]
    assert ax.get_title() == "Demand\n2024"
    assert ax.get_legend() is None


def test_unsupported_type_raises(surface):
    with pytest.raises(ValueError, match="Unsupported chart type"):
        surface.draw_sync({"type": "sankey", "options": {}})


def test_malformed_datasets_raise(surface):
    with pytest.raises(ValueError):
        surface.draw_sync({"type": "line", "data": {"datasets": "nope"}, "options": {}})


def test_non_numeric_data_raises(surface):
    with pytest.raises(ValueError):
        surface.draw_sync({"type": "line", "data": {"datasets": [{"data": ["x"]}]}})


def test_encode_before_draw_raises(surface):
    with pytest.raises(RuntimeError):
        surface.encode_sync("image/png")


def test_unsupported_content_type(surface):
    surface.draw_sync(_spec())

    with pytest.raises(ValueError):
        surface.encode_sync("image/gif")


def test_async_port_methods(surface):
    async def scenario():
        await surface.draw_chart(_spec())
        buffer = await surface.get_image_buffer("image/png")
        image = await surface.get_image_stream("image/png")
        return buffer, image

    buffer, image = asyncio.run(scenario())

    assert image.length == len(buffer)
    assert image.stream.read() == buffer


def test_destroy_is_idempotent(surface):
    surface.destroy()
    surface.destroy()

    assert surface.destroyed
    with pytest.raises(RuntimeError):
        surface.draw_sync(_spec())


def test_factory_uses_dpi():
    s = MatplotlibSurfaceFactory(dpi=50).create(200, 100)
    try:
        assert s.figure.get_size_inches().tolist() == [4.0, 2.0]
    finally:
        s.destroy()


def test_color_conversion():
    assert to_color("tomato") == "tomato"
    assert to_color("rgb(255, 0, 0)") == (1.0, 0.0, 0.0, 1.0)
    assert to_color("rgba(0, 0, 255, 0.5)") == (0.0, 0.0, 1.0, 0.5)
    assert to_color(["red", "#00ff00"]) == ["red", "#00ff00"]
    assert to_color(None) is None


def test_number_conversion():
    assert to_number(3) == 3.0
    assert to_number(None) != to_number(None)  # NaN gap
    with pytest.raises(ValueError):
        to_number(True)


class DrawThenBlockSurface(MatplotlibSurface):
    """Finishes drawing, then holds the worker thread until released."""

    def __init__(self, width, height, release):
        super().__init__(width, height)
        self.release = release

    def draw_sync(self, spec):
        super().draw_sync(spec)
        self.release.wait(5)


def test_destroy_clears_idle_figure():
    s = MatplotlibSurface(200, 100)
    s.draw_sync(_spec())
    figure = s.figure

    s.destroy()

    assert figure.axes == []


def test_destroy_leaves_figure_held_by_timed_out_stage():
    release = threading.Event()
    s = DrawThenBlockSurface(200, 100, release)

    async def scenario():
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(s.draw_chart(_spec()), timeout=0.2)

    figure = s.figure
    try:
        asyncio.run(scenario())
        s.destroy()

        assert s.destroyed
        assert len(figure.axes) == 1
    finally:
        release.set()
