#!/usr/bin/env python3
from pathlib import Path

import pytest
from PIL import Image

from cfrs import RenderOptions, render, trace
from cfrs.encode import is_animated_path, load_frames, save_sequence, write_svg
from cfrs.errors import ConfigError


class TestSaveSequence:
    @pytest.mark.parametrize("ext", [".png", ".bmp", ".jpg", ".jpeg", ".webp"])
    def test_static_formats(self, tmp_path: Path, ext: str) -> None:
        seq = render("[CF[RF]]", RenderOptions(width=64, height=48))
        out = save_sequence(seq, tmp_path / f"out{ext}")
        assert out.exists()
        with Image.open(out) as img:
            assert img.size == (64, 48)

    def test_png_is_lossless(self, tmp_path: Path) -> None:
        seq = render("[CF[RF]]", RenderOptions(width=40, height=40))
        out = save_sequence(seq, tmp_path / "out.png")
        (frame,) = load_frames(out)
        assert frame.tobytes() == seq[0].buffer.pixels.tobytes()

    def test_gif_animation(self, tmp_path: Path) -> None:
        seq = render("[F][RF][RRF]", RenderOptions(width=32, height=32, delay_ms=150))
        out = save_sequence(seq, tmp_path / "anim.gif")
        assert len(load_frames(out)) == 3
        with Image.open(out) as img:
            assert img.info["duration"] == 150
            assert img.info["loop"] == 0

    @pytest.mark.parametrize("grammar,total", [("[F][F]", 200), ("[F][F][RRF]", 300)])
    def test_gif_identical_frames_keep_total_duration(
        self, tmp_path: Path, grammar: str, total: int
    ) -> None:
        seq = render(grammar, RenderOptions(width=32, height=32, delay_ms=100))
        assert len(seq) == total // 100
        out = save_sequence(seq, tmp_path / "repeat.gif")
        durations = []
        with Image.open(out) as img:
            for i in range(getattr(img, "n_frames", 1)):
                img.seek(i)
                durations.append(img.info["duration"])
        assert sum(durations) == total
        assert 1 <= len(durations) <= len(seq)

    def test_single_frame_gif(self, tmp_path: Path) -> None:
        seq = render("F", RenderOptions(width=16, height=16))
        out = save_sequence(seq, tmp_path / "still.gif")
        assert len(load_frames(out)) == 1

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        seq = render("F", RenderOptions(width=16, height=16))
        out = save_sequence(seq, tmp_path / "a" / "b" / "out.png")
        assert out.exists()

    def test_static_format_rejects_animation(self, tmp_path: Path) -> None:
        seq = render("[F][RF]")
        with pytest.raises(ConfigError):
            save_sequence(seq, tmp_path / "out.png")

    def test_unknown_extension(self, tmp_path: Path) -> None:
        seq = render("F")
        with pytest.raises(ConfigError):
            save_sequence(seq, tmp_path / "out.tiff")

    def test_is_animated_path(self) -> None:
        assert is_animated_path("x.gif")
        assert is_animated_path("x.GIF")
        assert not is_animated_path("x.png")


class TestWriteSvg:
    def _svg(self, tmp_path: Path, grammar: str, **kw) -> str:
        (frame,) = trace(grammar, RenderOptions(width=100, height=100, animate=False))
        out = tmp_path / "out.svg"
        write_svg(frame, out_path=out, **kw)
        return out.read_text(encoding="utf-8")

    def test_lines_and_background(self, tmp_path: Path) -> None:
        content = self._svg(tmp_path, "FCF")
        assert "<svg" in content
        assert 'viewBox="0 0 100 100"' in content
        assert content.count("<line") == 2
        assert 'stroke="#ffffff"' in content
        assert 'stroke="#000000"' in content
        assert 'fill="#000000"' in content

    def test_normalized_coordinates(self, tmp_path: Path) -> None:
        content = self._svg(tmp_path, "F")
        assert 'x1="50" y1="100" x2="50" y2="0"' in content

    def test_title_escaped(self, tmp_path: Path) -> None:
        content = self._svg(tmp_path, "F", title="a <b> & c")
        assert "<title>a &lt;b&gt; &amp; c</title>" in content

    def test_empty_frame(self, tmp_path: Path) -> None:
        content = self._svg(tmp_path, "[RR]")
        assert "<rect" in content
        assert "<line" not in content

    def test_precision_range(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            self._svg(tmp_path, "F", precision=11)
