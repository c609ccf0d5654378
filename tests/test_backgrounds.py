import random
import unittest

from adbanner.backgrounds import GENERATORS, BackgroundStyle, render_background, vertical_gradient
from adbanner.colors import ColorPair

COLORS = ColorPair(primary=(220, 120, 40), secondary=(30, 90, 160))


class RenderTests(unittest.TestCase):
    def test_every_style_has_a_generator(self):
        self.assertEqual(set(GENERATORS), set(BackgroundStyle))

    def test_exact_dimensions(self):
        for style in BackgroundStyle:
            for size in ((240, 120), (37, 23), (1, 1)):
                with self.subTest(style=style.value, size=size):
                    img = render_background(style, COLORS, *size, rng=random.Random(0))
                    self.assertEqual(img.size, size)
                    self.assertEqual(img.mode, "RGB")

    def test_same_seed_same_pixels(self):
        for style in BackgroundStyle:
            with self.subTest(style=style.value):
                a = render_background(style, COLORS, 160, 90, rng=random.Random(7))
                b = render_background(style, COLORS, 160, 90, rng=random.Random(7))
                self.assertEqual(a.tobytes(), b.tobytes())

    def test_unknown_style_renders_wave(self):
        with self.assertLogs("adbanner.backgrounds", level="WARNING"):
            fallback = render_background("sparkles", COLORS, 120, 60, rng=random.Random(3))
        wave = render_background("wave", COLORS, 120, 60, rng=random.Random(3))
        self.assertEqual(fallback.tobytes(), wave.tobytes())

    def test_rejects_empty_canvas(self):
        with self.assertRaises(ValueError):
            render_background("block", COLORS, 0, 10)


class StyleParseTests(unittest.TestCase):
    def test_case_insensitive(self):
        self.assertIs(BackgroundStyle.parse(" RADIAL "), BackgroundStyle.RADIAL)
        self.assertIs(BackgroundStyle.parse("mobile-card"), BackgroundStyle.MOBILE_CARD)

    def test_empty_is_default(self):
        self.assertIs(BackgroundStyle.parse(None), BackgroundStyle.WAVE)
        self.assertIs(BackgroundStyle.parse(""), BackgroundStyle.WAVE)


class StyleContentTests(unittest.TestCase):
    def test_gradient_runs_top_to_bottom(self):
        img = render_background("gradient", COLORS, 50, 100)
        self.assertEqual(img.getpixel((25, 0)), COLORS.primary)
        bottom = img.getpixel((25, 99))
        for got, want in zip(bottom, COLORS.secondary):
            self.assertLessEqual(abs(got - want), 3)

    def test_vertical_gradient_rows_are_flat(self):
        img = vertical_gradient(30, 10, (0, 0, 0), (255, 255, 255))
        for y in range(10):
            self.assertEqual(len(set(img.crop((0, y, 30, y + 1)).getdata())), 1)

    def test_block_is_solid_primary(self):
        img = render_background("block", COLORS, 40, 40)
        self.assertEqual(img.getcolors(), [(1600, COLORS.primary)])

    def test_radial_centre_is_primary(self):
        img = render_background("radial", COLORS, 100, 60)
        self.assertEqual(img.getpixel((50, 30)), COLORS.primary)

    def test_marketing_blocks(self):
        img = render_background("marketing", COLORS, 300, 100)
        self.assertEqual(img.getpixel((5, 50)), COLORS.primary)
        self.assertEqual(img.getpixel((295, 50)), COLORS.secondary)

    def test_card_accent_bar(self):
        img = render_background("mobile-card", COLORS, 200, 100)
        self.assertEqual(img.getpixel((50, 12)), COLORS.primary)
        self.assertEqual(img.getpixel((1, 1)), (245, 245, 245))

    def test_wave_is_not_flat(self):
        img = render_background("wave", COLORS, 200, 100, rng=random.Random(1))
        self.assertGreater(len(img.getcolors(maxcolors=200 * 100)), 10)


if __name__ == "__main__":
    unittest.main()
