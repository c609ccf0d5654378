import tempfile
import unittest
from pathlib import Path

from PIL import Image, features

from adbanner.backgrounds import BackgroundStyle
from adbanner.compositor import LAYOUTS, BannerShape, layout_for, load_and_resize, place_on_background
from adbanner.errors import DecodeError
from tests.support import RED, make_photo


class LoadAndResizeTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_exact_target_size(self):
        path = make_photo(self.tmp / "wide.jpg", size=(100, 50))
        img = load_and_resize(path, 40, 40)
        self.assertEqual(img.size, (40, 40))
        self.assertEqual(img.mode, "RGB")

    def test_png_upscale(self):
        path = make_photo(self.tmp / "small.png", size=(10, 10))
        self.assertEqual(load_and_resize(path, 64, 32).size, (64, 32))

    @unittest.skipUnless(features.check("webp"), "Pillow built without WebP")
    def test_webp(self):
        path = make_photo(self.tmp / "photo.webp")
        self.assertEqual(load_and_resize(path, 30, 20).size, (30, 20))

    def test_missing_file(self):
        with self.assertRaises(DecodeError):
            load_and_resize(self.tmp / "missing.jpg", 40, 40)

    def test_wrong_codec_for_extension(self):
        path = make_photo(self.tmp / "actually_png.jpg", fmt="PNG")
        with self.assertRaises(DecodeError):
            load_and_resize(path, 40, 40)

    def test_non_positive_target(self):
        path = make_photo(self.tmp / "photo.png")
        with self.assertRaises(ValueError):
            load_and_resize(path, 0, 40)


class PlaceTests(unittest.TestCase):
    def test_paste_in_place(self):
        bg = Image.new("RGB", (50, 50), (255, 255, 255))
        tile = Image.new("RGB", (10, 10), RED)
        result = place_on_background(bg, tile, (10, 10, 20, 20))
        self.assertIs(result, bg)
        self.assertEqual(bg.getpixel((15, 15)), RED)
        self.assertEqual(bg.getpixel((29, 29)), RED)
        self.assertEqual(bg.getpixel((5, 5)), (255, 255, 255))
        self.assertEqual(bg.getpixel((31, 31)), (255, 255, 255))

    def test_overhanging_slot_is_clipped(self):
        bg = Image.new("RGB", (30, 30), (0, 0, 0))
        place_on_background(bg, Image.new("RGB", (40, 40), RED), (20, 20, 40, 40))
        self.assertEqual(bg.size, (30, 30))
        self.assertEqual(bg.getpixel((29, 29)), RED)


class LayoutTests(unittest.TestCase):
    def test_horizontal(self):
        layout = layout_for("horizontal")
        self.assertEqual(layout.canvas, (1200, 200))
        self.assertEqual(layout.image_slots, ((10, 10, 160, 180), (1030, 10, 160, 180)))
        self.assertIs(layout.default_style, BackgroundStyle.WAVE1)

    def test_every_shape_has_a_layout(self):
        self.assertEqual(set(LAYOUTS), set(BannerShape))
        self.assertEqual(len(layout_for(BannerShape.BLOCK).image_slots), 1)

    def test_unknown_shape(self):
        with self.assertRaises(ValueError):
            layout_for("circle")


if __name__ == "__main__":
    unittest.main()
