import random
import tempfile
import unittest
from collections import Counter
from pathlib import Path

from PIL import Image, ImageChops, ImageDraw
from pydantic import ValidationError

from adbanner.config import Settings
from adbanner.errors import DecodeError, FontError
from adbanner.pipeline import BannerPipeline, BannerRequest, generate_banner
from tests.support import BLUE, make_photo, system_font

FONT = system_font()


class BannerRequestTests(unittest.TestCase):
    def test_defaults(self):
        request = BannerRequest(image_paths=["a.jpg"])
        self.assertEqual(request.shape.value, "horizontal")
        self.assertIsNone(request.style)
        self.assertEqual(request.image_paths, [Path("a.jpg")])

    def test_block_takes_one_image(self):
        with self.assertRaises(ValidationError):
            BannerRequest(image_paths=["a.jpg", "b.jpg"], shape="block")

    def test_needs_an_image(self):
        with self.assertRaises(ValidationError):
            BannerRequest(image_paths=[])

    def test_positive_sizes(self):
        with self.assertRaises(ValidationError):
            BannerRequest(image_paths=["a.jpg"], width=0)

    def test_frozen(self):
        request = BannerRequest(image_paths=["a.jpg"])
        with self.assertRaises(ValidationError):
            request.text = "late edit"

    def test_subtitle_needs_text(self):
        with self.assertRaises(ValidationError):
            BannerRequest(image_paths=["a.jpg"], subtitle="Open daily")
        with self.assertRaises(ValidationError):
            BannerRequest(image_paths=["a.jpg"], text="  ", subtitle="Open daily")


class PipelineTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        tmp = Path(self._tmp.name)
        self.left = make_photo(tmp / "left.jpg", size=(200, 150))
        self.right = make_photo(tmp / "right.jpg", size=(90, 90), main=BLUE, accent=(240, 200, 20))

    def tearDown(self):
        self._tmp.cleanup()

    def test_shape_canvases(self):
        expected = {"horizontal": (1200, 200), "vertical": (345, 300), "block": (300, 300)}
        for shape, size in expected.items():
            with self.subTest(shape=shape):
                banner = generate_banner(self.left, shape=shape, seed=1)
                self.assertEqual(banner.size, size)
                self.assertEqual(banner.mode, "RGB")

    def test_canvas_override(self):
        banner = generate_banner([self.left, self.right], banner_width=600, banner_height=150, seed=1)
        self.assertEqual(banner.size, (600, 150))

    def test_unknown_style_still_renders(self):
        banner = generate_banner(self.left, style="sparkles", seed=2)
        self.assertEqual(banner.size, (1200, 200))

    def test_every_slot_gets_an_image(self):
        banner = generate_banner(self.left, shape="vertical", style="block", seed=3)
        for dx, dy in ((5, 5), (50, 60), (100, 120)):
            self.assertEqual(banner.getpixel((10 + dx, 10 + dy)), banner.getpixel((225 + dx, 10 + dy)))

    def test_second_image_fills_second_slot(self):
        banner = generate_banner([self.left, self.right], style="block", seed=4)
        self.assertNotEqual(banner.getpixel((30, 100)), banner.getpixel((1050, 100)))

    def test_same_seed_same_banner(self):
        a = generate_banner([self.left, self.right], style="wave", seed=9)
        b = generate_banner([self.left, self.right], style="wave", rng=random.Random(9))
        self.assertEqual(a.tobytes(), b.tobytes())

    def test_missing_image(self):
        with self.assertRaises(DecodeError):
            generate_banner([self.left, "/nonexistent/right.jpg"])
        with self.assertRaises(DecodeError):
            generate_banner("/nonexistent/left.jpg")

    def test_missing_font(self):
        with self.assertRaises(FontError):
            generate_banner(self.left, text="Sale", font_path="/no/such/font.ttf")

    def test_settings_feed_colour_selection(self):
        settings = Settings(max_colors=3, white_threshold=255, black_threshold=0)
        request = BannerRequest(image_paths=[self.left], shape="block", seed=5)
        banner = BannerPipeline(settings).build(request)
        self.assertEqual(banner.size, (300, 300))

    @unittest.skipIf(FONT is None, "no system font available")
    def test_caption_only_touches_caption_box(self):
        plain = generate_banner([self.left, self.right], seed=11)
        captioned = generate_banner([self.left, self.right], text="Fresh drops every Friday", font_path=FONT, seed=11)
        self.assertNotEqual(plain.tobytes(), captioned.tobytes())

        # caption box of the horizontal layout
        for img in (plain, captioned):
            ImageDraw.Draw(img).rectangle([350, 0, 899, 199], fill=(0, 0, 0))
        self.assertIsNone(ImageChops.difference(plain, captioned).getbbox())

    @unittest.skipIf(FONT is None, "no system font available")
    def test_long_captions_stay_in_box(self):
        cases = [
            ("block", "Summer sale on all running shoes this weekend only", (10, 200, 290, 290)),
            ("horizontal", "www.example-store.com/summer-collection-sale", (350, 0, 900, 200)),
        ]
        for shape, text, (x1, y1, x2, y2) in cases:
            with self.subTest(shape=shape):
                plain = generate_banner(self.left, shape=shape, style="block", seed=13)
                captioned = generate_banner(self.left, text=text, font_path=FONT, shape=shape, style="block", seed=13)
                left, top, right, bottom = ImageChops.difference(plain, captioned).getbbox()
                self.assertGreaterEqual(left, x1)
                self.assertGreaterEqual(top, y1)
                self.assertLessEqual(right, x2)
                self.assertLessEqual(bottom, y2)


def changed_pixels(plain, captioned, box):
    """Captioned pixels inside box (left, top, right, bottom) that differ from plain."""
    before = plain.crop(box).getdata()
    after = captioned.crop(box).getdata()
    return [a for b, a in zip(before, after) if a != b]


@unittest.skipIf(FONT is None, "no system font available")
class StyledCaptionTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_medical_light_photo_gets_dark_title(self):
        photo = make_photo(self.tmp / "light.png", main=(230, 190, 190), accent=(200, 220, 240))
        plain = generate_banner(photo, style="medical")
        captioned = generate_banner(photo, text="Clinic open", font_path=FONT, style="medical")

        before = plain.crop((350, 0, 900, 200)).getdata()
        after = captioned.crop((350, 0, 900, 200)).getdata()
        changed = [(b, a) for b, a in zip(before, after) if a != b]
        self.assertTrue(changed)
        # black text without a shadow only ever darkens the background
        for b, a in changed:
            self.assertLess(sum(a), sum(b))
        self.assertIn((0, 0, 0), [a for _, a in changed])

    def test_medical_title_and_subtitle_colours(self):
        photo = make_photo(self.tmp / "light.png", main=(230, 190, 190), accent=(200, 220, 240))
        plain = generate_banner(photo, style="medical")
        captioned = generate_banner(
            photo, text="Clinic", subtitle="Open daily", font_path=FONT, style="medical",
        )
        title = Counter(changed_pixels(plain, captioned, (350, 0, 900, 120)))
        subtitle = Counter(changed_pixels(plain, captioned, (350, 120, 900, 200)))
        self.assertEqual(title.most_common(1)[0][0], (0, 0, 0))
        self.assertEqual(subtitle.most_common(1)[0][0], (80, 80, 80))

    def test_marketing_caption_is_tinted_and_centred(self):
        purple, orange = (120, 40, 160), (230, 120, 30)
        img = Image.new("RGB", (150, 90), orange)
        ImageDraw.Draw(img).rectangle([0, 0, 49, 89], fill=purple)
        photo = self.tmp / "split.png"
        img.save(photo)

        plain = generate_banner(photo, style="marketing")
        captioned = generate_banner(photo, text="Summer sale", font_path=FONT, style="marketing")

        left, top, right, bottom = ImageChops.difference(plain, captioned).getbbox()
        self.assertGreaterEqual(left, 420)
        self.assertGreaterEqual(top, 40)
        self.assertLessEqual(right, 960)
        self.assertLessEqual(bottom, 140)

        changed = changed_pixels(plain, captioned, (420, 40, 960, 140))
        self.assertEqual(Counter(changed).most_common(1)[0][0], purple)
        # no drop shadow: nothing darker than the tint blended over the background
        self.assertGreaterEqual(min(sum(p) for p in changed), 300)


if __name__ == "__main__":
    unittest.main()
