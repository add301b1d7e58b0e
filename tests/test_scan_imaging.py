# -*- coding: utf-8 -*-

from __future__ import annotations

import base64
import io
import unittest
from unittest import mock

from PIL import Image

from ownbite.scan.imaging import OPTIMIZE_WARNING, prepare_image, split_data_url


def _png_bytes(size: tuple[int, int], mode: str = "RGB") -> bytes:
    color = (200, 120, 40, 128) if mode == "RGBA" else (200, 120, 40)
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


class TestPrepareImage(unittest.TestCase):
    def test_large_image_is_scaled_to_max_edge(self) -> None:
        prepared = prepare_image(_png_bytes((2000, 1000)), mime="image/png", max_edge=1024, quality=70)
        self.assertTrue(prepared.optimized)
        self.assertIsNone(prepared.warning)
        self.assertEqual(prepared.mime, "image/jpeg")
        self.assertEqual((prepared.width, prepared.height), (1024, 512))
        with Image.open(io.BytesIO(prepared.data)) as img:
            self.assertEqual(img.format, "JPEG")
            self.assertEqual(img.size, (1024, 512))

    def test_small_image_keeps_its_size(self) -> None:
        prepared = prepare_image(_png_bytes((300, 200)), mime="image/png", max_edge=1024, quality=70)
        self.assertEqual((prepared.width, prepared.height), (300, 200))

    def test_transparent_image_is_flattened(self) -> None:
        prepared = prepare_image(_png_bytes((64, 64), mode="RGBA"), mime="image/png", max_edge=1024, quality=70)
        with Image.open(io.BytesIO(prepared.data)) as img:
            self.assertEqual(img.mode, "RGB")

    def test_undecodable_bytes_fall_back_to_original(self) -> None:
        raw = b"definitely not an image"
        prepared = prepare_image(raw, mime="image/heic")
        self.assertFalse(prepared.optimized)
        self.assertEqual(prepared.data, raw)
        self.assertEqual(prepared.mime, "image/heic")
        self.assertEqual(prepared.warning, OPTIMIZE_WARNING)

    def test_oversized_image_falls_back_to_original(self) -> None:
        raw = _png_bytes((200, 200))
        with mock.patch.object(Image, "MAX_IMAGE_PIXELS", 1000):
            prepared = prepare_image(raw, mime="image/png", max_edge=1024, quality=70)
        self.assertFalse(prepared.optimized)
        self.assertEqual(prepared.data, raw)
        self.assertEqual(prepared.mime, "image/png")
        self.assertEqual(prepared.warning, OPTIMIZE_WARNING)

    def test_data_url_round_trip(self) -> None:
        prepared = prepare_image(_png_bytes((10, 10)), max_edge=1024, quality=70)
        mime, data = split_data_url(prepared.data_url())
        self.assertEqual(mime, "image/jpeg")
        self.assertEqual(data, prepared.data)


class TestSplitDataUrl(unittest.TestCase):
    def test_bare_base64_defaults_to_jpeg(self) -> None:
        mime, data = split_data_url(base64.b64encode(b"abc").decode("ascii"))
        self.assertEqual(mime, "image/jpeg")
        self.assertEqual(data, b"abc")

    def test_bad_base64_raises(self) -> None:
        with self.assertRaises(ValueError):
            split_data_url("data:image/png;base64,@@not-base64@@")

    def test_empty_payload_raises(self) -> None:
        with self.assertRaises(ValueError):
            split_data_url("data:image/png;base64,")


if __name__ == "__main__":
    unittest.main()
