#!/usr/bin/env python

import logging
import struct
import sys
from base64 import b64encode
from pathlib import Path

from mutagen.flac import Picture
from mutagen.id3 import APIC, PictureType, Encoding
from mutagen.mp4 import MP4Cover

sys.path.append(Path(__file__).parents[1].joinpath('lib').as_posix())
from music_tags.common.enums import ImageFormat
from music_tags.files.cover import Artwork, image_size, artworks_from_pictures, artworks_from_mp4_covers
from music_tags.files.cover import artwork_from_picture_block, apic_for_artwork, picture_for_artwork
from music_tags.files.cover import mp4_cover_for_artwork
from music_tags.files.exceptions import ImageSizeError, PictureDecodeError
from music_tags.test_common import TestCaseBase, main, png_bytes, jpeg_bytes

log = logging.getLogger(__name__)


def _apic(data: bytes, pic_type=PictureType.COVER_FRONT, mime: str = 'image/png', desc: str = '') -> APIC:
    return APIC(encoding=Encoding.UTF8, mime=mime, type=pic_type, desc=desc, data=data)


def _picture(data: bytes, pic_type=PictureType.COVER_FRONT, mime: str = 'image/png') -> Picture:
    picture = Picture()
    picture.type = pic_type
    picture.mime = mime
    picture.data = data
    return picture


def _block_value(picture: Picture) -> str:
    return b64encode(picture.write()).decode('ascii')


class ArtworkTest(TestCaseBase):
    def test_from_bytes(self):
        artwork = Artwork.from_bytes(png_bytes(4, 3), ImageFormat.PNG)
        self.assertEqual((4, 3), (artwork.width, artwork.height))
        self.assertEqual('image/png', artwork.mime_type)
        self.assertEqual(ImageFormat.PNG, artwork.fmt)

    def test_jpeg(self):
        artwork = Artwork.from_bytes(jpeg_bytes(5, 2))
        self.assertEqual((5, 2), artwork.size)
        self.assertEqual('image/jpeg', artwork.mime_type)

    def test_repr_omits_data(self):
        data = png_bytes()
        artwork = Artwork.from_bytes(data, ImageFormat.PNG)
        self.assertNotIn('data', repr(artwork))
        self.assertNotIn(repr(data), repr(artwork))

    def test_data_is_copied(self):
        data = bytearray(png_bytes())
        artwork = Artwork.from_bytes(data, ImageFormat.PNG)
        data[:4] = b'\x00\x00\x00\x00'
        self.assertEqual(png_bytes(), artwork.data)
        self.assertIsInstance(artwork.data, bytes)

    def test_invalid_image(self):
        with self.assertRaises(ImageSizeError):
            image_size(b'not an image')
        with self.assertRaises(ImageSizeError):
            Artwork.from_bytes(b'')

    def test_image_format_mime(self):
        self.assertEqual(ImageFormat.PNG, ImageFormat.from_mime('image/png'))
        self.assertEqual(ImageFormat.JPEG, ImageFormat.from_mime('image/jpeg'))
        self.assertEqual(ImageFormat.JPEG, ImageFormat.from_mime('image/gif'))
        self.assertEqual(ImageFormat.JPEG, ImageFormat.from_mime('IMAGE/PNG'))
        self.assertEqual('image/png', ImageFormat.PNG.mime_type)


class PictureExtractionTest(TestCaseBase):
    def test_apic_front_cover_only(self):
        frames = [
            _apic(jpeg_bytes(), PictureType.COVER_BACK, 'image/jpeg', 'back'),
            _apic(png_bytes(4, 3)),
            _apic(jpeg_bytes(5, 2), PictureType.OTHER, 'image/jpeg', 'other'),
        ]
        artworks = artworks_from_pictures(frames)
        self.assertEqual(1, len(artworks))
        self.assertEqual((4, 3, ImageFormat.PNG), (artworks[0].width, artworks[0].height, artworks[0].fmt))

    def test_unreadable_front_cover_dropped(self):
        frames = [_apic(b'garbage'), _apic(jpeg_bytes(5, 2), mime='image/jpeg', desc='2')]
        artworks = artworks_from_pictures(frames)
        self.assertEqual([(5, 2)], [artwork.size for artwork in artworks])

    def test_flac_pictures(self):
        pictures = [_picture(png_bytes(4, 3)), _picture(jpeg_bytes(), PictureType.COVER_BACK, 'image/jpeg')]
        artworks = artworks_from_pictures(pictures)
        self.assertEqual(1, len(artworks))
        self.assertEqual(ImageFormat.PNG, artworks[0].fmt)

    def test_unknown_mime_is_jpeg(self):
        artworks = artworks_from_pictures([_picture(png_bytes(), mime='image/x-unknown')])
        self.assertEqual(ImageFormat.JPEG, artworks[0].fmt)

    def test_mp4_covers(self):
        covers = [
            MP4Cover(png_bytes(4, 3), MP4Cover.FORMAT_PNG),
            MP4Cover(b'garbage', MP4Cover.FORMAT_JPEG),
            MP4Cover(jpeg_bytes(5, 2), MP4Cover.FORMAT_JPEG),
        ]
        artworks = artworks_from_mp4_covers(covers)
        self.assertEqual([ImageFormat.PNG, ImageFormat.JPEG], [artwork.fmt for artwork in artworks])
        self.assertEqual([(4, 3), (5, 2)], [artwork.size for artwork in artworks])


class PictureBlockTest(TestCaseBase):
    def test_front_cover_block(self):
        artwork = artwork_from_picture_block(_block_value(_picture(png_bytes(4, 3))))
        self.assertEqual((4, 3, ImageFormat.PNG), (artwork.width, artwork.height, artwork.fmt))

    def test_back_cover_block_skipped(self):
        self.assertIsNone(artwork_from_picture_block(_block_value(_picture(png_bytes(), PictureType.COVER_BACK))))

    def test_invalid_base64(self):
        with self.assertRaises(PictureDecodeError):
            artwork_from_picture_block('abc')
        with self.assertRaises(PictureDecodeError):
            artwork_from_picture_block('éééé')

    def test_malformed_block_uses_offset(self):
        data = png_bytes(4, 3)
        mime = b'image/jpeg'
        header = struct.pack('>2I', 3, len(mime)) + mime + struct.pack('>I', 0)
        header += struct.pack('>5I', 0, 0, 0, 0, len(data) + 100)  # data length is larger than the actual data
        self.assertEqual(42, len(header))
        artwork = artwork_from_picture_block(b64encode(header + data).decode('ascii'))
        self.assertEqual((4, 3), artwork.size)
        self.assertEqual(ImageFormat.JPEG, artwork.fmt)

    def test_malformed_png_block_uses_second_offset(self):
        data = jpeg_bytes(5, 2)
        mime = b'image/png'
        header = struct.pack('>2I', 3, len(mime)) + mime + struct.pack('>I', 0)
        header += struct.pack('>5I', 0, 0, 0, 0, len(data) + 1)
        self.assertEqual(41, len(header))
        artwork = artwork_from_picture_block(b64encode(header + data).decode('ascii'))
        self.assertEqual((5, 2), artwork.size)

    def test_unreadable_block(self):
        self.assertIsNone(artwork_from_picture_block(b64encode(bytes(10)).decode('ascii')))


class PictureEmbeddingTest(TestCaseBase):
    def test_apic(self):
        frame = apic_for_artwork(Artwork.from_bytes(png_bytes(), ImageFormat.PNG))
        self.assertEqual(PictureType.COVER_FRONT, frame.type)
        self.assertEqual('image/png', frame.mime)
        self.assertEqual(png_bytes(), frame.data)

    def test_flac_picture(self):
        picture = picture_for_artwork(Artwork.from_bytes(png_bytes(4, 3), ImageFormat.PNG))
        self.assertEqual(PictureType.COVER_FRONT, picture.type)
        self.assertEqual('image/png', picture.mime)
        self.assertEqual((4, 3, 24), (picture.width, picture.height, picture.depth))

    def test_flac_picture_depth(self):
        gray = picture_for_artwork(Artwork.from_bytes(png_bytes(mode='L'), ImageFormat.PNG))
        self.assertEqual(8, gray.depth)
        bw = picture_for_artwork(Artwork.from_bytes(png_bytes(mode='1'), ImageFormat.PNG))
        self.assertEqual(1, bw.depth)

    def test_mp4_cover(self):
        cover = mp4_cover_for_artwork(Artwork.from_bytes(jpeg_bytes(), ImageFormat.JPEG))
        self.assertEqual(MP4Cover.FORMAT_JPEG, cover.imageformat)
        self.assertEqual(jpeg_bytes(), bytes(cover))


if __name__ == '__main__':
    main()
