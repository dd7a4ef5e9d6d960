"""
Tag IDs and other constants shared by the format-specific tag handlers.
"""

TYPED_TAG_MAP = {   # See: https://wiki.hydrogenaud.io/index.php?title=Tag_Mapping
    'title': {'mp4': '\xa9nam', 'id3': 'TIT2', 'vorbis': 'TITLE'},
    'date': {'mp4': '\xa9day', 'id3': 'TDRC', 'vorbis': 'DATE'},
    'album': {'mp4': '\xa9alb', 'id3': 'TALB', 'vorbis': 'ALBUM'},
    'artist': {'mp4': '\xa9ART', 'id3': 'TPE1', 'vorbis': 'ARTIST'},
    'album_artist': {'mp4': 'aART', 'id3': 'TPE2', 'vorbis': 'ALBUMARTIST'},
    'lyrics': {'mp4': '\xa9lyr', 'id3': 'USLT', 'vorbis': 'LYRICS'},
    'cover': {'mp4': 'covr', 'id3': 'APIC', 'vorbis': 'METADATA_BLOCK_PICTURE'},  # flac: FLAC.pictures
}

EXT_FORMAT_MAP = {'mp3': 'mp3', 'flac': 'flac', 'm4a': 'm4a', 'ogg': 'ogg'}

ARTIST_DELIMITERS = ('/', '&')
ARTIST_JOIN = '/'

# Header length of a METADATA_BLOCK_PICTURE with an empty description and a MIME type of image/jpeg (42) or
# image/png (41); only used when the block itself cannot be parsed.
PICTURE_BLOCK_OFFSETS = (42, 41)

LYRICS_LANG = 'XXX'     # ID3 language code for "unknown"
