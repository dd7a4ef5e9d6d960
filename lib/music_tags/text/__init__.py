from .lyrics import Lyrics, LyricsDuration, split_lyrics, parse_timestamp
