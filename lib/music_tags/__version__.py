__title__ = 'music_tags'
__description__ = 'Normalized read/write access to MP3, FLAC, M4A and Ogg tags'
__version__ = '0.1.0'
__author__ = 'music_tags developers'
__author_email__ = ''
