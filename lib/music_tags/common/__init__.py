from .enums import MusicFormat, ImageFormat
