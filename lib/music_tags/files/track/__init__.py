"""
Canonical tag model, format-specific tag handlers, and tag value parsing
"""

from importlib import import_module

__attr_module_map = {
    'MusicTag': 'tag',
    'read_from_path': 'tag',
    'read_from_bytes': 'tag',
    'write_to_path': 'tag',
    'TagFormat': 'formats',
    'split_artist': 'parsing',
    'split_artists': 'parsing',
}

# noinspection PyUnresolvedReferences
__all__ = ['formats', 'parsing', 'tag']
__all__.extend(__attr_module_map.keys())


def __dir__():
    return sorted(__all__ + list(globals().keys()))


def __getattr__(name):
    try:
        module_name = __attr_module_map[name]
    except KeyError:
        raise AttributeError(f'module {__name__!r} has no attribute {name!r}')
    else:
        module = import_module(f'.{module_name}', __name__)
        return getattr(module, name)
