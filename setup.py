#!/usr/bin/env python

from itertools import chain
from pathlib import Path
from setuptools import setup, find_packages

project_root = Path(__file__).resolve().parent
requirements = project_root.joinpath('requirements.txt').read_text('utf-8').splitlines()
long_description = project_root.joinpath('readme.rst').read_text('utf-8')

about = {}
with project_root.joinpath('lib', 'music_tags', '__version__.py').open('r', encoding='utf-8') as f:
    exec(f.read(), about)

optional_dependencies = {
    'dev': ['pre-commit', 'ipython'],   # Development env requirements
    'test': ['pytest'],
}
optional_dependencies['ALL'] = sorted(set(chain.from_iterable(optional_dependencies.values())))


setup(
    name=about['__title__'],
    version=about['__version__'],
    author=about['__author__'],
    author_email=about['__author_email__'],
    description=about['__description__'],
    long_description=long_description,
    packages=find_packages('lib'),
    package_dir={'': 'lib'},
    classifiers=[
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',  # Due to use of match/case
    ],
    python_requires='>=3.10',
    install_requires=requirements,
    extras_require=optional_dependencies,
)
