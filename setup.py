"""Package configuration."""

from setuptools import setup, find_packages

from pydfufile import __version__, __author__

CLASSIFIERS = [
    'Intended Audience :: Developers',
    'Natural Language :: English',
    'Programming Language :: Python',
    'Topic :: Software Development :: Libraries :: Python Modules',
    'Topic :: System :: Hardware',
]

KEYWORDS = 'dfu, dfuse, dfu-util, firmware, stm32'

with open('requirements.txt', 'r') as fp:
    install_requires = fp.readlines()

with open('requirements-dev.txt', 'r') as fp:
    dev_requires = fp.readlines()

with open('README.md', 'r') as fp:
    long_description = fp.read()

setup(
    name='pydfufile',
    version=__version__,
    python_requires='>=3.9',

    description='parser for DFU and DfuSe firmware container files',
    long_description=long_description,
    long_description_content_type="text/markdown",

    author=__author__,

    classifiers=CLASSIFIERS,
    keywords=KEYWORDS,

    packages=find_packages(exclude=('tests',)),
    install_requires=install_requires,

    extras_require={
        "dev": dev_requires,
    },

    entry_points={
        'console_scripts': ['pydfufile=pydfufile.__main__:main'],
    },

    zip_safe=False,
)
