"""Setuptools magic to install plasmidkit."""
import glob
import os

from setuptools import setup, find_packages


def read(fname):
    """Read a file from the current directory."""
    with open(os.path.join(os.path.dirname(__file__), fname), encoding="utf-8") as handle:
        return handle.read()


long_description = read('README.md')

install_requires = [
    'biopython >= 1.78',
    'helperlibs >= 0.2.1',
    'orjson >= 3.6',
]

tests_require = [
    'pytest >= 7.2.0',
    'coverage',
    'pylint',
    'mypy',  # for consistent type checking
]


def read_version():
    """Read the version from the appropriate place in the library."""
    with open(os.path.join('plasmidkit', 'main.py'), 'r', encoding="utf-8") as handle:
        for line in handle:
            if line.startswith('__version__'):
                return line.split('=')[-1].strip().strip('"')
    raise ValueError("unable to find version")


def find_data_files():
    """Setuptools package_data globbing is stupid, so make this work ourselves."""
    data_files = []
    for pathname in glob.glob("plasmidkit/**/*.cfg", recursive=True):
        pathname = glob.escape(pathname)
        pathname = pathname[len("plasmidkit/"):]
        data_files.append(pathname)
    return data_files


setup(
    name="plasmidkit",
    python_requires='>=3.9',
    version=read_version(),
    packages=find_packages(exclude=["*.tests", "*.tests.*", "tests.*", "tests"]),
    package_data={
        'plasmidkit': find_data_files(),
    },
    author='plasmidkit development team',
    description='Plasmid sequence file parsing and restriction cloning simulation.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    install_requires=install_requires,
    entry_points={
        'console_scripts': [
            'plasmidkit=plasmidkit.__main__:entrypoint',
        ],
    },
    license='GNU Affero General Public License v3 or later (AGPLv3+)',
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Bio-Informatics',
        'License :: OSI Approved :: GNU Affero General Public License v3 or later (AGPLv3+)',
        'Operating System :: OS Independent',
    ],
    extras_require={
        'testing': tests_require,
    },
)
