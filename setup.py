import re

from setuptools import find_packages, setup

VERSION = '0.1.0'


def parse_version():
    """
    read the version from the package so it is only defined in one place
    """
    with open('src/txanno/__init__.py') as fh:
        match = re.search(r"^__version__\s*=\s*['\"]([^'\"]+)['\"]", fh.read(), re.MULTILINE)
    return match.group(1) if match else VERSION


TEST_REQS = [
    'coverage>=4.2',
    'pycodestyle>=2.3.1',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'biopython>=1.79',
    'braceexpand==0.1.7',
    'pandas>=1.1',
    'shortuuid>=0.5.0',
    'snakemake>=6.1.1',
]


setup(
    name='txanno',
    version=parse_version(),
    package_dir={'': 'src'},
    packages=find_packages(where='src', exclude=['tests']),
    package_data={'txanno': ['schemas/*.json', 'annotate/*.json']},
    description='Transcript-level functional annotation of small genomic variants',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS,
    },
    tests_require=TEST_REQS,
    python_requires='>=3.7',
    test_suite='tests',
    entry_points={'console_scripts': ['txanno = txanno.main:main']},
)
