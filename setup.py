#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""The setup script."""

from setuptools import setup, find_packages

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('HISTORY.rst') as history_file:
    history = history_file.read()

setup(
    name='asteroid-tpm',
    version='0.1.0',
    description="Thermophysical model of single and binary asteroids",
    long_description=readme + '\n\n' + history,
    author="Paul O. Hayne",
    author_email='paul.hayne@lasp.colorado.edu',
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': [
            'asteroid-tpm=asteroid_tpm.cli:main'
        ]
    },
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'Click>=6.0',
        'numpy',
        'numba',
        'astropy',
        'h5py',
        'tqdm',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },
    license="MIT license",
    zip_safe=False,
    keywords='asteroid thermophysical model YORP',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
    ],
)
