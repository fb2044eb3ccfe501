#!/usr/bin/env python
# encoding: UTF-8

import os

from setuptools import setup


long_description = ""
if os.path.isfile("README.rst"):
    long_description = open("README.rst", "r", encoding="UTF-8").read()


setup(
    name="gmi2gopher",
    version="0.1.0",
    description="Converts Gemtext (Gemini markup format) to Gopher maps or plain text",
    license="GPLv3",
    long_description=long_description,
    keywords="gemtext gmi gemini gopher gophermap convert plaintext",
    py_modules=["gmi2gopher"],
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "dev": [
            "nox",
            "flake8",
            "pytest",
            "black",
        ]
    },
    entry_points={
        "console_scripts": [
            "gmi2gopher = gmi2gopher:main",
        ],
    },
)
