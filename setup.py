#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import re
import sys
import os
from setuptools import setup
from pathlib import Path
this_dir = Path(__file__).absolute().parent

VERSION = re.search(r'__version__ = "([^"]+)"',
                    (this_dir / "parlang" / "version.py").read_text()).group(1)

if sys.argv[-1].startswith('publish'):
    if os.system("pip list | grep wheel"):
        print("wheel not installed.\nUse `pip install wheel`.\nExiting.")
        sys.exit()
    if os.system("pip list | grep twine"):
        print("twine not installed.\nUse `pip install twine`.\nExiting.")
        sys.exit()
    os.system("python setup.py sdist bdist_wheel")
    if sys.argv[-1] == 'publishtest':
        os.system("twine upload -r test dist/*")
    else:
        os.system("twine upload dist/*")
    sys.exit()

if __name__ == "__main__":
    setup(
        name="parlang",
        version=VERSION,
        description="Parser combinators for numeric literals and "
        "operator precedence expressions",
        license="MIT",
        python_requires=">=3.8",
        packages=["parlang", "parlang.numeric"],
        install_requires=["click>=7.0"],
        extras_require={
            "test": ["pytest", "flake8", "coverage"],
        },
        classifiers=[
            "Development Status :: 3 - Alpha",
            "Intended Audience :: Developers",
            "Topic :: Software Development :: Interpreters",
            "Topic :: Software Development :: Compilers",
            "License :: OSI Approved :: MIT License",
            "Programming Language :: Python :: 3",
        ],
    )
