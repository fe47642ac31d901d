#!/usr/bin/env python3
"""
Setup script for runtimedist.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="runtimedist",
    version="0.1.0",
    description="Publish verified runtime binaries as a static catalog and PEP 503-style simple index",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Runtimedist Contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "runtimedist.sitegen": ["templates/*.html", "assets/*.css"],
    },
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1.0",
        "jinja2>=3.1.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "rtd=runtimedist.cli.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Build Tools",
        "Topic :: System :: Software Distribution",
    ],
    keywords="release artifacts static-site pep503 simple-index",
)
