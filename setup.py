"""Package setup for pagecrawl."""

from setuptools import setup, find_packages

setup(
    name="pagecrawl",
    version="0.1.0",
    description="Fetch URLs from stdin and emit the href references of each page as JSON",
    license="GPL-3.0-or-later",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "beautifulsoup4>=4.12.0",
        "lxml>=5.0.0",
        "urllib3>=2.0.0",
    ],
    extras_require={
        "ui": [
            "colorlog>=6.8.0",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pagecrawl=pagecrawl.cli:main",
        ],
    },
)
