# setup.py
from setuptools import setup, find_packages

setup(
    name="render_scout",
    version="0.1.0",
    description="Headless rendering, screenshots and calendar availability scraping",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
        "beautifulsoup4>=4.12",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "aiohttp>=3.9",
        ],
    },
    entry_points={
        "console_scripts": [
            "render-scout=render_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
