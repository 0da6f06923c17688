# setup.py
from setuptools import setup, find_packages

setup(
    name="sitemap_scout",
    version="0.1.0",
    description="Asynchronous sitemap discovery and parsing tool SitemapScout",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"sitemap_scout": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.10",
        "beautifulsoup4>=4.12",
        "lxml>=4.9",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.2",
        "Jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "sitemap-scout=sitemap_scout.cli:main",
        ],
    },
    python_requires=">=3.11",
)
