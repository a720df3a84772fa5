# setup.py
from setuptools import setup, find_packages

setup(
    name="site_health",
    version="0.1.0",
    description="Краулер SiteHealth: поиск SEO-проблем на страницах и health score сайта",
    packages=find_packages(include=["site_health", "site_health.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "Jinja2>=3.1",
        "lxml>=5.0",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "tldextract>=5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "site-health=site_health.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
