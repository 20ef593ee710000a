from __future__ import annotations

from setuptools import find_packages, setup

from config.version import PROJECT_VERSION, PYTHON_REQUIRES_SPECIFIER

if __name__ == "__main__":
    setup(
        name="elaguila-community-media",
        version=PROJECT_VERSION,
        python_requires=PYTHON_REQUIRES_SPECIFIER,
        packages=find_packages(include=["config", "elaguila", "src", "src.*"]),
        install_requires=[
            "pydantic>=2.5",
            "python-dotenv>=1.0",
            "tomli-w>=1.0",
            "loguru>=0.7",
            "httpx>=0.27",
            "feedparser>=6.0",
            "requests>=2.31",
            "SQLAlchemy>=2.0",
            "fastapi>=0.110",
            "python-dateutil>=2.8",
            "beautifulsoup4>=4.12",
            "cachetools>=5.3",
            "google-auth>=2.28",
        ],
        extras_require={
            "test": [
                "pytest>=8.0",
                "hypothesis>=6.100",
            ],
        },
    )
