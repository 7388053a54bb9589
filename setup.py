"""
Setup script for tense-master-engine.

Tense Master is a gamified English grammar trainer. This package holds its
reward engine: quiz scoring, XP/coin rewards, course progress, achievements,
power-ups, streaks and the shop, backed by either the hosted REST API or a
local SQL database.

The 'tm' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="tense-master-engine",
    version="1.0.0",
    description="Scoring, rewards and progression engine for Tense Master grammar quizzes",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["tensemaster", "tensemaster.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
        # Time zones on platforms without a system tz database
        "tzdata; platform_system == 'Windows'",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tm=tensemaster.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="grammar quiz gamification education",
)
