#!/usr/bin/env python3
"""
Setup script for Kharcha

Install with:
    pip install -e .

Or with test tooling:
    pip install -e ".[dev]"
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

# Server dependencies
requirements = [
    "fastapi>=0.110.0",
    "uvicorn[standard]>=0.27.0",
    "sqlalchemy[asyncio]>=2.0.25",
    "aiosqlite>=0.19.0",
    "asyncpg>=0.29.0",
    "pydantic>=2.5.0",
    "pydantic-settings>=2.1.0",
    "email-validator>=2.1.0",
    "python-jose[cryptography]>=3.3.0",
    "celery>=5.3.0",
    "redis>=5.0.0",
    "slowapi>=0.1.9",
    "httpx>=0.26.0",
    "aiosmtplib>=3.0.0",
    "jinja2>=3.1.3",
    "python-multipart>=0.0.9",
    "python-dotenv>=1.0.0",
    "rich>=13.7.0",
]

setup(
    name="kharcha",
    version="1.0.0",
    description="Kharcha - personal finance tracker for outflows, subscriptions, loans and money lent",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Kharcha Team",
    license="MIT",
    package_dir={"kharcha": "backend/kharcha", "cli": "cli"},
    packages=["cli"] + [
        "kharcha." + name if name else "kharcha"
        for name in [""] + find_packages("backend/kharcha")
    ],
    package_data={
        "kharcha": [
            "web/templates/*/*.html",
            "web/templates/*/*.txt",
            "web/static/*",
        ],
    },
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "faker>=22.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kharcha=cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial",
    ],
    keywords="finance expenses budgeting subscriptions reminders",
)
