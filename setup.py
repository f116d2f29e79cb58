#!/usr/bin/env python
"""Setup configuration for Contact Passports."""

from setuptools import find_packages, setup

setup(
    name="contact-passports",
    version="0.1.0",
    description="Passport data access for contacts",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.5.0",
        "sqlalchemy[asyncio]>=2.0.23",
        "alembic>=1.12.0",
        "asyncpg>=0.29.0",
        "aiosqlite>=0.19.0",
        "tenacity>=8.2.0",
        "pydantic-settings>=2.0.0",
        "structlog>=23.2.0",
        "click>=8.2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "contact-passports=contact_passports.cli:main",
        ],
    },
)
