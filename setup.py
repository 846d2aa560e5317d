from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="watchlist-sync",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/` and is imported as
    # top-level layers (`domain`, `application`, `infrastructure`, `server`, `config`).
    package_dir={"": "backend"},
    packages=find_packages(
        where="backend",
        include=[
            "domain",
            "domain.*",
            "application",
            "application.*",
            "infrastructure",
            "infrastructure.*",
            "server",
            "server.*",
            "config",
            "config.*",
        ],
    ),
    python_requires=">=3.10",
    install_requires=[
        "pydantic==2.10.6",
        "python-dotenv>=1.0",
        "aiohttp>=3.9",
    ],
    extras_require={
        # Optional: the watchlist REST service.
        "server": [
            "fastapi>=0.110",
            "uvicorn>=0.27",
        ],
        # Optional: Postgres persistence for the REST service.
        "postgres": ["asyncpg>=0.29"],
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
            "fastapi>=0.110",
            "uvicorn>=0.27",
        ],
        # Convenience: all optional deps.
        "full": [
            "fastapi>=0.110",
            "uvicorn>=0.27",
            "asyncpg>=0.29",
        ],
    },
)
