from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="movie-tonight",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/` and is imported as
    # top-level packages (`import domain`, `import application`, ...).
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
            "config",
            "config.*",
            "server",
            "server.*",
        ],
    ),
    package_data={"domain.config": ["*.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "aiohttp>=3.9",
        "fastapi>=0.110,<0.137",
        "uvicorn>=0.29",
        "pydantic==2.10.6",
        "python-dotenv>=1.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        # Test runner plus the HTTP client FastAPI's TestClient is built on.
        "test": ["pytest>=8.0", "httpx>=0.27"],
    },
)
