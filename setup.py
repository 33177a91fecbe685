"""
ProjectIT setup.py - package configuration.
"""

from setuptools import find_packages, setup

setup(
    name="projectit",
    version="1.0.0",
    description="ProjectIT - project tracking backend with integration webhooks",
    packages=find_packages(include=["projectit", "projectit.*"]),
    package_data={"projectit": ["templates/*.html"]},
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "sqlalchemy>=2.0",
        "structlog>=24.1",
        "httpx>=0.27",
        "celery[redis]>=5.3",
        "redis>=5.0",
        "jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
