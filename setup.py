"""Setup configuration for backoff-service"""
from setuptools import setup, find_packages

setup(
    name="backoff-service",
    version="0.1.0",
    description="Retry fallible operations with exponential backoff",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "PyYAML>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    python_requires=">=3.9",
)
