"""Setup script for Loomstats workflow state instrumentation."""

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="loomstats",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Size and count statistics for durable workflow mutable state",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/loomstats",
    packages=find_packages(include=["loomstats", "loomstats.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: System :: Monitoring",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "pydantic>=2.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "mypy>=1.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "loomstats=loomstats.cli.cli:cli",
        ],
    },
)
