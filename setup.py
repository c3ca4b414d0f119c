#!/usr/bin/env python
"""
GO Sales ETL Setup
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="gosales-etl",
    version="1.0.0",
    description="Batch ETL producing the curated GO sales analytics table",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["gosales_etl", "gosales_etl.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Information Analysis",
    ],
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "ruff>=0.1.0",
            "mypy>=1.5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gosales-etl=gosales_etl.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
    keywords=[
        "etl",
        "data-pipeline",
        "polars",
        "parquet",
        "sales-analytics",
    ],
)
