"""
Setup configuration for the Option Pricer

Install in development mode:
    pip install -e .

Install with test dependencies:
    pip install -e ".[dev]"
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / 'README.md'
long_description = ""
if readme_file.exists():
    long_description = readme_file.read_text(encoding='utf-8')

setup(
    name="option-pricer",
    version="1.0.0",
    description="European option pricing, strategy analysis and hedging simulation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Option Pricer Team",
    license="MIT",

    packages=find_packages(exclude=["tests", "tests.*"]),

    # Core dependencies
    install_requires=[
        "numpy>=2.0.2",
        "pandas>=2.3.3",
        "scipy>=1.13.1",
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],

    # Development dependencies
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.0.0",
        ],
    },

    # Python version requirement
    python_requires=">=3.9",

    # Package classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Financial and Insurance Industry",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial :: Investment",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],

    # Keywords for package discovery
    keywords="options pricing black-scholes monte-carlo greeks derivatives",

    # Entry points
    entry_points={
        "console_scripts": [
            "option-pricer=optionpricer.cli.cli:main",
        ],
    },

    # Zip safe flag
    zip_safe=False,
)
