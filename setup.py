"""
Setup configuration for sphidewin.

Hide (unmap) X11 windows of a given WM_CLASS and restore them on exit.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = requirements_file.read_text().strip().split("\n") if requirements_file.exists() else []

# Read long description from README if it exists
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="sphidewin",
    version="1.0.0",
    description="Hide/unmap X11 windows of a given WM_CLASS",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="sphidewin contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "sphidewin=sphidewin.cli:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: X11 Applications",
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
        ],
    },
)
