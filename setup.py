"""
Setup script for the Digital Patient Onboarding prototype: an in-memory
simulation of a pre-operative onboarding workflow with stubbed integrations.
"""

import sys
from pathlib import Path
from setuptools import setup, find_packages

# Ensure Python version compatibility
if sys.version_info < (3, 11):
    raise RuntimeError("digital-onboarding requires Python 3.11 or higher")

# Package metadata
PACKAGE_NAME = "digital-onboarding"
VERSION = "0.3.0"
AUTHOR = "Onboarding Prototype Team"
DESCRIPTION = "In-memory digital patient onboarding workflow with stubbed survey, messaging and telehealth integrations"

# Read long description from README
def read_file(filename: str) -> str:
    """Read content from a file."""
    file_path = Path(__file__).parent / filename
    if file_path.exists():
        return file_path.read_text(encoding="utf-8")
    return ""

# Parse requirements from requirements.txt
def parse_requirements(filename: str) -> list:
    """Parse requirements from requirements file."""
    file_path = Path(__file__).parent / filename
    if not file_path.exists():
        # Return core dependencies if requirements.txt doesn't exist
        return [
            "pydantic>=2.5.0",
            "pydantic-settings>=2.1.0",
            "PyYAML>=6.0.0",
            "structlog>=24.1.0",
            "rich>=13.0.0",
            "typer>=0.12.0",
        ]

    requirements = []
    for line in file_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        # Skip empty lines and comments
        if line and not line.startswith("#"):
            requirements.append(line)
    return requirements

# Package classifiers
CLASSIFIERS = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Healthcare Industry",
    "Intended Audience :: Developers",
    "License :: OSI Approved :: MIT License",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3 :: Only",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

# Extra dependencies organized by use case
EXTRAS_REQUIRE = {
    # Testing dependencies
    "test": [
        "pytest>=7.0.0",
        "pytest-cov>=4.0.0",
        "pytest-mock>=3.10.0",
    ],

    # Development dependencies
    "dev": [
        "black>=23.0.0",
        "flake8>=6.0.0",
        "mypy>=1.0.0",
        "isort>=5.12.0",
    ],
}

EXTRAS_REQUIRE["dev-full"] = EXTRAS_REQUIRE["dev"] + EXTRAS_REQUIRE["test"]

# Entry points for command-line interface
ENTRY_POINTS = {
    "console_scripts": [
        "onboarding=onboarding.cli:app",
    ],
}

# Run setup
if __name__ == "__main__":
    setup(
        name=PACKAGE_NAME,
        version=VERSION,
        author=AUTHOR,
        description=DESCRIPTION,
        long_description=read_file("README.md"),
        long_description_content_type="text/markdown",

        packages=find_packages(exclude=["tests*", "docs*", "examples*"]),
        python_requires=">=3.11",
        install_requires=parse_requirements("requirements.txt"),
        extras_require=EXTRAS_REQUIRE,

        classifiers=CLASSIFIERS,
        keywords="patient onboarding health literacy prototype",

        entry_points=ENTRY_POINTS,
        zip_safe=False,
        platforms=["any"],
        license="MIT",
    )
