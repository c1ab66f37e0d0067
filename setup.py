from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup

PROJECT_ROOT = Path(__file__).resolve().parent
README = (PROJECT_ROOT / "README.md").read_text(encoding="utf-8")

setup(
    name="bikram-sambat-calendar",
    version="0.1.0",
    description="Bikram Sambat (Nepali) calendar conversion for Frappe environments",
    long_description=README,
    long_description_content_type="text/markdown",
    author="Bikram Sambat Calendar Contributors",
    author_email="maintainers@example.com",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "bikram_sambat": ["data/*.json"],
    },
    install_requires=[],
    extras_require={
        # Installed by bench on a Frappe site; the PyPI "frappe" name is a placeholder.
        "frappe": ["frappe>=14.0.0"],
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10",
    classifiers=[
        "Framework :: Frappe",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: Nepali",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Office/Business",
    ],
)
