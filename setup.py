from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup


ROOT = Path(__file__).resolve().parent


def requirements(filename: str) -> list[str]:
    """Pins from a requirements file; comments and `-r` includes are skipped."""
    lines = (ROOT / filename).read_text(encoding="utf-8").splitlines()
    return [s for s in (line.strip() for line in lines) if s and not s.startswith(("#", "-r"))]


version = (ROOT / "omnivox" / "VERSION").read_text(encoding="utf-8").strip()

setup(
    name="omnivox-lea",
    version=version,
    description="Omnivox / Léa scraper: course documents, assignments and calendar events (CLI)",
    long_description=(ROOT / "README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", ".github")),
    package_data={"omnivox": ["VERSION"]},
    python_requires=">=3.9",
    install_requires=requirements("requirements.txt"),
    extras_require={"dev": requirements("requirements-dev.txt")},
    entry_points={"console_scripts": ["omnivox=omnivox.cli:main"]},
)
