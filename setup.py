"""
Setup script for skillnet-engine.

SkillNet Engine is the learner-progress core of the SkillNet platform:

1. Gamification - XP, activity heatmap, streaks and milestones
2. Checkpoint tests - grading of mcq, coding and project submissions
3. Diagnostics - skill profiling and personalized roadmaps

The 'skillnet' command drives the engine against a local SQLite store.
"""

from setuptools import find_packages, setup

setup(
    name="skillnet-engine",
    version="1.0.0",
    description="Learner progress, gamification and assessment engine for SkillNet",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="SkillNet",
    packages=find_packages(include=["src", "src.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "skillnet=src.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="learning gamification streaks milestones assessment roadmap",
)
