# setup.py
from setuptools import setup, find_packages

setup(
    name="storyforge_layout",
    version="0.1.0",
    description="StoryForge relationship-graph layout engine",
    author="Swift Fox",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "dist",
            "build",
        )
    ),
    install_requires=[
        "numpy",
        "networkx",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "storyforge-layout=storyforge_layout.cli:main",
        ],
    },
    python_requires=">=3.10",
)
