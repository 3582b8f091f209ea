"""
Setup configuration for the steam boiler controller library.
"""

from setuptools import setup, find_packages

with open("steam_boiler/README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="steam-boiler",
    version="1.0.0",
    author="Steam Boiler Team",
    description="Cyclic steam boiler controller with failure detection and pump allocation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["steam_boiler", "steam_boiler.*"]),
    python_requires=">=3.7",
    install_requires=[
        "numpy>=1.19.0",
        "pyyaml>=5.1",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.10",
        ],
    },
    entry_points={
        "console_scripts": [
            "steam-boiler-replay=steam_boiler.replay:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
