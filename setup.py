#!/usr/bin/env python3
# setup.py

from setuptools import setup, find_packages
import pathlib

here = pathlib.Path(__file__).parent.resolve()
long_description = (here / "README.md").read_text(encoding="utf-8")

setup(
    name="floatchat",
    version="1.0.0",
    description="Conversational dashboard prototype for exploring ARGO float profiles",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="FloatChat Team",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Visualization",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="argo, oceanography, chat, dashboard, visualization",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "streamlit>=1.35.0",
        "streamlit-folium>=0.15.0",
        "plotly>=5.15.0",
        "pandas>=2.0.0",
        "numpy>=1.21.0",
        "folium>=0.14.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.3.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
        "test": [
            "pytest>=7.3.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "floatchat=floatchat.main:main",
        ],
    },
)
