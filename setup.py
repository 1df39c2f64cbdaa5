"""
Setup script for the ingredient → food catalog matcher.
"""
from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text() if readme_path.exists() else ""

setup(
    name="food-matcher",
    version="0.1.0",
    description="Entity resolution of recipe ingredients against a food catalog",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["food_matcher", "food_matcher.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
        "numpy>=1.24.0",
        "pydantic>=2.0.0",
        "openai>=1.0.0",
        "rapidfuzz>=3.0.0",
    ],
    extras_require={
        "semantic": [
            "sentence-transformers>=2.2.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "foodmatch=food_matcher.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Text Processing :: Linguistic",
    ],
)
