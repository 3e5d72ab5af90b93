# setup.py
from setuptools import setup, find_packages

setup(
    name="spoonplanner",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "python-dateutil",
        "PySide6",
        "matplotlib",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-qt",
        ],
    },
    entry_points={
        "console_scripts": [
            "spoonplanner=spoonplanner.main:main",
        ],
    },
)
