from setuptools import setup, find_packages

setup(
    name="bpm-engine",
    version="0.1.0",
    description="Box Plus-Minus player ratings from season box-score totals",
    packages=find_packages(include=["bpm_engine", "bpm_engine.*"]),
    install_requires=[
        "numpy>=1.22.4",
        "pandas>=1.5.3",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "bpm-engine=bpm_engine.main:main",
        ],
    },
)
