from setuptools import setup, find_packages

setup(
    name="bmsearch",
    version="0.1.0",
    description="Boyer-Moore line search driven by precomputed skip tables",
    packages=find_packages(include=["bmsearch", "bmsearch.*"]),
    package_data={"bmsearch.config": ["bmsearch.conf"]},
    python_requires=">=3.8",
    install_requires=[
        "psutil>=5.9.0",
    ],
    extras_require={
        "benchmark": [
            "pandas>=1.5.0",
            "matplotlib>=3.6.0",
        ],
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "bmsearch=bmsearch.cli:main",
            "bmtable=bmsearch.cli:make_table",
        ],
    },
)
