import re
from pathlib import Path

from setuptools import setup

version = re.search(r'__version__ = "([^"]+)"', Path("clog/_version.py").read_text()).group(1)

setup(
    name="clog",
    long_description="clog is a small leveled logging facility writing printf-style messages as text, XML, "
    "tab-separated values or JSON, with optional time, source location, function and color headers.",
    version=version,
    packages=[
        "clog",
    ],
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "click>=8.0.3,<9.0.0",
        "pyyaml>=6.0.0,<7.0.0",
        "pyserde>=0.12.0",
        "beartype>=0.17.0,<1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
        ],
    },
    entry_points="""
        [console_scripts]
        clog=clog.cli:cli
    """,
)
