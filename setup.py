"""Setup script for the EUEM endpoint metrics collector."""

from setuptools import find_packages, setup

setup(
    name="euem-endpoint-metrics",
    version="0.1.0",
    description="Collects Citrix EUEM endpoint metrics from WMI and prints them as key=value lines for uberAgent",
    author="EUEM Metrics Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "pandas>=2.0",
        "pyyaml>=6.0",
        "pydantic>=2.0",
        "click>=8.1",
        "pywin32>=306; sys_platform == 'win32'",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "euem-metrics=euem_metrics.cli:cli",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: System Administrators",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
