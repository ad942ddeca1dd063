#!/usr/bin/env python3
import setuptools

setuptools.setup(
    name="use-order-fixer",
    version="0.1.0",
    packages=["use_order_fixer"],
    python_requires=">=3.11",
    install_requires=["click"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "uof = use_order_fixer.cli:main",
        ],
    },
    author="",
    description="Command-line tool to check and fix the grouping of Rust use declarations",
    license="MIT",
)
