#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
zmqcat - 连接标准输入输出与ZeroMQ的命令行工具
设置脚本，用于打包和发布
"""

from setuptools import setup, find_packages

# 读取README文件
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# 读取requirements文件
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="zmqcat",
    version="1.0.0",
    author="liber",
    author_email="liberalcxl@gmail.com",
    description="连接标准输入输出与ZeroMQ的命令行工具，支持PUB/SUB、REQ/REP和PUSH/PULL",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["casetest", "casetest.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: System :: Networking",
        "Topic :: Utilities",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "zmqcat=zmqcat.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
