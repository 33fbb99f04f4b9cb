import os

from setuptools import find_packages, setup

long_description = ""
if os.path.exists("README.md"):
    with open("README.md", encoding="utf-8") as fh:
        long_description = fh.read()

requirements_path = "requirements.txt"
if os.path.exists(requirements_path):
    with open(requirements_path, encoding="utf-8") as fh:
        requirements = [
            line.strip()
            for line in fh
            if line.strip() and not line.startswith("#") and not line.startswith("-r")
        ]
else:
    requirements = ["rich>=13.0.0"]

setup(
    name="permscout",
    version="0.1.0",
    author="Permscout Developers",
    description="Find files a user/group pair can write to, for privilege-escalation audits",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["permscout", "permscout.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: System Administrators",
        "Topic :: Security",
        "Topic :: System :: Systems Administration",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: POSIX :: Linux",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "permscout=permscout.cli:main",
        ],
    },
    include_package_data=True,
)
