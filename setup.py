import os

from setuptools import find_packages, setup


# read the version from the VERSION file
def get_version():
    with open(os.path.join(os.path.dirname(__file__), "VERSION"), "r") as version_file:
        return version_file.read().strip()


# Set the version in the cfneval/version.py file
def set_version_constant(version: str):
    with open(os.path.join(os.path.dirname(__file__), "cfneval", "version.py"), "w") as version_file:
        version_file.write(f'__version__ = "{version}"\n')


version = get_version()
set_version_constant(version)

setup(
    name="cfneval",
    version=version,
    description="Offline resolution of the intrinsic functions of AWS CloudFormation templates",
    python_requires=">=3.8",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "botocore>=1.31",
        "click>=7.1",
        "jsonschema>=4",
        "moto[cloudformation]>=4.2",
        "plux>=1.3",
        "PyYAML>=5.1",
        "rich>=12.3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "cfneval=cfneval.cli.main:main",
        ],
    },
)
