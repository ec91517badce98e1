"""Setup script for bluegreen-deploy."""

from setuptools import find_packages, setup

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="bluegreen-deploy",
    version="1.0.0",
    description="Blue/green deployments for ECS services behind an Application Load Balancer",
    author="Platform Engineering",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "bluegreen-deploy=bluegreen_deploy.__main__:main",
        ],
    },
)
