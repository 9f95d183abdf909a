from setuptools import setup, find_packages

setup(
    name="paladin",
    version="0.1.0",
    description="Protection of critical resources against asynchronous interruption signals",
    license="MIT",
    python_requires=">=3.8",
    install_requires=[
        "pydantic>=1.8",
        "rich",
        "termcolor",
    ],
    extras_require={
        "test": ["pytest"],
    },
    packages=find_packages(exclude=("test", "test.*")),
)
