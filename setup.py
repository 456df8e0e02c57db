from setuptools import find_packages, setup

setup(
    name="annotation-metadata",
    version="0.1.0",
    description=(
        "Classification and aggregation of annotated e-commerce "
        "screenshot metadata"
    ),
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
        ]
    },
    python_requires=">=3.9",
)
