from setuptools import setup, find_packages

setup(
    name="bridge_core",
    version="0.1.0",
    description="Token, identifier and public key utilities for the Bridge API",
    packages=find_packages(),
    install_requires=[
        "cryptography>=41.0",
        "email-validator>=2.0",
    ],
    python_requires=">=3.9",
)
