"""
Setup script for Flask Resource Controller
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="flask-resource-controller",
    version="1.0.0",
    author="Resource Controller Team",
    author_email="dev@example.com",
    description="Abstract base controller for CRUD resource controllers on Flask",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/your-org/flask-resource-controller",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Framework :: Flask",
        "Topic :: Software Development :: Libraries :: Application Frameworks",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=[
        "flask>=2.3.0",
        "flask-babel>=4.0.0",
        "marshmallow>=3.13.0",
        "opentelemetry-api",
        "opentelemetry-sdk",
        "opentelemetry-exporter-otlp-proto-grpc",
        "opentelemetry-instrumentation-flask",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "babel>=2.12",
            "black>=21.0",
            "flake8>=3.9",
        ],
    },
)
