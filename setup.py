from setuptools import setup, find_packages

setup(
    name="seam_rpc",
    version="0.1.0",
    description="Seam RPC - transport-agnostic JSON-RPC 2.0 client and server",
    author="Oppie.xyz Team",
    packages=find_packages(include=["seam_rpc", "seam_rpc.*"]),
    install_requires=[
        "pyzmq>=24.0.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0,<9",
            "pytest-asyncio",
            "pytest-benchmark",
            "pytest-cov",
        ],
        "dev": [
            "pytest>=7.0.0,<9",
            "pytest-asyncio",
            "pytest-benchmark",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    python_requires=">=3.9",
)
