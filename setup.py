from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="node-telemetry",
    version="0.1.0",
    description="Dynamic registry of datalink telemetry targets for cluster nodes",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["node_telemetry*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.10",
    install_requires=[
        "python-dotenv>=1.0.1",
        "pydantic>=2.10.3",
        "colorlog>=6.9.0",
        "prometheus-client>=0.20.0",
        "psutil>=5.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
)
