from setuptools import setup, find_packages

INSTALL_REQUIRES = [
    "pydantic>=2.0",
    "sqlalchemy[asyncio]>=2.0",
    "typing-extensions>=4.6.0",
]

EXTRAS_REQUIRE = {
    "litestar": [
        "litestar>=2.0",
    ],
    "scripts": [
        "matplotlib>=3.7",
    ],
    "test": [
        "pytest>=7.4",
        "pytest-asyncio>=0.21",
        "litestar>=2.0",
        "httpx>=0.24",
    ],
}

setup(
    name="perf-history",
    version="0.1.0",
    description="Loads compiler performance measurements and computes rolling weekly trend summaries.",
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=["tests", "tests.*", "scripts", "scripts.*"]),
    python_requires='>=3.10,<3.14',
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
