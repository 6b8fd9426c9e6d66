from setuptools import setup, find_packages

setup(
    name="rxren",
    version="1.0.0",
    description="Concurrent regular-expression bulk renamer for files and directories",
    author="Ashwin Nair",
    packages=find_packages(include=["rxcommon", "rxcommon.*", "rxren", "rxren.*"]),
    python_requires=">=3.9",
    install_requires=[
        "PyYAML",
        "rich",
        "tqdm",
        "argcomplete",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "rxren = rxren.cli:main"
        ],
    },
)
