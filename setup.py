# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="dirmap",
    version="0.1.0",
    description="Compressed, portable size snapshots of directory trees",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["dirmap", "dirmap.*"]),
    python_requires=">=3.8",
    install_requires=[
        "zstandard>=0.18",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'dirmap=dirmap.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
