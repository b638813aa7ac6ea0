""" Build script for pip and conda package. """
from setuptools import setup, find_packages

VERSION = "0.1.0"

def readme():
    """ Generate readme file. """
    try:
        with open("./readme.md", encoding="utf8") as file:
            return file.read()
    except IOError:
        return ""


setup(
    name="rastergeom",
    version=VERSION,
    author="Casper Fibaek",
    author_email="casperfibaek@gmail.com",
    description="Geometric transformations for gridded rasters",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 2 - Alpha",
    ],
    packages=find_packages(include=["rastergeom", "rastergeom.*"]),
    zip_safe=True,
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "numba",
        "GDAL",
        "beartype",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
)
