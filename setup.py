# setup.py
from setuptools import setup, find_packages

setup(
    name="sparselabels",
    version="0.1.0",
    description="Categorical bitmap label indexes for tabular rows",
    author="Randy Davila",
    author_email="rrd6@rice.edu",
    package_dir={"": "src"},
    packages=find_packages(where="src"),      # sparselabels and its submodules
    install_requires=[
        "numpy>=1.24",
        "pandas>=2.0,<3",
        "scipy>=1.10",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
