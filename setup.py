from setuptools import setup, find_packages
import os
import sys

# Add src to path to import version
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))
from gridsynth.__version__ import __version__, __author__, __author_email__, __description__, __url__, __license__

def read_requirements(filename='requirements.txt'):
    """Read requirements from a requirements file"""
    requirements_path = os.path.join(os.path.dirname(__file__), filename)
    if not os.path.exists(requirements_path):
        return []
    with open(requirements_path, 'r', encoding='utf-8') as f:
        requirements = []
        for line in f:
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            if '==' in line:
                # Pins become minimum versions
                package, version = line.split('==', 1)
                requirements.append(f"{package}>={version}")
            else:
                requirements.append(line)
        return requirements

long_description = ""
if os.path.exists("README.md"):
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()

setup(
    name="gridsynth",
    version=__version__,
    description=__description__,
    long_description=long_description,
    long_description_content_type="text/markdown",
    author=__author__,
    author_email=__author_email__,
    url=__url__,
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=read_requirements(),
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires=">=3.8",
    entry_points={
        'console_scripts': [
            'gridsynth = gridsynth.main:main',
        ],
    },
    include_package_data=True,
    license=__license__,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU Affero General Public License v3",
        "Operating System :: OS Independent",
    ],
)
