#!python

import os.path
import re

from setuptools import find_packages, setup


def versionstring():
    # Read the version tuple without importing the package, whose imports
    # need the runtime dependencies
    path = os.path.join(os.path.dirname(__file__), "src", "regexfsm", "__init__.py")
    with open(path) as f:
        match = re.search(r"^__version__ = \(([^)]*)\)", f.read(), re.MULTILINE)
    return ".".join(n.strip() for n in match.group(1).split(","))


if __name__ == "__main__":
    setup(
        name="RegexFSM",
        version=versionstring(),
        package_dir={"": "src"},
        packages=find_packages("src"),
        description="Regular expression to finite automaton engine: Thompson "
        "construction, epsilon elimination, subset construction and DFA "
        "minimization over one mutable graph.",
        long_description=open("README.md").read(),
        long_description_content_type="text/markdown",
        license="Two-clause BSD license",
        keywords="regex automaton nfa dfa minimization",
        zip_safe=True,
        python_requires=">=3.8",
        install_requires=[
            "cached-property==1.5.2",
            "loguru==0.7.2",
        ],
        extras_require={
            "test": [
                "pytest==8.3.2",
            ],
        },
        classifiers=[
            "Programming Language :: Python :: 3",
            "Development Status :: 3 - Alpha",
            "Intended Audience :: Developers",
            "Intended Audience :: Education",
            "License :: OSI Approved :: BSD License",
            "Natural Language :: English",
            "Operating System :: OS Independent",
            "Programming Language :: Python :: 3.8",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
            "Topic :: Software Development :: Libraries :: Python Modules",
            "Topic :: Text Processing",
        ],
    )
