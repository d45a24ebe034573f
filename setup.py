from setuptools import setup, find_packages

setup(
    name="solr-search",
    version="0.1.0",
    packages=find_packages(include=["solr_search", "solr_search.*"]),
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.0.0",
        "requests>=2.28.0",
        "rich>=13.0.0",
        "tabulate>=0.9.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0"
        ],
    },
    entry_points={
        "console_scripts": [
            "solr-search=solr_search.presentation.cli.commands.search_commands:main",
        ],
    },
    python_requires=">=3.10",
)
