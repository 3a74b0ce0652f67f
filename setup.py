from setuptools import setup, find_packages

setup(
    name="ruleforge",
    version="1.0.0",
    description="RuleForge - configurable rule catalogs and hot-reloadable game configurations",
    author="RuleForge Developers",
    packages=find_packages(include=["ruleforge", "ruleforge.*"]),
    include_package_data=True,
    package_data={"ruleforge.catalogs": ["*.yaml"]},
    install_requires=[
        # Core data modeling and validation
        "pydantic>=2.0.0",

        # Environment variables
        "python-dotenv>=1.0.0",

        # CLI and rich output
        "typer>=0.9.0",
        "rich>=13.0.0",

        # YAML support for rule catalogs
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ruleforge = ruleforge.cli:main",
        ],
    },
    python_requires=">=3.11",
    package_dir={"": "."},
)
