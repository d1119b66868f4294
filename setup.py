from setuptools import setup, find_packages

setup(
    name="skillhub",
    version="0.1.0",
    description="skillhub - one local hub of skills, synchronized into every agent tool's skills directory",
    author="skillhub developers",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "typer>=0.16.0",
        "rich>=13.7.1",
        "GitPython>=3.1.43",
        "PyYAML>=6.0.2",
        "python-dotenv>=1.0.1",
    ],
    extras_require={
        "test": ["pytest>=8.3.2"],
    },
    entry_points={
        "console_scripts": [
            "skillhub=skillhub.apps.cli.app:app",  # команда `skillhub`
        ],
    },
)
