from setuptools import setup, find_packages

setup(
    name="selenoid-standalone",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "click>=8.0",
        "tenacity>=8.0",
        "python-dotenv>=1.0",
        "structlog>=23.0",
        "pytest>=7.0",
    ],
    entry_points={
        "console_scripts": [
            "selenoid-standalone=selenoid_standalone.CLI.main:main",
        ],
        "pytest11": [
            "selenoid=selenoid_standalone.HOOKS.pytest_plugin",
        ],
    },
)
